"""
StayPlaces API: Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── seed_places: Five sample place records
    ├── places_file: Temporary JSON file holding seed_places
    ├── read_store: Reads places_file back for assertions
    ├── repository: PlaceRepository bound to places_file
    ├── media_requests / media: MediaService with cloudinary.uploader.upload patched
    ├── service: PlaceService wired to repository + media
    └── test_client: HTTPX AsyncClient hitting the app with `service` injected
"""

import json
import os
import tempfile

# Settings are read at import time; point them at throwaway values
# BEFORE anything from stayplaces is imported.
_tmp_root = tempfile.mkdtemp(prefix="stayplaces_test_")
os.environ["PLACES_FILE"] = os.path.join(_tmp_root, "places.json")
os.environ["CREATE_PLACES_FILE"] = "false"
os.environ["CLOUDINARY_CLOUD_NAME"] = ""
os.environ["CLOUDINARY_API_KEY"] = ""
os.environ["CLOUDINARY_API_SECRET"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import patch

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from stayplaces.repository import PlaceRepository
from stayplaces.services.media_service import MediaService
from stayplaces.services.place_service import PlaceService, get_place_service

CDN_BASE = "https://res.cloudinary.com/demo/image/upload/v1/test-folder"


def _place(place_id, title, city, zipcode, country, price):
    return {
        "_id": place_id,
        "title": title,
        "description": f"{title} in {city}",
        "price": price,
        "address": {
            "street": "1 Main Street",
            "city": city,
            "zipcode": zipcode,
            "country": country,
            "latitude": 41.9,
            "longitude": 12.5,
        },
        "images": [],
        "bookings": [],
        "reviews": [],
        "createdAt": "2024-01-15T10:00:00+00:00",
        "updatedAt": "2024-01-15T10:00:00+00:00",
    }


@pytest.fixture
def seed_places():
    return [
        _place("rome-1", "Trastevere Loft", "Rome", "00153", "Italy", 120),
        _place("milan-1", "Navigli Studio", "Milan", "20143", "Italy", 95),
        _place("rome-2", "Monti Flat", "Rome", "00184", "Italy", 140),
        _place("paris-1", "Marais Attic", "Paris", "75004", "France", 180),
        _place("rome-3", "Lowercase Rome", "rome", "00100", "Italy", 80),
    ]


@pytest.fixture
def places_file(tmp_path, seed_places):
    path = tmp_path / "places.json"
    path.write_text(json.dumps(seed_places), encoding="utf-8")
    return path


@pytest.fixture
def repository(places_file):
    return PlaceRepository(str(places_file))


@pytest.fixture
def valid_payload():
    """A create body that satisfies every place rule."""
    return {
        "title": "Harbour Cabin",
        "description": "Wooden cabin by the water",
        "price": 75,
        "address": {
            "street": "5 Quay Road",
            "city": "Bergen",
            "zipcode": "5003",
            "country": "Norway",
            "latitude": 60.39,
            "longitude": 5.32,
        },
    }


@pytest.fixture
def media_requests():
    """Options of every upload call the media host received, in order."""
    return []


@pytest.fixture
def media(media_requests):
    """
    MediaService whose uploads go to an in-memory Cloudinary stand-in.

    Each upload returns secure_url `<CDN_BASE>/<n>.jpg`, n counting from 1.
    """
    def fake_upload(file, **options):
        media_requests.append({"content": file.read(), **options})
        n = len(media_requests)
        return {"secure_url": f"{CDN_BASE}/{n}.jpg", "public_id": f"test-folder/{n}"}

    with patch("cloudinary.uploader.upload", side_effect=fake_upload):
        yield MediaService(
            cloud_name="demo",
            api_key="key-123",
            api_secret="secret-456",
            folder="test-folder",
        )


@pytest.fixture
def service(repository, media):
    return PlaceService(repository=repository, media=media)


@pytest.fixture
def sample_image_bytes():
    """Minimal JPEG: SOI marker + JFIF header + EOI marker."""
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )


@pytest_asyncio.fixture
async def test_client(service):
    """
    Async HTTP client talking to the app in-process.

    The PlaceService dependency is overridden with the `service` fixture so
    requests read and write the temporary places file.
    """
    from stayplaces.main import app

    app.dependency_overrides[get_place_service] = lambda: service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def read_store(places_file):
    """Callable returning the current contents of the places file."""
    def _read():
        return json.loads(places_file.read_text(encoding="utf-8"))
    return _read
