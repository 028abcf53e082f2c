"""
StayPlaces API: Place Service (Business Logic)
===============================================

What:  List, search, create, update and delete places.
How:   Every operation reads the full array through the repository, works
       on it in memory, and (for mutations) writes the full array back.
Who:   Called by the /places route handlers.
When:  Once per request; no place data is kept between requests.

Mutation Flow (create):
    ┌───────────┐   ┌────────────┐   ┌───────────┐   ┌──────────┐   ┌──────────┐
    │ Validate  │──▶│ Upload     │──▶│ Load all  │──▶│ Append   │──▶│ Save all │
    │ payload   │   │ images     │   │ (repo)    │   │ record   │   │ (repo)   │
    └───────────┘   └────────────┘   └───────────┘   └──────────┘   └──────────┘

    A failure before "Save all" leaves the places file untouched.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from stayplaces.exceptions import NotFoundError
from stayplaces.repository import Place, PlaceRepository, place_repository
from stayplaces.services.media_service import ImageUpload, MediaService, media_service
from stayplaces.services.validator import PLACE_RULES, ensure_valid

logger = logging.getLogger(__name__)

# Keys the server owns on create; client values for them are replaced
SERVER_FIELDS = ("_id", "images", "bookings", "reviews", "createdAt", "updatedAt")

# Keys an update body can never change; the list fields are server-owned
IMMUTABLE_FIELDS = ("_id", "images", "bookings", "reviews", "createdAt")

# Fields compared against the token by search(); dotted paths reach into address
SEARCH_FIELDS = ("_id", "title", "address.city", "address.zipcode", "address.country")


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _field(place: Place, path: str) -> Any:
    value: Any = place
    for key in path.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def _index_of(places: List[Place], place_id: str) -> int:
    for index, place in enumerate(places):
        if place.get("_id") == place_id:
            return index
    return -1


class PlaceService:
    """
    Business logic layer for place operations.

    Responsibilities:
        - list_places():  all places, or exact-title matches
        - search():       exact match on id/title/city/zipcode/country
        - create_place(): validate → upload images → append → persist
        - update_place(): find → shallow merge (minus IMMUTABLE_FIELDS) → validate → persist
        - delete_place(): find → remove → persist

    Error Handling Strategy:
        ValidationError, NotFoundError, StorageError and MediaUploadError
        propagate unchanged to the global handlers in main.py.
    """

    def __init__(
        self,
        repository: Optional[PlaceRepository] = None,
        media: Optional[MediaService] = None,
    ):
        self.repository = repository or place_repository
        self.media = media or media_service

    async def list_places(self, title: Optional[str] = None) -> List[Place]:
        """
        Return every place, or only those whose title equals `title` exactly.

        An empty or missing title means no filter.
        """
        places = await self.repository.load()
        if not title:
            return places
        return [place for place in places if place.get("title") == title]

    async def search(self, token: str) -> List[Place]:
        """
        Return places where any of SEARCH_FIELDS equals token.

        Matching is exact and case-sensitive. No match is an empty list,
        not an error.
        """
        places = await self.repository.load()
        return [
            place for place in places
            if any(_field(place, path) == token for path in SEARCH_FIELDS)
        ]

    async def create_place(
        self,
        payload: Any,
        images: Sequence[ImageUpload] = (),
    ) -> str:
        """
        Validate, upload images, append and persist a new place.

        Args:
            payload: Decoded JSON body of the `place` form field.
            images:  (filename, content, content_type) for each uploaded file.

        Returns:
            The generated identifier of the new place.

        Raises:
            ValidationError:  payload or image files rejected (store unchanged)
            MediaUploadError: media host failed (store unchanged)
            StorageError:     places file could not be read or written
        """
        ensure_valid(payload, PLACE_RULES)

        image_urls = await self.media.upload_images(images)

        async with self.repository.mutation():
            places = await self.repository.load()

            existing_ids = {place.get("_id") for place in places}
            place_id = uuid.uuid4().hex
            while place_id in existing_ids:
                place_id = uuid.uuid4().hex

            now = _utc_now()
            record = {key: value for key, value in payload.items() if key not in SERVER_FIELDS}
            places.append({
                "_id": place_id,
                **record,
                "images": image_urls,
                "bookings": [],
                "reviews": [],
                "createdAt": now,
                "updatedAt": now,
            })
            await self.repository.save(places)

        logger.info("Place created: %s (%d images)", place_id, len(image_urls))
        return place_id

    async def update_place(self, place_id: str, changes: Any) -> List[Place]:
        """
        Shallow-merge `changes` over the stored place and persist.

        Fields not present in `changes` are left as they were. A supplied
        nested object (e.g. `address`) replaces the stored one whole. The
        merged record must still satisfy PLACE_RULES.

        Returns:
            The full, updated sequence of places.

        Raises:
            ValidationError: body is not an object, or merged record is invalid
            NotFoundError:   no place has this identifier
            StorageError:    places file could not be read or written
        """
        if not isinstance(changes, dict):
            ensure_valid(changes, PLACE_RULES)  # always raises: body is not an object

        async with self.repository.mutation():
            places = await self.repository.load()

            index = _index_of(places, place_id)
            if index == -1:
                raise NotFoundError(resource="Place", resource_id=place_id)

            allowed = {key: value for key, value in changes.items() if key not in IMMUTABLE_FIELDS}
            merged = {**places[index], **allowed, "updatedAt": _utc_now()}
            ensure_valid(merged, PLACE_RULES)

            places[index] = merged
            await self.repository.save(places)

        logger.info("Place updated: %s (fields: %s)", place_id, ", ".join(sorted(allowed)) or "none")
        return places

    async def delete_place(self, place_id: str) -> List[Place]:
        """
        Remove the place with this identifier and persist.

        Returns:
            The remaining sequence of places, in their original order.

        Raises:
            NotFoundError: no place has this identifier (store unchanged)
            StorageError:  places file could not be read or written
        """
        async with self.repository.mutation():
            places = await self.repository.load()

            index = _index_of(places, place_id)
            if index == -1:
                raise NotFoundError(resource="Place", resource_id=place_id)

            remaining = places[:index] + places[index + 1:]
            await self.repository.save(remaining)

        logger.info("Place deleted: %s (%d remaining)", place_id, len(remaining))
        return remaining


# ── Singleton Instance ────────────────────────────────────────────────────
place_service = PlaceService()


def get_place_service() -> PlaceService:
    """FastAPI dependency returning the shared PlaceService (overridden in tests)."""
    return place_service
