"""
StayPlaces API: Places Route Handlers
======================================

What:  The /places resource: list, search, create, update, delete.
How:   Extracts query/path/body data, delegates to PlaceService, returns JSON.
Who:   API clients (listing front-ends, admin tools).

Endpoints:
    GET    /places            all places, or exact `title` matches
    GET    /places/{token}    exact match on id, title, city, zipcode, country
    POST   /places            multipart: `images` files + `place` JSON field → 201
    PUT    /places/{id}       JSON object, shallow merge → updated collection
    DELETE /places/{id}       → remaining collection, 404 if absent

Errors are raised by the service and formatted by the global handlers.
"""

import json
import logging
from typing import Any, List, Optional

from fastapi import APIRouter, Body, Depends, File, Form, Query, UploadFile

from stayplaces.exceptions import ValidationError
from stayplaces.schemas.place import ErrorResponse, Place, PlaceCreated
from stayplaces.services.place_service import PlaceService, get_place_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/places", tags=["Places"])


@router.get(
    "",
    response_model=List[Place],
    response_model_exclude_unset=True,
    responses={500: {"description": "Places store unavailable", "model": ErrorResponse}},
    summary="List places",
    description="Returns every place, or only those whose title equals `title` exactly.",
)
async def list_places(
    title: Optional[str] = Query(default=None, description="Exact title to filter on"),
    service: PlaceService = Depends(get_place_service),
) -> List[dict]:
    return await service.list_places(title=title)


@router.get(
    "/{token}",
    response_model=List[Place],
    response_model_exclude_unset=True,
    responses={500: {"description": "Places store unavailable", "model": ErrorResponse}},
    summary="Search places by exact token",
    description=(
        "Returns places whose identifier, title, city, zipcode or country equals "
        "the token exactly (case-sensitive). No match returns an empty list."
    ),
)
async def search_places(
    token: str,
    service: PlaceService = Depends(get_place_service),
) -> List[dict]:
    return await service.search(token)


@router.post(
    "",
    status_code=201,
    response_model=PlaceCreated,
    responses={
        201: {"description": "Place stored", "model": PlaceCreated},
        400: {"description": "Invalid place payload or image", "model": ErrorResponse},
        502: {"description": "Media host failed", "model": ErrorResponse},
    },
    summary="Create a place",
    description=(
        "Multipart body: `place` holds the JSON-encoded place, `images` any number "
        "of image files. Images are uploaded to the media host and their public "
        "URLs stored on the new place."
    ),
)
async def create_place(
    place: Optional[str] = Form(default=None, description="JSON-encoded place payload"),
    images: Optional[List[UploadFile]] = File(default=None, description="Place images"),
    service: PlaceService = Depends(get_place_service),
) -> PlaceCreated:
    """
    Create a place from a multipart upload.

    Processing Steps:
        1. Decode the `place` field (400 if missing or not JSON)
        2. Read every uploaded file into memory
        3. Delegate validate → upload → append → persist to PlaceService
    """
    if place is None:
        raise ValidationError(message="Place payload is required", field="place")
    try:
        payload = json.loads(place)
    except ValueError:
        raise ValidationError(message="Place payload must be valid JSON", field="place")

    uploads = []
    try:
        for upload in images or []:
            content = await upload.read()
            uploads.append((upload.filename or "upload", content, upload.content_type))
    finally:
        for upload in images or []:
            await upload.close()

    logger.info("Received create request with %d image(s)", len(uploads))

    place_id = await service.create_place(payload, uploads)
    return PlaceCreated(id=place_id)


@router.put(
    "/{place_id}",
    response_model=List[Place],
    response_model_exclude_unset=True,
    responses={
        400: {"description": "Invalid update", "model": ErrorResponse},
        404: {"description": "Place not found", "model": ErrorResponse},
    },
    summary="Update a place",
    description=(
        "Shallow-merges the JSON object body over the stored place and returns the "
        "full updated collection. `_id` and `createdAt` cannot be changed."
    ),
)
async def update_place(
    place_id: str,
    changes: Any = Body(default=None),
    service: PlaceService = Depends(get_place_service),
) -> List[dict]:
    return await service.update_place(place_id, changes)


@router.delete(
    "/{place_id}",
    response_model=List[Place],
    response_model_exclude_unset=True,
    responses={404: {"description": "Place not found", "model": ErrorResponse}},
    summary="Delete a place",
    description="Removes the place and returns the remaining collection.",
)
async def delete_place(
    place_id: str,
    service: PlaceService = Depends(get_place_service),
) -> List[dict]:
    return await service.delete_place(place_id)
