"""
StayPlaces API: Pydantic Request/Response Schemas
==================================================

What:  Pydantic models describing the places API contract.
How:   FastAPI uses these models to serialize responses and generate the
       OpenAPI documentation.
Who:   Route handlers (response_model) and API consumers.

Design Decision:
    Response models are deliberately lenient (every field optional, extra
    keys allowed). Stored records are returned as they are on disk: the
    strict rules live in the validator and run before anything is written,
    so a hand-edited record with a missing field still lists instead of
    failing the whole response. Scalar fields accept ints, floats and
    strings in smart-union mode, so a stored 120 stays 120 on the wire.
"""

from typing import Any, List, Optional, Union

from pydantic import BaseModel, Field

# Stored scalar as it appears in the JSON file; int is tried before float
Scalar = Union[int, float, str]


# ══════════════════════════════════════════════════════════════════════════
# Place Models: What the API returns for stored records
# ══════════════════════════════════════════════════════════════════════════


class Address(BaseModel):
    """Postal address and coordinates of a place."""
    street: Optional[Scalar] = Field(default=None, description="Street and number")
    city: Optional[Scalar] = Field(default=None, description="City (exact-match searchable)")
    zipcode: Optional[Scalar] = Field(default=None, description="Postal code (exact-match searchable)")
    country: Optional[Scalar] = Field(default=None, description="Country (exact-match searchable)")
    latitude: Optional[Scalar] = Field(default=None, description="Latitude in degrees")
    longitude: Optional[Scalar] = Field(default=None, description="Longitude in degrees")

    model_config = {"extra": "allow"}


class Place(BaseModel):
    """
    What:  One stored place record.
    Who:   Returned (as lists) by every GET, PUT and DELETE under /places.

    Fields:
        id:        Serialized as `_id`; generated on create, never changes
        images:    Public URLs returned by the media host
        bookings:  Present and initially empty; nothing populates it yet
        reviews:   Present and initially empty; nothing populates it yet
        createdAt / updatedAt: UTC ISO 8601 strings
    """
    id: str = Field(alias="_id", description="Unique place identifier")
    title: Optional[str] = Field(default=None, description="Listing title")
    description: Optional[str] = Field(default=None, description="Listing description")
    price: Optional[Union[int, float]] = Field(default=None, description="Price per night")
    address: Optional[Address] = Field(default=None)
    images: Optional[List[Any]] = Field(default=None, description="Public image URLs")
    bookings: Optional[List[Any]] = Field(default=None)
    reviews: Optional[List[Any]] = Field(default=None)
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")

    model_config = {"extra": "allow", "populate_by_name": True}


class PlaceCreated(BaseModel):
    """
    What:  Response after a place was stored.
    Who:   Returned by POST /places with HTTP 201 Created.
    """
    id: str = Field(alias="_id", description="Identifier of the new place")

    model_config = {"populate_by_name": True}


# ══════════════════════════════════════════════════════════════════════════
# Error & Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Fields:
        error: Machine-readable error code (e.g., "validation_error", "not_found")
        message: Human-readable description for display to users
        details: Extra context; for validation errors `{"errors": [{field, message}, ...]}`
        request_id: Correlation ID for tracing this error in server logs

    Example:
        {
            "error": "validation_error",
            "message": "Place validation failed",
            "details": {"errors": [{"field": "title", "message": "Title is required"}]},
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and dependency status.
    Who:   Returned by GET /health for monitoring and load balancer health checks.
    """
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    store: str = Field(description="Places file status: readable, unavailable")
    place_count: Optional[int] = Field(default=None, description="Records in the places file")
    media_host: str = Field(description="Media host status: configured, not_configured")
    uptime_seconds: float = Field(description="Seconds since service started")
