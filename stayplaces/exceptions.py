"""
StayPlaces API: Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions for each failure the API reports.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with the right status code.
Who:   Raised by the repository and services; caught by global handlers.
When:  During request processing; routes never catch them.

Exception Hierarchy:
    StayPlacesError (base)      → 500 Internal Server Error
    ├── ValidationError         → 400 Bad Request (client can fix)
    ├── NotFoundError           → 404 Not Found
    ├── StorageError            → 500 Internal Server Error
    └── MediaUploadError        → 502 Bad Gateway
"""

from typing import Any, Dict, List, Optional


class StayPlacesError(Exception):
    """
    Base exception for all StayPlaces application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only where the handler says so)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(StayPlacesError):
    """
    Raised when client input fails validation.

    What:    The client sent data that can be corrected and resent.
    When:    Missing or empty required place fields, wrong field types,
             a payload that is not a JSON object, rejected image files.
    HTTP:    400 Bad Request

    `errors` is the list of field-level messages produced by the validator,
    each shaped `{"field": "address.city", "message": "City is required"}`.

    Example response:
        {
            "error": "validation_error",
            "message": "Place validation failed",
            "details": {"errors": [{"field": "title", "message": "Title is required"}]}
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        errors: Optional[List[Dict[str, str]]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if errors is None:
            errors = [{"field": field, "message": message}] if field else []
        ctx = context or {}
        if field:
            ctx["field"] = field
        ctx["errors"] = errors
        super().__init__(message=message, context=ctx)
        self.field = field
        self.errors = errors


class NotFoundError(StayPlacesError):
    """
    Raised when a requested resource does not exist.

    When:    PUT or DELETE /places/{id} with an identifier nobody holds.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class StorageError(StayPlacesError):
    """
    Raised when the places file cannot be read, parsed, or written.

    When:    File missing, permission denied, disk full, malformed JSON,
             top-level value that is not an array.
    HTTP:    500 Internal Server Error

    The client gets a generic message; the path and OS/parse error are
    kept in `context` for the server log.
    """

    def __init__(
        self,
        message: str = "The places store is unavailable. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class MediaUploadError(StayPlacesError):
    """
    Raised when the media host does not accept an image.

    When:    Credentials missing, connection/timeout error, non-2xx reply,
             or a reply without a public URL.
    HTTP:    502 Bad Gateway (the upstream service failed, not our server)
    """

    def __init__(
        self,
        message: str = "Image hosting service failed to accept the upload",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
