"""
StayPlaces API: Health Check Route
===================================

What:  Health check endpoint for monitoring and load balancer checks.
How:   Reads the places file through the repository and reports whether the
       media host is configured.
Who:   Called by container health checks, load balancers, and monitoring.

Status levels:
    - healthy:   places file readable (HTTP 200)
    - unhealthy: places file missing or unreadable (HTTP 503)

The media host is reported but not contacted: its status never makes the
service unhealthy, since places without images still work.
"""

import logging
import time

from fastapi import APIRouter, Response

from stayplaces import __version__
from stayplaces.exceptions import StorageError
from stayplaces.repository import place_repository
from stayplaces.schemas.place import HealthResponse
from stayplaces.services.media_service import media_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Places store unavailable", "model": HealthResponse}},
    summary="Service health check",
    description=(
        "Returns the health status of the service: whether the places file can be "
        "read and whether image uploads are configured."
    ),
)
async def health_check(response: Response) -> HealthResponse:
    store_status = "readable"
    place_count = None
    overall = "healthy"

    try:
        place_count = len(await place_repository.load())
    except StorageError as e:
        store_status = "unavailable"
        overall = "unhealthy"
        logger.warning("Health check: places store unavailable: %s", e.context)

    if overall == "unhealthy":
        response.status_code = 503

    return HealthResponse(
        status=overall,
        version=__version__,
        store=store_status,
        place_count=place_count,
        media_host="configured" if media_service.is_configured else "not_configured",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
