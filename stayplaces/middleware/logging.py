"""
StayPlaces API: Request Logging Middleware
===========================================

What:  One access log line for every HTTP request.
How:   Measures the time around the downstream call and logs method, path,
       status, duration, request ID and client address.
Who:   Applied to every request via Starlette middleware.
When:  After RequestIDMiddleware has set the request ID.

Log line:
    2024-01-15T12:00:00 [INFO] stayplaces.access: PUT /places/9f2c 200 4.2ms [a1b2c3d4] from 127.0.0.1

Request bodies are never logged (place payloads and image bytes).
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from stayplaces.middleware.request_id import request_id_var

logger = logging.getLogger("stayplaces.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs method, path, status and duration of each request.

    Level by status class:
        5xx → ERROR
        4xx → WARNING
        2xx/3xx → INFO

    /health is skipped (monitors poll it every few seconds).
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()

        client_ip = getattr(request.client, "host", "unknown") if request.client else "unknown"
        method = request.method
        path = request.url.path
        rid = request_id_var.get("")

        if path == "/health":
            return await call_next(request)

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000

        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
