"""
StayPlaces API: Request ID Middleware
======================================

What:  Assigns a short correlation ID to each incoming request and returns it.
How:   Reuses the client's X-Request-ID header or generates one, stores it in
       a ContextVar for loggers and error handlers, echoes it in the response.
Who:   Applied to every request via Starlette middleware.
When:  Before request logging, so the access line carries the ID.

The same ID appears in error response bodies (`request_id`) so a client
report can be matched to the server log line.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware that assigns a unique ID to each request for tracing.

    Behavior:
        1. Use X-Request-ID from the client when present
        2. Otherwise generate the first 8 characters of a UUID4
        3. Store it in request_id_var and request.state.request_id
        4. Add it to the response headers
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID", str(uuid.uuid4())[:8])

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)

        response.headers["X-Request-ID"] = rid
        return response
