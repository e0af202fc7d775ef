"""
Gallery API — Request ID Middleware
=====================================

What:  Tags every request with a short correlation ID and echoes it back.
Why:   Upload and delete touch two remote services; the ID ties together the
       log lines each request produces (route, Cloudinary, MongoDB, handler).
How:   Honours an incoming X-Request-ID header, otherwise generates one.
       The value lives in a ContextVar so loggers and exception handlers
       can read it without access to the request object.

The ID is returned only as a response header; response bodies keep their
plain {"error": ...} / {"message": ...} shape.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on the same event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Assigns X-Request-ID (client-provided or 8-char UUID prefix)."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]

        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers["X-Request-ID"] = rid
        return response
