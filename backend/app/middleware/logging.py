"""
Gallery API — Request Logging Middleware
==========================================

What:  One access-log line per API request with status and duration.
How:   Measures from middleware entry to response return; picks the log level
       from the status class (5xx ERROR, 4xx WARNING, else INFO).

Log line:
    POST /api/upload 201 1834.2ms [a1b2c3d4] from 192.168.1.100

Static asset requests are logged at DEBUG only; a gallery page load pulls
dozens of files and would bury the API lines.

What we DON'T log: request bodies (images, form fields) or headers.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.middleware.request_id import request_id_var

logger = logging.getLogger("gallery.access")

API_PREFIX = "/api"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status, duration, request ID and client IP."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()

        # request.client may be None in testing
        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        path = request.url.path

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        rid = request_id_var.get("")

        status = response.status_code
        if not path.startswith(API_PREFIX):
            log_level = logging.DEBUG
        elif status >= 500:
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
