"""
Markpad Backend — Request Logging Middleware
==============================================

What:  One access-log line per HTTP request, with duration and request id.
Who:   Applied to every request via Starlette middleware.
When:  After RequestIDMiddleware (uses request ID for correlation).

Example line:
    2026-01-15T12:00:00 [INFO] markpad.access: GET /api/notes 200 12.4ms [a1b2c3d4] from 10.0.0.7

Logged: method, path, status, duration, client IP, request ID.
Never logged: request bodies, query strings, the Authorization header.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.middleware.request_id import request_id_var

logger = logging.getLogger("markpad.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs each request at a level chosen by the response status class.

    5xx → ERROR, 4xx → WARNING, everything else → INFO.
    GET /health is skipped; probes hit it every few seconds.

    Typical durations:
        - GET /health: 1-5ms
        - GET /api/notes: 10-50ms (database query)
        - POST /api/bookmarks without title: up to the metadata fetch timeout
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
