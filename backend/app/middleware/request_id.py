"""
Markpad Backend — Request ID Middleware
=========================================

What:  Gives each request a short correlation id and echoes it back.
How:   Reuses the client's X-Request-ID header when sent, otherwise generates
       one; stores it in a ContextVar so loggers and exception handlers can
       read it without threading it through every call.
When:  First middleware in the chain.

The same id appears in the access log line, in every error body
("request_id"), and in the X-Request-ID response header.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own id.
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    """First 8 hex chars of a uuid4; enough to correlate a day of logs."""
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Assigns a request id, exposes it via request.state and the response header.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or new_request_id()

        # Left set after call_next so the outermost 500 handler can still read it.
        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)

        response.headers["X-Request-ID"] = rid
        return response
