"""
Notes API — Request ID Middleware
==================================

What:  Assigns an id to each incoming request and adds it to the response.
How:   Uses the client's X-Request-ID header when it is usable, otherwise a
       short uuid; stores it in a ContextVar and on request.state, and
       echoes it in the response header.
Who:   Read by the access logger and by the exception handlers in main.py.
       The fallback 500 handler runs outside this middleware's context and
       reads request.state instead of the ContextVar.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 64

# Coroutine-local storage for the current request ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def resolve_request_id(header_value: str | None) -> str:
    """
    Client-sent ids are trimmed and kept when 1-64 printable ASCII
    characters; anything else is replaced by the first 8 hex digits of a uuid4.
    """
    if header_value:
        candidate = header_value.strip()
        if (
            0 < len(candidate) <= MAX_REQUEST_ID_LENGTH
            and candidate.isascii()
            and candidate.isprintable()
        ):
            return candidate
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
