"""
Notes API — Request Logging Middleware
=======================================

What:  One access-log line per HTTP request.
How:   Measures time around call_next and logs method, path, status,
       duration, request id and client IP on the `notes_api.access` logger.

Log Line:
    2026-01-15T12:00:00 [INFO] notes_api.access: POST /notes 201 3.4ms [1f3a9c2e] from 127.0.0.1

Request bodies (note titles and contents) are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from notes_api.middleware.request_id import request_id_var

logger = logging.getLogger("notes_api.access")

# Polled by container health checks every few seconds
QUIET_PATHS = frozenset({"/health"})


def _level_for(method: str, status: int) -> int:
    """5xx → ERROR, 4xx → WARNING, preflight → DEBUG, everything else → INFO."""
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    if method == "OPTIONS":
        return logging.DEBUG
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status and duration of every request not in QUIET_PATHS."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        client_ip = request.client.host if request.client else "unknown"
        logger.log(
            _level_for(request.method, response.status_code),
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            request_id_var.get(""),
            client_ip,
        )

        return response
