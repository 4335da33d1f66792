"""
Notes API — Permissive CORS Middleware
=======================================

What:  Adds cross-origin headers to every response and short-circuits
       every OPTIONS request with an empty 204.
How:   BaseHTTPMiddleware; OPTIONS never reaches the router.

Starlette's CORSMiddleware only answers requests carrying the full preflight
header set (Origin + Access-Control-Request-Method) and replies 200. This
service answers any OPTIONS with 204 and sends the same fixed header set on
every response, so it carries its own small middleware.
"""

from typing import Dict

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

ALLOW_METHODS = "GET, POST, PUT, DELETE, OPTIONS"
ALLOW_HEADERS = "Content-Type, Authorization"


def cors_headers(allow_origin: str = "*") -> Dict[str, str]:
    """The fixed header set sent on every response."""
    return {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Methods": ALLOW_METHODS,
        "Access-Control-Allow-Headers": ALLOW_HEADERS,
    }


class PermissiveCORSMiddleware(BaseHTTPMiddleware):
    """
    Args:
        allow_origin: Value of Access-Control-Allow-Origin ("*" by default).
    """

    def __init__(self, app: ASGIApp, allow_origin: str = "*"):
        super().__init__(app)
        self.cors_headers = cors_headers(allow_origin)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=204, headers=self.cors_headers)

        response = await call_next(request)
        response.headers.update(self.cors_headers)
        return response
