"""CORS headers and preflight handling for the token endpoints.

Browsers call both endpoints cross-origin. Every response carries the CORS headers,
and ``OPTIONS`` on a known path is answered with an empty 200 before routing or
validation runs.
"""
from __future__ import annotations

from collections.abc import Iterable

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

ALLOWED_HEADERS = "Accept, Content-Type, Content-Length, Accept-Encoding, X-CSRF-Token, Authorization"

# Allowed methods per path.
_PATH_METHODS = {
    "/token": "GET, OPTIONS",
    "/sfu/get": "POST, OPTIONS",
}
_DEFAULT_METHODS = "GET, HEAD, OPTIONS"


class CORSHeadersMiddleware(BaseHTTPMiddleware):
    """Attach per-path CORS headers and short-circuit preflight requests."""

    def __init__(self, app: ASGIApp, allow_origins: Iterable[str] = ("*",)) -> None:
        super().__init__(app)
        self.allow_origins = tuple(allow_origins)
        self.allow_all = "*" in self.allow_origins

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        if request.method == "OPTIONS" and path in _PATH_METHODS:
            response = Response(status_code=200)
        else:
            response = await call_next(request)

        response.headers.update(self._headers_for(path, request.headers.get("origin")))
        return response

    def _headers_for(self, path: str, origin: str | None) -> dict[str, str]:
        headers = {
            "Access-Control-Allow-Methods": _PATH_METHODS.get(path, _DEFAULT_METHODS),
            "Access-Control-Allow-Headers": ALLOWED_HEADERS,
        }
        if self.allow_all:
            headers["Access-Control-Allow-Origin"] = "*"
        elif origin and origin in self.allow_origins:
            headers["Access-Control-Allow-Origin"] = origin
            headers["Vary"] = "Origin"
        return headers
