"""FastAPI application issuing LiveKit room tokens."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .core.config import Settings
from .core.errors import InvalidRequestError, MethodNotAllowedError, SigningError, TokenServiceError
from .middleware.cors import CORSHeadersMiddleware
from .routers import sfu, token

logger = logging.getLogger(__name__)


def error_response(
    status_code: int, errcode: str, message: str, headers: dict[str, str] | None = None
) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"errcode": errcode, "error": message}, headers=headers)


async def handle_service_error(request: Request, exc: TokenServiceError) -> JSONResponse:
    if isinstance(exc, SigningError):
        logger.exception("Token signing failed for %s", request.url.path, exc_info=exc)
    else:
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.message)
    return error_response(exc.status_code, exc.errcode, exc.message)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies and wrongly-typed fields are client errors, reported as 400."""

    logger.info("Rejected malformed %s %s", request.method, request.url.path)
    return error_response(InvalidRequestError.status_code, "M_BAD_JSON", "Malformed request body")


async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == MethodNotAllowedError.status_code:
        return error_response(
            exc.status_code, MethodNotAllowedError.errcode, "Method not allowed", headers=exc.headers
        )
    errcode = "M_NOT_FOUND" if exc.status_code == 404 else "M_UNKNOWN"
    return error_response(exc.status_code, errcode, str(exc.detail))


def create_app(settings: Settings) -> FastAPI:
    """Build the application around an already-validated configuration."""

    app = FastAPI(title="LiveKit Token Service", version=__version__)
    app.state.settings = settings

    app.add_middleware(CORSHeadersMiddleware, allow_origins=settings.cors_allow_origins)

    app.add_exception_handler(TokenServiceError, handle_service_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)

    app.include_router(token.router, tags=["token"])
    app.include_router(sfu.router, tags=["sfu"])

    @app.get("/api/health", tags=["meta"])
    async def health() -> dict[str, str]:
        """Simple liveness probe."""

        return {"status": "ok"}

    @app.head("/api/health", tags=["meta"])
    async def health_head() -> Response:
        """Allow HEAD for uptime monitors that only need the status code."""

        return Response(status_code=200)

    if not settings.verify_openid:
        logger.warning(
            "OpenID verification is disabled; /sfu/get trusts the caller-supplied user ID"
        )

    return app
