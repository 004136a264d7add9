"""Query-string token endpoint used by the standalone client."""
from __future__ import annotations

import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, Query, Request

from ..core.config import Settings, get_settings
from ..schemas.token import AccessTokenResponse, ErrorResponse
from ..services import tokens as token_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/token",
    response_model=AccessTokenResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def get_token(
    request: Request,
    room_name: str = Query(default="", alias="roomName"),
    name: str = Query(default=""),
    identity: str = Query(default=""),
    settings: Settings = Depends(get_settings),
) -> AccessTokenResponse:
    """Return a room access token for the participant named in the query string."""

    logger.info("Token request from %s for room %r", client_address(request), room_name)

    issued = token_service.issue_token(
        token_service.Credentials(settings.livekit_key, settings.livekit_secret),
        room_name=room_name,
        identity=identity,
        display_name=name,
        valid_for=timedelta(seconds=settings.livekit_token_ttl),
    )
    return AccessTokenResponse(access_token=issued.token)


def client_address(request: Request) -> str:
    if request.client is None:
        return "unknown"
    return f"{request.client.host}:{request.client.port}"
