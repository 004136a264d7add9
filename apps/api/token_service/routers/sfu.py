"""SFU configuration endpoint used by Matrix clients."""
from __future__ import annotations

import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, Request

from ..core.config import Settings, get_settings
from ..core.errors import InvalidRequestError
from ..schemas.token import ErrorResponse, SfuConfigResponse, SfuRequest
from ..services import openid
from ..services import tokens as token_service
from .token import client_address

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/sfu/get",
    response_model=SfuConfigResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        405: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def get_sfu_config(
    payload: SfuRequest,
    request: Request,
    settings: Settings = Depends(get_settings),
) -> SfuConfigResponse:
    """Return the SFU URL and a token scoped to the requested room."""

    logger.info("SFU config request from %s for room %r", client_address(request), payload.room)

    missing = [field for field in ("room", "device_id") if not getattr(payload, field)]
    if missing:
        raise InvalidRequestError(f"Missing required fields: {', '.join(missing)}")

    user_id = await resolve_user_id(payload, settings)
    if not user_id:
        raise InvalidRequestError("Missing required fields: remove_me_user_id")

    identity = f"{user_id}:{payload.device_id}"
    issued = token_service.issue_token(
        token_service.Credentials(settings.livekit_key, settings.livekit_secret),
        room_name=payload.room,
        identity=identity,
        display_name=identity,
        valid_for=timedelta(seconds=settings.livekit_token_ttl),
    )
    return SfuConfigResponse(url=settings.livekit_url, jwt=issued.token)


async def resolve_user_id(payload: SfuRequest, settings: Settings) -> str:
    """Pick the user ID for the token, verifying the OpenID token when enabled."""

    if not settings.verify_openid:
        return payload.remove_me_user_id

    if payload.openid_token is None:
        raise InvalidRequestError("openid_token is required")
    return await openid.verify_openid_token(payload.openid_token, timeout=settings.openid_timeout)
