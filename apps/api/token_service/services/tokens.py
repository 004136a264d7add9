"""LiveKit access token issuance.

Every endpoint funnels into :func:`issue_token`: validate the join request, build a
fixed-capability grant, and hand it to ``livekit-api`` for signing."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta

from livekit import api

from ..core.errors import InvalidRequestError, SigningError

logger = logging.getLogger(__name__)

DEFAULT_VALID_FOR = timedelta(hours=1)


@dataclass(frozen=True, slots=True)
class Credentials:
    """API key pair used to sign tokens."""

    api_key: str
    api_secret: str

    def __repr__(self) -> str:
        return f"Credentials(api_key={self.api_key!r}, api_secret='***')"


@dataclass(frozen=True, slots=True)
class JoinRequest:
    room_name: str
    identity: str
    display_name: str

    def missing_fields(self) -> list[str]:
        fields = {
            "room_name": self.room_name,
            "identity": self.identity,
            "display_name": self.display_name,
        }
        return [name for name, value in fields.items() if not value]


@dataclass(frozen=True, slots=True)
class GrantDescriptor:
    """What the bearer of the token may do, and for how long."""

    room: str
    identity: str
    display_name: str
    can_publish: bool = True
    can_subscribe: bool = True
    room_join: bool = True
    room_create: bool = True
    valid_for: timedelta = DEFAULT_VALID_FOR


@dataclass(slots=True)
class IssuedToken:
    token: str
    expires_in: int


def build_grant(request: JoinRequest, valid_for: timedelta = DEFAULT_VALID_FOR) -> GrantDescriptor:
    """Validate a join request and return the grant it entitles the caller to."""

    missing = request.missing_fields()
    if missing:
        raise InvalidRequestError(f"Missing required fields: {', '.join(missing)}")

    return GrantDescriptor(
        room=request.room_name,
        identity=request.identity,
        display_name=request.display_name,
        valid_for=valid_for,
    )


def sign_grant(credentials: Credentials, grant: GrantDescriptor) -> str:
    """Produce a signed JWT for ``grant``."""

    video_grants = api.VideoGrants(
        room=grant.room,
        room_join=grant.room_join,
        room_create=grant.room_create,
        can_publish=grant.can_publish,
        can_subscribe=grant.can_subscribe,
    )
    try:
        return (
            api.AccessToken(credentials.api_key, credentials.api_secret)
            .with_identity(grant.identity)
            .with_name(grant.display_name)
            .with_grants(video_grants)
            .with_ttl(grant.valid_for)
            .to_jwt()
        )
    except Exception as exc:
        raise SigningError(f"Failed to sign access token: {exc}") from exc


def issue_token(
    credentials: Credentials,
    room_name: str,
    identity: str,
    display_name: str,
    valid_for: timedelta = DEFAULT_VALID_FOR,
) -> IssuedToken:
    """Build the grant for a participant and sign it."""

    grant = build_grant(JoinRequest(room_name, identity, display_name), valid_for)
    token = sign_grant(credentials, grant)
    logger.debug("Issued token for room %s valid for %ss", grant.room, int(grant.valid_for.total_seconds()))
    return IssuedToken(token=token, expires_in=int(grant.valid_for.total_seconds()))
