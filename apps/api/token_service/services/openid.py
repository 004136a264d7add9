"""Matrix OpenID token verification.

Clients obtain a short-lived OpenID token from their homeserver and pass it to
``/sfu/get``. Verification asks the issuing homeserver who the token belongs to via
the federation ``userinfo`` endpoint."""
from __future__ import annotations

import logging

import httpx

from ..core.errors import OpenIDVerificationError
from ..schemas.token import OpenIDToken

logger = logging.getLogger(__name__)

USERINFO_PATH = "/_matrix/federation/v1/openid/userinfo"


def split_server_name(server_name: str) -> tuple[str, int | None]:
    """Split ``host[:port]``, unwrapping bracketed IPv6 literals."""

    if server_name.startswith("["):
        host, _, rest = server_name[1:].partition("]")
        port = rest[1:] if rest.startswith(":") else ""
    else:
        host, _, port = server_name.partition(":")
    return host, int(port) if port else None


def userinfo_url(server_name: str) -> httpx.URL:
    host, port = split_server_name(server_name)
    return httpx.URL(scheme="https", host=host, port=port, path=USERINFO_PATH)


async def verify_openid_token(
    token: OpenIDToken,
    *,
    timeout: float = 10.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str:
    """Return the Matrix user ID the homeserver vouches for."""

    url = userinfo_url(token.matrix_server_name)
    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            response = await client.get(url, params={"access_token": token.access_token})
    except httpx.HTTPError as exc:
        logger.warning("OpenID lookup against %s failed: %s", token.matrix_server_name, exc)
        raise OpenIDVerificationError("Unable to verify OpenID token") from exc

    if response.status_code != 200:
        logger.info(
            "Homeserver %s rejected OpenID token with status %s",
            token.matrix_server_name,
            response.status_code,
        )
        raise OpenIDVerificationError("OpenID token was rejected by the homeserver")

    try:
        payload = response.json()
    except ValueError as exc:
        raise OpenIDVerificationError("Homeserver returned an unreadable userinfo reply") from exc
    if not isinstance(payload, dict):
        raise OpenIDVerificationError("Homeserver returned an unreadable userinfo reply")

    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id:
        raise OpenIDVerificationError("Homeserver userinfo reply did not include a user ID")

    # A homeserver may only vouch for its own users.
    localpart, _, server_name = user_id.partition(":")
    if not localpart.startswith("@") or server_name != token.matrix_server_name:
        logger.warning(
            "Homeserver %s vouched for a user on another server", token.matrix_server_name
        )
        raise OpenIDVerificationError("OpenID token does not belong to a user of this homeserver")
    return user_id
