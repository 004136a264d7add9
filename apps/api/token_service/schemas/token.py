"""Data contracts for the token endpoints."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AccessTokenResponse(BaseModel):
    access_token: str = Field(..., alias="accessToken", description="Signed LiveKit JWT")

    model_config = ConfigDict(populate_by_name=True)


# Matrix server name: DNS name, IPv4 or bracketed IPv6 literal, optional port.
SERVER_NAME_PATTERN = (
    r"^(?:\[[0-9A-Fa-f:.]+\]|[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?)*)"
    r"(?::[0-9]{1,5})?$"
)


class OpenIDToken(BaseModel):
    access_token: str = Field(..., min_length=1)
    token_type: str = Field(default="Bearer")
    matrix_server_name: str = Field(..., min_length=1, max_length=255, pattern=SERVER_NAME_PATTERN)
    expires_in: int | None = None

    @field_validator("matrix_server_name")
    @classmethod
    def _check_port(cls, value: str) -> str:
        _, sep, port = value.rpartition(":")
        if sep and port.isdigit() and not 0 < int(port) <= 65535:
            raise ValueError("server name port out of range")
        return value


class SfuRequest(BaseModel):
    room: str = Field(default="", description="Room name to join")
    openid_token: OpenIDToken | None = None
    device_id: str = Field(default="", description="Matrix device ID of the caller")
    remove_me_user_id: str = Field(
        default="",
        description="Caller-asserted user ID, used only when OpenID verification is disabled",
    )


class SfuConfigResponse(BaseModel):
    url: str = Field(..., description="SFU websocket endpoint")
    jwt: str = Field(..., description="Signed LiveKit JWT")


class ErrorResponse(BaseModel):
    errcode: str
    error: str
