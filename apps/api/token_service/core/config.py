"""Runtime configuration for the token service."""
from __future__ import annotations

from typing import Annotated, Literal

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from starlette.requests import Request

from .errors import StartupConfigError


class Settings(BaseSettings):
    """Runtime configuration."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    livekit_key: str = Field(..., min_length=1)
    livekit_secret: str = Field(..., min_length=1)
    livekit_url: str = Field(default="ws://127.0.0.1:7880")
    livekit_token_ttl: int = Field(default=3600, gt=0, description="Token lifetime in seconds")

    cors_allow_origins: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["*"])

    verify_openid: bool = Field(default=False)
    openid_timeout: float = Field(default=10.0, gt=0)

    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")

    @field_validator("livekit_key", "livekit_secret", mode="before")
    @classmethod
    def _strip_credentials(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: object) -> object:
        """Allow comma-separated env values for CORS origins."""

        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value


def load_settings(**overrides: object) -> Settings:
    """Build settings from the environment, failing fast on missing credentials."""

    try:
        return Settings(**overrides)
    except ValidationError as exc:
        fields = sorted({str(error["loc"][0]).upper() for error in exc.errors() if error["loc"]})
        raise StartupConfigError(f"Missing or invalid configuration: {', '.join(fields)}") from exc


def get_settings(request: Request) -> Settings:
    """FastAPI dependency returning the settings the app was built with."""

    return request.app.state.settings
