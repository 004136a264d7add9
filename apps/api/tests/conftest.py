"""Shared fixtures for the token service tests."""
from __future__ import annotations

import jwt
import pytest
from fastapi.testclient import TestClient

from token_service.core.config import Settings
from token_service.main import create_app

TEST_KEY = "APItestkey"
TEST_SECRET = "test-secret-that-is-long-enough-for-hs256"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        livekit_key=TEST_KEY,
        livekit_secret=TEST_SECRET,
        livekit_url="wss://sfu.example.test",
    )


@pytest.fixture
def app(settings: Settings):
    return create_app(settings)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def decode_token(settings: Settings):
    def _decode(token: str) -> dict:
        return jwt.decode(token, settings.livekit_secret, algorithms=["HS256"])

    return _decode
