"""Tests for grant construction and signing."""
from __future__ import annotations

import time
from datetime import timedelta

import pytest

from token_service.core.errors import InvalidRequestError, SigningError
from token_service.services import tokens


@pytest.fixture
def credentials(settings) -> tokens.Credentials:
    return tokens.Credentials(settings.livekit_key, settings.livekit_secret)


def test_build_grant_sets_fixed_capabilities():
    grant = tokens.build_grant(tokens.JoinRequest("lobby", "alice1", "Alice"))

    assert grant.room == "lobby"
    assert grant.identity == "alice1"
    assert grant.display_name == "Alice"
    assert grant.room_join and grant.room_create
    assert grant.can_publish and grant.can_subscribe
    assert grant.valid_for == timedelta(hours=1)


def test_build_grant_names_missing_fields():
    with pytest.raises(InvalidRequestError) as exc:
        tokens.build_grant(tokens.JoinRequest("", "alice1", ""))

    assert exc.value.status_code == 400
    assert "room_name" in exc.value.message
    assert "display_name" in exc.value.message
    assert "identity" not in exc.value.message


def test_sign_grant_embeds_claims(credentials, decode_token):
    grant = tokens.build_grant(tokens.JoinRequest("lobby", "alice1", "Alice"))

    claims = decode_token(tokens.sign_grant(credentials, grant))

    assert claims["iss"] == credentials.api_key
    assert claims["sub"] == "alice1"
    assert claims["name"] == "Alice"
    assert claims["video"]["room"] == "lobby"
    assert claims["video"]["roomJoin"] is True
    assert claims["video"]["roomCreate"] is True
    assert claims["video"]["canPublish"] is True
    assert claims["video"]["canSubscribe"] is True
    assert abs(claims["exp"] - (time.time() + 3600)) < 60


def test_claims_are_deterministic_apart_from_timestamps(credentials, decode_token):
    first = decode_token(tokens.issue_token(credentials, "lobby", "alice1", "Alice").token)
    second = decode_token(tokens.issue_token(credentials, "lobby", "alice1", "Alice").token)

    for claims in (first, second):
        for field in ("nbf", "exp", "iat", "jti"):
            claims.pop(field, None)

    assert first == second


def test_issue_token_reports_expiry(credentials, decode_token):
    issued = tokens.issue_token(credentials, "lobby", "alice1", "Alice", timedelta(minutes=5))

    assert issued.expires_in == 300
    claims = decode_token(issued.token)
    assert abs(claims["exp"] - (time.time() + 300)) < 60


def test_issue_token_skips_signer_on_invalid_request(monkeypatch, credentials):
    calls: list[tokens.GrantDescriptor] = []
    monkeypatch.setattr(tokens, "sign_grant", lambda creds, grant: calls.append(grant) or "jwt")

    with pytest.raises(InvalidRequestError):
        tokens.issue_token(credentials, "lobby", "", "Alice")

    assert calls == []


def test_sign_grant_wraps_library_errors(monkeypatch, credentials):
    class BrokenAccessToken:
        def __init__(self, *args, **kwargs) -> None:
            raise ValueError("bad key")

    monkeypatch.setattr(tokens.api, "AccessToken", BrokenAccessToken)
    grant = tokens.build_grant(tokens.JoinRequest("lobby", "alice1", "Alice"))

    with pytest.raises(SigningError) as exc:
        tokens.sign_grant(credentials, grant)

    assert exc.value.status_code == 500
    assert isinstance(exc.value.__cause__, ValueError)


def test_credentials_repr_hides_secret(credentials):
    assert credentials.api_secret not in repr(credentials)
