"""Tests for per-request log lines."""
from __future__ import annotations

import logging


def service_messages(caplog) -> list[str]:
    return [
        record.getMessage()
        for record in caplog.records
        if record.name.startswith("token_service") and record.levelno == logging.INFO
    ]


def test_token_request_logs_address_and_room_only(client, caplog):
    with caplog.at_level(logging.INFO, logger="token_service"):
        response = client.get("/token", params={"roomName": "lobby", "name": "Alice", "identity": "alice1"})

    assert response.status_code == 200
    messages = service_messages(caplog)
    assert len(messages) == 1
    assert "testclient" in messages[0]
    assert "lobby" in messages[0]
    assert not any("alice1" in message or "Alice" in message for message in messages)


def test_sfu_request_logs_address_and_room_only(client, caplog):
    with caplog.at_level(logging.INFO, logger="token_service"):
        response = client.post("/sfu/get", json={"room": "lobby", "device_id": "d1", "remove_me_user_id": "u1"})

    assert response.status_code == 200
    messages = service_messages(caplog)
    assert len(messages) == 1
    assert "testclient" in messages[0]
    assert "lobby" in messages[0]
    assert not any("u1" in message or "d1" in message for message in messages)
