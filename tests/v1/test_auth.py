# tests/v1/test_auth.py
"""Tests for wallet authentication endpoints."""

from __future__ import annotations

import re

from fastapi import status

from tests.conftest import TEST_ADDRESS


def _get_nonce(client) -> str:
    response = client.get("/api/auth/nonce")
    assert response.status_code == status.HTTP_200_OK
    return response.json()["nonce"]


def test_issue_nonce(client) -> None:
    nonce = _get_nonce(client)
    assert re.fullmatch(r"[0-9a-f]{32}", nonce)
    assert _get_nonce(client) != nonce


def test_verify_success(client, signer) -> None:
    nonce = _get_nonce(client)
    response = client.post(
        "/api/auth/verify",
        json={"address": TEST_ADDRESS.lower(), "signature": signer(nonce), "nonce": nonce},
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"agent_id": TEST_ADDRESS, "display_id": "0xf39F...2266"}


def test_verify_replay_rejected(client, signer) -> None:
    nonce = _get_nonce(client)
    payload = {"address": TEST_ADDRESS, "signature": signer(nonce), "nonce": nonce}

    assert client.post("/api/auth/verify", json=payload).status_code == status.HTTP_200_OK

    response = client.post("/api/auth/verify", json=payload)
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"detail": "Invalid wallet signature"}


def test_verify_failures_are_indistinguishable(client, signer, other_account, sign_with) -> None:
    unknown_nonce = {"address": TEST_ADDRESS, "signature": signer("0" * 32), "nonce": "0" * 32}

    nonce = _get_nonce(client)
    malformed = {"address": TEST_ADDRESS, "signature": "0x1234", "nonce": nonce}

    nonce = _get_nonce(client)
    mismatch = {"address": TEST_ADDRESS, "signature": sign_with(other_account, nonce), "nonce": nonce}

    bodies = []
    for payload in (unknown_nonce, malformed, mismatch):
        response = client.post("/api/auth/verify", json=payload)
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        bodies.append(response.json())

    assert bodies == [{"detail": "Invalid wallet signature"}] * 3


def test_verify_expired_nonce(client, signer, clock, authority) -> None:
    nonce = _get_nonce(client)
    clock.advance(authority.ttl_ms + 1)
    response = client.post(
        "/api/auth/verify",
        json={"address": TEST_ADDRESS, "signature": signer(nonce), "nonce": nonce},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_verify_requires_all_fields(client) -> None:
    response = client.post("/api/auth/verify", json={"address": TEST_ADDRESS})
    assert response.status_code == 422
