"""Tests for dashboard JWT authentication (RS256 via JWKS)."""

from __future__ import annotations

import time
from typing import Any
from unittest.mock import MagicMock, patch
from uuid import UUID, uuid4

import jwt
from cryptography.hazmat.primitives.asymmetric import rsa
import pytest
from fastapi import HTTPException

from whatscommerce.services.auth import verify_dashboard_jwt

# ---------------------------------------------------------------------------
# Test RSA key pair (generated once for the test module)
# ---------------------------------------------------------------------------

_private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
_public_key = _private_key.public_key()

_USER_ID = str(uuid4())


def _make_token(
    sub: str | None = _USER_ID,
    exp: int | None = None,
    aud: str = "authenticated",
    email: str | None = "owner@shop.example",
) -> str:
    """Create a test JWT signed with our test RSA private key."""
    payload: dict[str, Any] = {"aud": aud}
    if sub is not None:
        payload["sub"] = sub
    if email is not None:
        payload["email"] = email
    payload["exp"] = exp if exp is not None else int(time.time()) + 3600
    return jwt.encode(
        payload, _private_key, algorithm="RS256", headers={"kid": "test-key-id"}
    )


def _mock_request(token: str | None = None) -> MagicMock:
    """Create a mock request with optional Authorization header."""
    request = MagicMock()
    request.headers = {"Authorization": f"Bearer {token}"} if token else {}
    return request


def _mock_jwks_client() -> MagicMock:
    """Mock PyJWKClient that returns our test public key."""
    mock_client = MagicMock()
    mock_signing_key = MagicMock()
    mock_signing_key.key = _public_key
    mock_client.get_signing_key_from_jwt.return_value = mock_signing_key
    return mock_client


def _patch_jwks(client: MagicMock | None = None):  # type: ignore[no-untyped-def]
    return patch(
        "whatscommerce.services.auth._get_jwks_client",
        return_value=client or _mock_jwks_client(),
    )


# ── Missing / malformed token ──────────────────────────────────────


@pytest.mark.asyncio
async def test_missing_auth_header() -> None:
    with pytest.raises(HTTPException) as exc_info:
        await verify_dashboard_jwt(_mock_request(token=None))
    assert exc_info.value.status_code == 401
    assert "Missing" in str(exc_info.value.detail)


@pytest.mark.asyncio
async def test_non_bearer_header() -> None:
    request = MagicMock()
    request.headers = {"Authorization": "Basic abc123"}
    with pytest.raises(HTTPException) as exc_info:
        await verify_dashboard_jwt(request)
    assert exc_info.value.status_code == 401


# ── Invalid tokens ─────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_expired_token() -> None:
    request = _mock_request(_make_token(exp=int(time.time()) - 3600))
    with _patch_jwks(), pytest.raises(HTTPException) as exc_info:
        await verify_dashboard_jwt(request)
    assert exc_info.value.status_code == 401
    assert "expired" in str(exc_info.value.detail).lower()


@pytest.mark.asyncio
async def test_wrong_signing_key() -> None:
    other_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    token = jwt.encode(
        {"sub": _USER_ID, "aud": "authenticated", "exp": int(time.time()) + 3600},
        other_key,
        algorithm="RS256",
        headers={"kid": "other-key"},
    )
    with _patch_jwks(), pytest.raises(HTTPException) as exc_info:
        await verify_dashboard_jwt(_mock_request(token))
    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_wrong_audience() -> None:
    with _patch_jwks(), pytest.raises(HTTPException) as exc_info:
        await verify_dashboard_jwt(_mock_request(_make_token(aud="anon")))
    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_token_without_sub() -> None:
    with _patch_jwks(), pytest.raises(HTTPException) as exc_info:
        await verify_dashboard_jwt(_mock_request(_make_token(sub=None)))
    assert exc_info.value.status_code == 401
    assert "subject" in str(exc_info.value.detail).lower()


@pytest.mark.asyncio
async def test_non_uuid_subject_forbidden() -> None:
    with _patch_jwks(), pytest.raises(HTTPException) as exc_info:
        await verify_dashboard_jwt(_mock_request(_make_token(sub="service-role")))
    assert exc_info.value.status_code == 403


@pytest.mark.asyncio
async def test_jwks_fetch_failure() -> None:
    mock_client = MagicMock()
    mock_client.get_signing_key_from_jwt.side_effect = Exception("JWKS unreachable")

    with _patch_jwks(mock_client), pytest.raises(HTTPException) as exc_info:
        await verify_dashboard_jwt(_mock_request(_make_token()))
    assert exc_info.value.status_code == 401
    assert "verification failed" in str(exc_info.value.detail).lower()


# ── Happy path ─────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_valid_token_returns_user() -> None:
    with _patch_jwks():
        user = await verify_dashboard_jwt(_mock_request(_make_token()))

    assert user.id == UUID(_USER_ID)
    assert user.email == "owner@shop.example"


@pytest.mark.asyncio
async def test_email_claim_optional() -> None:
    with _patch_jwks():
        user = await verify_dashboard_jwt(_mock_request(_make_token(email=None)))
    assert user.email is None
