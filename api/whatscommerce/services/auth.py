"""
Dashboard Auth — Supabase access-token verification.

Dashboard users sign in with Supabase Auth (email/password). The dashboard
sends the Supabase access token as a Bearer token; we verify it against the
project's JWKS endpoint:
  {SUPABASE_URL}/auth/v1/.well-known/jwks.json

The JWT subject is the account id that scopes every table.
"""

from __future__ import annotations

import logging
import time
from typing import Any
from uuid import UUID

import jwt
from jwt import PyJWKClient
from fastapi import HTTPException, Request

from whatscommerce.config import settings
from whatscommerce.models.admin import AuthenticatedUser

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# JWKS client: cached singleton with 1-hour TTL
# ---------------------------------------------------------------------------

_jwks_client: PyJWKClient | None = None
_jwks_client_created_at: float = 0
_JWKS_TTL_SECONDS = 3600


def _get_jwks_client() -> PyJWKClient:
    """Get or create the JWKS client (cached with TTL)."""
    global _jwks_client, _jwks_client_created_at
    now = time.monotonic()

    if _jwks_client is None or (now - _jwks_client_created_at) > _JWKS_TTL_SECONDS:
        jwks_url = f"{settings.supabase_url}/auth/v1/.well-known/jwks.json"
        _jwks_client = PyJWKClient(jwks_url, cache_keys=True)
        _jwks_client_created_at = now
        logger.info("JWKS client initialized: %s", jwks_url)

    return _jwks_client


# ---------------------------------------------------------------------------
# Auth dependency
# ---------------------------------------------------------------------------


async def verify_dashboard_jwt(request: Request) -> AuthenticatedUser:
    """FastAPI dependency: verify the Supabase JWT and return the user.

    Raises 401 on a missing/invalid token, 403 when the subject is not a
    usable account id.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Missing authorization token")

    token = auth_header[7:]

    try:
        jwks_client = _get_jwks_client()
        signing_key = jwks_client.get_signing_key_from_jwt(token)

        payload: dict[str, Any] = jwt.decode(
            token,
            signing_key.key,
            algorithms=["RS256", "ES256"],
            audience="authenticated",
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError as e:
        logger.warning("Dashboard auth: invalid token: %s", e)
        raise HTTPException(status_code=401, detail="Invalid token")
    except Exception as e:
        logger.error("Dashboard auth: JWKS verification failed: %s", e)
        raise HTTPException(status_code=401, detail="Token verification failed")

    subject = payload.get("sub")
    if not subject:
        raise HTTPException(status_code=401, detail="Invalid token: no subject")

    try:
        user_id = UUID(subject)
    except ValueError:
        logger.warning("Dashboard auth: non-UUID subject %r", subject)
        raise HTTPException(status_code=403, detail="Account not recognised")

    return AuthenticatedUser(id=user_id, email=payload.get("email"))
