"""Security utilities for JWT session tokens and verification codes."""

import secrets
from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt

from stowline.core.config import settings


# =============================================================================
# Session Token (JWT in cookie)
# =============================================================================

def create_session_token(account_id: UUID, account_type: str) -> str:
    """
    Create signed session JWT.

    Always signs with current secret (JWT_SECRET). The account type tells
    the auth dependencies which table `sub` points into.
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(account_id),
        "account_type": account_type,
        "iat": now,
        "exp": now + timedelta(hours=settings.JWT_EXPIRES_HOURS),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm="HS256")


def decode_session_token(token: str) -> dict:
    """
    Decode and verify session JWT.

    Tries current secret first, then previous (for rotation support).

    Raises:
        jwt.InvalidTokenError: If token invalid with all secrets
    """
    last_error = None
    for secret in settings.jwt_secrets:
        try:
            return jwt.decode(token, secret, algorithms=["HS256"])
        except jwt.InvalidTokenError as e:
            last_error = e
            continue
    raise last_error  # type: ignore


# =============================================================================
# Verification Codes
# =============================================================================

def generate_verification_code() -> str:
    """Six-digit numeric code for SMS/email login."""
    return f"{secrets.randbelow(1_000_000):06d}"


def constant_time_equals(a: str, b: str) -> bool:
    return secrets.compare_digest(a.encode(), b.encode())
