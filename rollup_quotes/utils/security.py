"""
Security utilities for the authentication gate.

Sessions are established elsewhere; this module only issues and checks the
bearer tokens that prove one is present.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Protocol

from jose import JWTError, jwt

from rollup_quotes.config.settings import settings


class AuthGate(Protocol):
    """Boolean check that an authenticated session is present."""

    def is_authenticated(self, token: str | None) -> bool:
        ...

    def subject(self, token: str) -> str | None:
        """Who the session belongs to, for audit records."""
        ...


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a JWT access token.

    Args:
        data: Payload data to encode
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token
    """
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.auth.access_token_expire_minutes
        )

    to_encode.update({"exp": expire, "type": "access"})

    return jwt.encode(
        to_encode,
        settings.auth.secret_key.get_secret_value(),
        algorithm=settings.auth.algorithm,
    )


def decode_token(token: str) -> dict[str, Any] | None:
    """
    Decode and validate a JWT token.

    Args:
        token: JWT token to decode

    Returns:
        Decoded payload or None if invalid
    """
    try:
        return jwt.decode(
            token,
            settings.auth.secret_key.get_secret_value(),
            algorithms=[settings.auth.algorithm],
        )
    except JWTError:
        return None


class JWTAuthGate:
    """AuthGate backed by signed access tokens."""

    def is_authenticated(self, token: str | None) -> bool:
        if not token:
            return False
        payload = decode_token(token)
        return bool(payload) and payload.get("type") == "access"

    def subject(self, token: str) -> str | None:
        payload = decode_token(token)
        return payload.get("sub") if payload else None


jwt_auth_gate = JWTAuthGate()
