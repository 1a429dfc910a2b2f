"""Bearer token helpers for caller identity."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from jose import jwt

from storyfeed.core.settings import settings


def create_access_token(author_id: str, extra_claims: dict[str, str] | None = None) -> str:
    """Create a JWT access token whose subject is the author id."""
    to_encode: dict[str, object] = {"sub": author_id}
    if extra_claims:
        to_encode.update(extra_claims)
    expire = datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode["exp"] = expire
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_subject(token: str) -> str | None:
    """Return the ``sub`` claim of a valid token.

    Raises:
        jose.JWTError: If the token is malformed, expired or badly signed.
    """
    payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    subject = payload.get("sub")
    return subject if isinstance(subject, str) else None
