"""Security helpers (credential comparison, token signing and verification)."""

from __future__ import annotations

import secrets
from datetime import datetime, timedelta, timezone

import jwt

TOKEN_ALGORITHM = "HS256"


def constant_time_equals(supplied: str | None, expected: str | None) -> bool:
    """Compare two secrets without leaking the mismatch position."""
    return secrets.compare_digest((supplied or "").encode(), (expected or "").encode())


def generate_secret() -> str:
    return secrets.token_urlsafe(48)


def issue_token(claims: dict, secret: str, ttl_seconds: int, now: datetime | None = None) -> str:
    """Sign claims with HS256, adding issued-at and expiry."""
    issued_at = now or datetime.now(timezone.utc)
    payload = dict(claims)
    payload["iat"] = issued_at
    payload["exp"] = issued_at + timedelta(seconds=ttl_seconds)
    return jwt.encode(payload, secret, algorithm=TOKEN_ALGORITHM)


def decode_token(token: str, secret: str) -> dict:
    """Return the verified claims; raises jwt.InvalidTokenError on any failure."""
    return jwt.decode(
        token,
        secret,
        algorithms=[TOKEN_ALGORITHM],
        options={"require": ["exp", "iat"]},
    )
