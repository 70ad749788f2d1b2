"""Signed session tokens carried in a cookie or a bearer header."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from blogforge.auth.credentials import PublicUser
from blogforge.config import Settings

ALGORITHM = "HS256"
SESSION_COOKIE = "blogforge.session-token"


def create_session_token(user: PublicUser, settings: Settings) -> str:
    expire = datetime.now(timezone.utc) + timedelta(days=settings.session_max_age_days)
    claims = {
        "sub": user.id,
        "email": user.email,
        "name": user.name,
        "role": user.role,
        "exp": expire,
    }
    return jwt.encode(claims, settings.session_secret, algorithm=ALGORITHM)


def decode_session_token(token: str, settings: Settings) -> dict | None:
    """Return the token claims, or None when the token is invalid or expired."""
    try:
        payload = jwt.decode(token, settings.session_secret, algorithms=[ALGORITHM])
    except JWTError:
        return None
    if not payload.get("sub"):
        return None
    return payload
