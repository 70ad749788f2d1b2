"""Request-scoped dependencies resolved from the app's composition root."""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status

from blogforge.auth.credentials import PublicUser
from blogforge.auth.session import SESSION_COOKIE, decode_session_token
from blogforge.config import Settings
from blogforge.storage.store import Store


def get_store(request: Request) -> Store:
    return request.app.state.store


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def _token_from_request(request: Request) -> str | None:
    token = request.cookies.get(SESSION_COOKIE)
    if token:
        return token
    header = request.headers.get("authorization", "")
    scheme, _, value = header.partition(" ")
    if scheme.lower() == "bearer" and value:
        return value
    return None


def get_current_user_optional(
    request: Request,
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> PublicUser | None:
    token = _token_from_request(request)
    if not token:
        return None
    claims = decode_session_token(token, settings)
    if claims is None:
        return None
    user = store.get_user(claims["sub"])
    if user is None:
        return None
    return PublicUser.from_user(user)


def get_current_user(
    user: PublicUser | None = Depends(get_current_user_optional),
) -> PublicUser:
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return user
