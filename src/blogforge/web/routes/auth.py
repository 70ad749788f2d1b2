"""Credential callback issuing the session cookie."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from pydantic import BaseModel

from blogforge.auth.credentials import CredentialValidator, PublicUser
from blogforge.auth.session import SESSION_COOKIE, create_session_token
from blogforge.config import Settings
from blogforge.storage.store import Store
from blogforge.web.deps import get_app_settings, get_current_user_optional, get_store

router = APIRouter()


class Credentials(BaseModel):
    email: str = ""
    password: str = ""


async def _read_credentials(request: Request) -> Credentials:
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(("application/x-www-form-urlencoded", "multipart/form-data")):
        form = await request.form()
        return Credentials(email=str(form.get("email", "")), password=str(form.get("password", "")))
    try:
        data = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid request body")
    if not isinstance(data, dict):
        raise HTTPException(status_code=400, detail="Invalid request body")
    return Credentials(email=str(data.get("email", "")), password=str(data.get("password", "")))


@router.post("/callback/credentials", response_model=PublicUser)
async def credentials_callback(
    request: Request,
    response: Response,
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    credentials = await _read_credentials(request)
    user = CredentialValidator(store).validate(credentials.email, credentials.password)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")

    response.set_cookie(
        SESSION_COOKIE,
        create_session_token(user, settings),
        max_age=settings.session_max_age_days * 24 * 60 * 60,
        httponly=True,
        samesite="lax",
        secure=settings.site_url.startswith("https://"),
    )
    return user


@router.post("/signout")
def signout(response: Response):
    response.delete_cookie(SESSION_COOKIE)
    return {"message": "Signed out"}


@router.get("/session")
def current_session(user: PublicUser | None = Depends(get_current_user_optional)):
    if user is None:
        return {}
    return {"user": user.model_dump()}
