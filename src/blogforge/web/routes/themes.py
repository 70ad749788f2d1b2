from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from blogforge.auth.credentials import PublicUser
from blogforge.content.base import slugify
from blogforge.storage.models import Theme
from blogforge.storage.store import Store
from blogforge.web.deps import get_current_user, get_store
from blogforge.web.schemas import ThemeCreate, ThemeOut

router = APIRouter()


@router.get("", response_model=List[ThemeOut])
def list_themes(store: Store = Depends(get_store)):
    return [ThemeOut.model_validate(theme) for theme in store.list_themes()]


@router.get("/{theme_id}", response_model=ThemeOut)
def get_theme(theme_id: str, store: Store = Depends(get_store)):
    theme = store.get_theme(theme_id)
    if theme is None:
        raise HTTPException(status_code=404, detail="Theme not found")
    return ThemeOut.model_validate(theme)


@router.post("", response_model=ThemeOut)
def create_theme(
    body: ThemeCreate,
    user: PublicUser = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    slug = slugify(body.slug or body.name)
    if store.theme_slug_exists(slug):
        raise HTTPException(status_code=409, detail=f"Theme slug '{slug}' already exists")

    theme = store.create_theme(
        Theme(
            name=body.name,
            slug=slug,
            keywords=body.keywords,
            tone=body.tone,
            target_audience=body.target_audience,
            settings=body.settings,
            created_by=user.id,
        )
    )
    return ThemeOut.model_validate(theme)
