from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from blogforge.auth.credentials import PublicUser
from blogforge.errors import InvalidTransition
from blogforge.storage.models import BlogStatus
from blogforge.storage.store import Store
from blogforge.web.deps import get_current_user, get_store
from blogforge.web.schemas import BlogOut, BlogUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[BlogOut])
def list_blogs(status: BlogStatus | None = None, store: Store = Depends(get_store)):
    return [BlogOut.model_validate(blog) for blog in store.list_blogs(status)]


@router.get("/slug/{slug}", response_model=BlogOut)
def get_blog_by_slug(slug: str, store: Store = Depends(get_store)):
    blog = store.get_blog_by_slug(slug)
    if blog is None:
        raise HTTPException(status_code=404, detail="Blog not found")
    return BlogOut.model_validate(blog)


@router.get("/{blog_id}", response_model=BlogOut)
def get_blog(blog_id: str, store: Store = Depends(get_store)):
    blog = store.get_blog(blog_id)
    if blog is None:
        raise HTTPException(status_code=404, detail="Blog not found")
    return BlogOut.model_validate(blog)


@router.patch("/{blog_id}", response_model=BlogOut)
def update_blog(
    blog_id: str,
    body: BlogUpdate,
    user: PublicUser = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    try:
        blog = store.set_blog_status(blog_id, body.status)
    except InvalidTransition as e:
        raise HTTPException(status_code=409, detail=str(e))
    if blog is None:
        raise HTTPException(status_code=404, detail="Blog not found")
    logger.info("%s set blog %s to %s", user.email, blog.id, blog.status.value)
    return BlogOut.model_validate(blog)
