"""Legacy demo posts: unauthenticated reads plus the idempotent seed."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from blogforge.content.demo_posts import demo_posts
from blogforge.storage.store import Store
from blogforge.web.deps import get_store
from blogforge.web.schemas import PostOut

router = APIRouter()


@router.get("/posts", response_model=List[PostOut])
def list_posts(tag: str | None = None, store: Store = Depends(get_store)):
    return [PostOut.model_validate(post) for post in store.list_posts(tag)]


@router.get("/posts/{slug}", response_model=PostOut)
def get_post(slug: str, store: Store = Depends(get_store)):
    post = store.get_post_by_slug(slug)
    if post is None:
        raise HTTPException(status_code=404, detail="Post not found")
    return PostOut.model_validate(post)


@router.post("/seed")
def seed(store: Store = Depends(get_store)):
    added = store.seed_posts(demo_posts())
    if added:
        return {"message": f"Database seeded with {added} finance posts", "added": added}
    return {"message": "Posts already present, nothing seeded", "added": 0}
