from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from blogforge.auth.credentials import PublicUser
from blogforge.config import Settings
from blogforge.storage.models import GenerationRequest
from blogforge.storage.store import Store
from blogforge.web.deps import get_app_settings, get_current_user, get_store
from blogforge.web.schemas import GenerateAccepted, GenerateBody, GenerationOut

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=GenerateAccepted)
def start_generation(
    body: GenerateBody,
    user: PublicUser = Depends(get_current_user),
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    """Queue a generation job; a worker picks it up from the generation table."""
    if not body.topic or not body.topic.strip():
        raise HTTPException(status_code=400, detail="Topic is required")

    request = GenerationRequest(
        topic=body.topic.strip(),
        author_id=user.id,
        theme_id=body.theme_id,
        keywords=body.keywords or [],
        tone=body.tone or "professional",
        voice=body.voice or "expert",
        target_length=body.target_length or 2000,
        include_images=bool(body.include_images),
        research_topic=body.research_topic is not False,
    )
    generation = store.create_generation(request, model=settings.model)
    logger.info("Queued generation %s for %r", generation.id, request.topic)

    return GenerateAccepted(
        generation_id=generation.id,
        message="Blog generation started. This may take 3-6 minutes.",
    )


@router.get("/status", response_model=GenerationOut)
def generation_status(
    generation_id: str | None = Query(default=None, alias="id"),
    store: Store = Depends(get_store),
):
    if not generation_id:
        raise HTTPException(status_code=400, detail="Generation ID required")
    generation = store.get_generation(generation_id)
    if generation is None:
        raise HTTPException(status_code=404, detail="Generation not found")
    return GenerationOut.model_validate(generation)
