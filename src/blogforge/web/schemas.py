"""Request and response bodies for the JSON API (camelCase on the wire)."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from blogforge.errors import ErrorKind
from blogforge.storage.models import BlogStatus, GenerationStatus


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class GenerateBody(CamelModel):
    topic: str | None = None
    theme_id: str | None = None
    keywords: list[str] | None = None
    tone: str | None = None
    target_length: int | None = Field(default=None, gt=0)
    include_images: bool | None = None
    research_topic: bool | None = None
    voice: str | None = None


class GenerateAccepted(CamelModel):
    success: bool = True
    generation_id: str
    message: str


class GenerationOut(CamelModel):
    id: str
    blog_id: str | None = None
    theme_id: str | None = None
    prompt: str
    model: str
    status: GenerationStatus
    output: str | None = None
    cost: float | None = None
    error_kind: ErrorKind | None = None
    error: str | None = None
    worker_id: str | None = None
    created_at: datetime
    updated_at: datetime
    started_at: datetime | None = None
    completed_at: datetime | None = None


class BlogOut(CamelModel):
    id: str
    title: str
    slug: str
    excerpt: str
    content: str
    status: BlogStatus
    author_id: str | None = None
    theme_id: str | None = None
    keywords: list[str] = []
    images: list[str] = []
    sources: list[str] = []
    word_count: int
    reading_time: int
    generated_by: str | None = None
    published_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class BlogUpdate(CamelModel):
    status: BlogStatus


class ThemeCreate(CamelModel):
    name: str = Field(min_length=1)
    slug: str | None = None
    keywords: list[str] = []
    tone: str | None = None
    target_audience: str | None = None
    settings: dict[str, Any] = {}


class ThemeOut(CamelModel):
    id: str
    name: str
    slug: str
    keywords: list[str] = []
    tone: str | None = None
    target_audience: str | None = None
    settings: dict[str, Any] = {}
    created_by: str | None = None
    created_at: datetime


class PostOut(CamelModel):
    id: int
    title: str
    slug: str
    excerpt: str
    content: str
    date: str
    author: str
    tags: list[str] = []
