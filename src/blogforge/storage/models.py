"""SQLModel database models."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel
from sqlalchemy import Column, Text
from sqlmodel import Field, SQLModel

from blogforge.errors import ErrorKind
from blogforge.storage.codec import TypedJSON, UTCDateTime


def utcnow() -> datetime:
    """Current time as an aware UTC datetime; every stored timestamp uses it."""
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid4().hex


class GenerationStatus(str, Enum):
    PENDING = "pending"
    RESEARCHING = "researching"
    OUTLINING = "outlining"
    WRITING = "writing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def rank(self) -> int:
        return _STATUS_RANK[self]

    @property
    def is_terminal(self) -> bool:
        return self in (GenerationStatus.COMPLETED, GenerationStatus.FAILED)

    def can_advance_to(self, target: GenerationStatus) -> bool:
        if self.is_terminal:
            return False
        if target is GenerationStatus.FAILED:
            return True
        return target.rank > self.rank


_STATUS_RANK = {status: rank for rank, status in enumerate(GenerationStatus)}


class BlogStatus(str, Enum):
    GENERATING = "generating"
    DRAFT = "draft"
    PUBLISHED = "published"


class ResearchSource(BaseModel):
    """One web search result kept as research material."""

    url: str
    title: str = ""
    description: str = ""
    age: str | None = None
    credibility: float = 0.5


class GenerationRequest(BaseModel):
    """Parameters of a submitted generation job, stored on the job row."""

    topic: str
    author_id: str | None = None
    theme_id: str | None = None
    keywords: list[str] = []
    tone: str = "professional"
    voice: str = "expert"
    target_length: int = 2000
    include_images: bool = False
    research_topic: bool = True


class User(SQLModel, table=True):
    id: str = Field(default_factory=_new_id, primary_key=True)
    email: str = Field(unique=True, index=True)
    name: str | None = None
    password_hash: str
    role: str = "editor"  # admin | editor
    image: str | None = None
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)


class Theme(SQLModel, table=True):
    id: str = Field(default_factory=_new_id, primary_key=True)
    name: str
    slug: str = Field(unique=True, index=True)
    keywords: list[str] = Field(default_factory=list, sa_column=Column(TypedJSON(list[str])))
    tone: str | None = None
    target_audience: str | None = None
    settings: dict[str, Any] = Field(
        default_factory=dict, sa_column=Column(TypedJSON(dict[str, Any]))
    )
    created_by: str | None = None
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)


class Blog(SQLModel, table=True):
    """An article, either produced by a generation job or written by hand."""

    id: str = Field(default_factory=_new_id, primary_key=True)
    title: str
    slug: str = Field(unique=True, index=True)
    excerpt: str = ""
    content: str = Field(default="", sa_column=Column(Text))
    status: BlogStatus = Field(default=BlogStatus.DRAFT, index=True)
    author_id: str | None = Field(default=None, index=True)
    theme_id: str | None = None
    keywords: list[str] = Field(default_factory=list, sa_column=Column(TypedJSON(list[str])))
    images: list[str] = Field(default_factory=list, sa_column=Column(TypedJSON(list[str])))
    sources: list[str] = Field(default_factory=list, sa_column=Column(TypedJSON(list[str])))
    word_count: int = 0
    reading_time: int = 0
    generated_by: str | None = None
    published_at: datetime | None = Field(default=None, sa_type=UTCDateTime)
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)


class Generation(SQLModel, table=True):
    """One run of the generation pipeline; the table doubles as the job queue."""

    id: str = Field(default_factory=_new_id, primary_key=True)
    blog_id: str | None = None
    theme_id: str | None = None
    prompt: str
    model: str
    status: GenerationStatus = Field(default=GenerationStatus.PENDING, index=True)
    request: GenerationRequest | None = Field(
        default=None, sa_column=Column(TypedJSON(GenerationRequest))
    )
    output: str | None = None
    cost: float | None = None
    error_kind: ErrorKind | None = None
    error: str | None = None
    worker_id: str | None = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
    started_at: datetime | None = Field(default=None, sa_type=UTCDateTime)
    completed_at: datetime | None = Field(default=None, sa_type=UTCDateTime)


class Research(SQLModel, table=True):
    id: str = Field(default_factory=_new_id, primary_key=True)
    query: str
    topic: str = Field(index=True)
    sources: list[ResearchSource] = Field(
        default_factory=list, sa_column=Column(TypedJSON(list[ResearchSource]))
    )
    key_stats: list[str] = Field(default_factory=list, sa_column=Column(TypedJSON(list[str])))
    summary: str = ""
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
    expires_at: datetime = Field(
        default_factory=lambda: utcnow() + timedelta(days=30), sa_type=UTCDateTime
    )


class Post(SQLModel, table=True):
    """Legacy demo post, unrelated to generated blogs."""

    id: int | None = Field(default=None, primary_key=True)
    title: str
    slug: str = Field(unique=True, index=True)
    excerpt: str
    content: str = Field(sa_column=Column(Text, nullable=False))
    date: str
    author: str
    tags: list[str] = Field(default_factory=list, sa_column=Column(TypedJSON(list[str])))
