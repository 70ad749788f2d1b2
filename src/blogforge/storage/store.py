"""Query layer over the database: the only place rows are read or written."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Iterable

from sqlalchemy import func, update
from sqlmodel import Session, col, select

from blogforge.errors import ErrorKind, InvalidTransition
from blogforge.storage.database import Database
from blogforge.storage.models import (
    Blog,
    BlogStatus,
    Generation,
    GenerationRequest,
    GenerationStatus,
    Post,
    Research,
    ResearchSource,
    Theme,
    User,
    utcnow,
)

logger = logging.getLogger(__name__)


class Store:
    """Repository over a :class:`Database` handle."""

    def __init__(self, db: Database) -> None:
        self._db = db

    @property
    def db(self) -> Database:
        return self._db

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def get_user(self, user_id: str) -> User | None:
        with self._db.session() as session:
            return session.get(User, user_id)

    def get_user_by_email(self, email: str) -> User | None:
        with self._db.session() as session:
            return session.exec(
                select(User).where(func.lower(User.email) == email.strip().lower())
            ).first()

    def save_user(self, user: User) -> User:
        with self._db.session() as session:
            session.add(user)
            session.commit()
            session.refresh(user)
            return user

    # ------------------------------------------------------------------
    # Themes
    # ------------------------------------------------------------------

    def create_theme(self, theme: Theme) -> Theme:
        with self._db.session() as session:
            session.add(theme)
            session.commit()
            session.refresh(theme)
            return theme

    def get_theme(self, theme_id: str) -> Theme | None:
        with self._db.session() as session:
            return session.get(Theme, theme_id)

    def list_themes(self) -> list[Theme]:
        with self._db.session() as session:
            return list(session.exec(select(Theme).order_by(col(Theme.created_at).desc())).all())

    def theme_slug_exists(self, slug: str) -> bool:
        with self._db.session() as session:
            return session.exec(select(Theme.id).where(Theme.slug == slug)).first() is not None

    # ------------------------------------------------------------------
    # Blogs
    # ------------------------------------------------------------------

    def create_blog(self, blog: Blog) -> Blog:
        with self._db.session() as session:
            session.add(blog)
            session.commit()
            session.refresh(blog)
            return blog

    def get_blog(self, blog_id: str) -> Blog | None:
        with self._db.session() as session:
            return session.get(Blog, blog_id)

    def get_blog_by_slug(self, slug: str) -> Blog | None:
        with self._db.session() as session:
            return session.exec(select(Blog).where(Blog.slug == slug)).first()

    def list_blogs(self, status: BlogStatus | None = None) -> list[Blog]:
        with self._db.session() as session:
            query = select(Blog).order_by(col(Blog.created_at).desc())
            if status is not None:
                query = query.where(Blog.status == status)
            return list(session.exec(query).all())

    def set_blog_status(self, blog_id: str, status: BlogStatus) -> Blog | None:
        """Publish or unpublish a finished blog; None when it does not exist.

        Blogs still ``generating`` belong to a running or failed job and
        cannot change status here.
        """
        if status is BlogStatus.GENERATING:
            raise InvalidTransition("A blog cannot be moved back to generating")
        with self._db.session() as session:
            blog = session.get(Blog, blog_id)
            if blog is None:
                return None
            if blog.status is BlogStatus.GENERATING:
                raise InvalidTransition(f"Blog {blog_id} is still generating")
            now = utcnow()
            if status is not BlogStatus.PUBLISHED:
                blog.published_at = None
            elif blog.status is not BlogStatus.PUBLISHED:
                blog.published_at = now
            blog.status = status
            blog.updated_at = now
            session.add(blog)
            session.commit()
            session.refresh(blog)
            return blog

    def unique_blog_slug(self, base: str) -> str:
        """Return ``base`` or ``base-N`` with the smallest N not yet taken."""
        with self._db.session() as session:
            taken = set(
                session.exec(
                    select(Blog.slug).where(
                        (Blog.slug == base) | col(Blog.slug).like(f"{base}-%")
                    )
                ).all()
            )
        if base not in taken:
            return base
        n = 2
        while f"{base}-{n}" in taken:
            n += 1
        return f"{base}-{n}"

    # ------------------------------------------------------------------
    # Generations (job table)
    # ------------------------------------------------------------------

    def create_generation(self, request: GenerationRequest, model: str) -> Generation:
        generation = Generation(
            theme_id=request.theme_id,
            prompt=request.topic,
            model=model,
            request=request,
        )
        with self._db.session() as session:
            session.add(generation)
            session.commit()
            session.refresh(generation)
            return generation

    def get_generation(self, generation_id: str) -> Generation | None:
        with self._db.session() as session:
            return session.get(Generation, generation_id)

    def list_generations(self, limit: int = 20) -> list[Generation]:
        with self._db.session() as session:
            return list(
                session.exec(
                    select(Generation).order_by(col(Generation.created_at).desc()).limit(limit)
                ).all()
            )

    def advance(
        self, generation_id: str, status: GenerationStatus, **fields: Any
    ) -> Generation:
        """Move a job forward to ``status``, writing ``fields`` alongside.

        Raises :class:`InvalidTransition` for backward moves and for any
        move out of a terminal state; nothing is written in that case.
        """
        with self._db.session() as session:
            generation = session.get(Generation, generation_id)
            if generation is None:
                raise LookupError(f"Generation {generation_id} not found")
            self._apply_transition(generation, status, fields)
            session.add(generation)
            session.commit()
            session.refresh(generation)
            return generation

    def fail(self, generation_id: str, kind: ErrorKind, detail: str) -> Generation:
        return self.advance(
            generation_id, GenerationStatus.FAILED, error_kind=kind, error=detail
        )

    def complete(
        self,
        generation_id: str,
        blog_id: str,
        *,
        cost: float,
        blog_fields: dict[str, Any],
    ) -> Generation:
        """Finalize the blog and the job in a single transaction."""
        now = utcnow()
        with self._db.session() as session:
            generation = session.get(Generation, generation_id)
            blog = session.get(Blog, blog_id)
            if generation is None or blog is None:
                raise LookupError(f"Generation {generation_id} or blog {blog_id} not found")
            for key, value in blog_fields.items():
                setattr(blog, key, value)
            blog.updated_at = now
            self._apply_transition(
                generation,
                GenerationStatus.COMPLETED,
                {"output": blog_id, "cost": cost, "completed_at": now},
            )
            session.add(blog)
            session.add(generation)
            session.commit()
            session.refresh(generation)
            return generation

    @staticmethod
    def _apply_transition(
        generation: Generation, status: GenerationStatus, fields: dict[str, Any]
    ) -> None:
        if not generation.status.can_advance_to(status):
            raise InvalidTransition(
                f"Generation {generation.id}: {generation.status.value} -> {status.value}"
            )
        if "output" in fields and status is not GenerationStatus.COMPLETED:
            raise InvalidTransition("output is only set on completion")
        generation.status = status
        for key, value in fields.items():
            setattr(generation, key, value)
        generation.updated_at = utcnow()

    def claim_next(self, worker_id: str) -> str | None:
        """Atomically claim the oldest unclaimed pending job."""
        with self._db.session() as session:
            candidate = session.exec(
                select(Generation.id)
                .where(Generation.status == GenerationStatus.PENDING)
                .where(col(Generation.worker_id).is_(None))
                .order_by(col(Generation.created_at))
                .limit(1)
            ).first()
            if candidate is None:
                return None
            claimed = self._claim(session, candidate, worker_id)
        if not claimed:
            logger.debug("Lost claim race for %s", candidate)
            return None
        return candidate

    def claim(self, generation_id: str, worker_id: str) -> bool:
        """Claim one specific job; False if it is not pending or already claimed."""
        with self._db.session() as session:
            return self._claim(session, generation_id, worker_id)

    @staticmethod
    def _claim(session: Session, generation_id: str, worker_id: str) -> bool:
        now = utcnow()
        result = session.connection().execute(
            update(Generation)
            .where(col(Generation.id) == generation_id)
            .where(col(Generation.status) == GenerationStatus.PENDING)
            .where(col(Generation.worker_id).is_(None))
            .values(worker_id=worker_id, started_at=now, updated_at=now)
        )
        session.commit()
        return result.rowcount == 1

    def release(self, generation_id: str, worker_id: str) -> bool:
        """Put a claimed job that never started back in the queue."""
        with self._db.session() as session:
            result = session.connection().execute(
                update(Generation)
                .where(col(Generation.id) == generation_id)
                .where(col(Generation.status) == GenerationStatus.PENDING)
                .where(col(Generation.worker_id) == worker_id)
                .values(worker_id=None, started_at=None, updated_at=utcnow())
            )
            session.commit()
        return result.rowcount == 1

    def touch(self, generation_id: str) -> None:
        """Record progress on a running job without changing its status."""
        with self._db.session() as session:
            session.connection().execute(
                update(Generation)
                .where(col(Generation.id) == generation_id)
                .values(updated_at=utcnow())
            )
            session.commit()

    def stale_jobs(self, older_than: datetime) -> list[Generation]:
        """Claimed, non-terminal jobs not touched since ``older_than``.

        This includes jobs still ``pending`` whose worker died between the
        claim and the first status change.
        """
        active = [
            GenerationStatus.RESEARCHING,
            GenerationStatus.OUTLINING,
            GenerationStatus.WRITING,
        ]
        claimed_pending = (col(Generation.status) == GenerationStatus.PENDING) & col(
            Generation.worker_id
        ).is_not(None)
        with self._db.session() as session:
            return list(
                session.exec(
                    select(Generation)
                    .where(col(Generation.status).in_(active) | claimed_pending)
                    .where(Generation.updated_at < older_than)
                ).all()
            )

    # ------------------------------------------------------------------
    # Research
    # ------------------------------------------------------------------

    def save_research(
        self,
        topic: str,
        sources: Iterable[ResearchSource],
        key_stats: list[str],
        *,
        ttl_days: int = 30,
        summary: str = "",
    ) -> Research:
        now = utcnow()
        research = Research(
            query=topic,
            topic=topic,
            sources=list(sources),
            key_stats=key_stats,
            summary=summary,
            created_at=now,
            expires_at=now + timedelta(days=ttl_days),
        )
        with self._db.session() as session:
            session.add(research)
            session.commit()
            session.refresh(research)
            return research

    def find_research(self, topic: str, now: datetime | None = None) -> Research | None:
        """Newest non-expired research for ``topic``."""
        now = now or utcnow()
        with self._db.session() as session:
            return session.exec(
                select(Research)
                .where(Research.topic == topic)
                .where(Research.expires_at > now)
                .order_by(col(Research.created_at).desc())
            ).first()

    # ------------------------------------------------------------------
    # Legacy demo posts
    # ------------------------------------------------------------------

    def list_posts(self, tag: str | None = None) -> list[Post]:
        """Posts newest first, optionally only those carrying ``tag``."""
        with self._db.session() as session:
            posts = list(session.exec(select(Post).order_by(col(Post.date).desc())).all())
        if tag is None:
            return posts
        return [p for p in posts if tag in (p.tags or [])]

    def get_post_by_slug(self, slug: str) -> Post | None:
        with self._db.session() as session:
            return session.exec(select(Post).where(Post.slug == slug)).first()

    def seed_posts(self, posts: Iterable[Post]) -> int:
        """Insert ``posts`` only when the table is empty; return how many were added."""
        with self._db.session() as session:
            count = session.exec(select(func.count(Post.id))).one()
            if count > 0:
                return 0
            added = 0
            for post in posts:
                session.add(post)
                added += 1
            session.commit()
            return added
