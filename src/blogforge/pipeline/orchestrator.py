"""Drives one generation job through research, outline, writing and completion."""

from __future__ import annotations

import logging

from blogforge.content.article import ArticleGenerator
from blogforge.content.base import (
    assemble_content,
    count_words,
    estimate_cost,
    reading_time,
    slugify,
)
from blogforge.errors import InvalidTransition, classify
from blogforge.research.collector import ResearchCollector, ResearchResult
from blogforge.storage.models import (
    Blog,
    BlogStatus,
    Generation,
    GenerationRequest,
    GenerationStatus,
)
from blogforge.storage.store import Store

logger = logging.getLogger(__name__)

SOURCES_PER_SECTION = 2


class GenerationOrchestrator:
    """Runs the article pipeline for a pending job and records every step.

    Failures never escape :meth:`run`; they end the job in ``failed`` with
    an error kind and detail. Rows written before the failure are left as
    they are.
    """

    def __init__(
        self,
        store: Store,
        generator: ArticleGenerator,
        collector: ResearchCollector,
        *,
        research_ttl_days: int = 30,
    ) -> None:
        self._store = store
        self._generator = generator
        self._collector = collector
        self._research_ttl_days = research_ttl_days

    def run(self, generation_id: str) -> Generation:
        generation = self._store.get_generation(generation_id)
        if generation is None:
            raise LookupError(f"Generation {generation_id} not found")
        if generation.status is not GenerationStatus.PENDING:
            raise InvalidTransition(
                f"Generation {generation_id} is {generation.status.value}, not pending"
            )

        request = generation.request or GenerationRequest(topic=generation.prompt)
        try:
            return self._run(generation, request)
        except Exception as exc:
            logger.exception("Generation %s failed", generation_id)
            detail = str(exc) or type(exc).__name__
            try:
                return self._store.fail(generation_id, classify(exc), detail)
            except InvalidTransition:
                logger.error("Generation %s already terminal, failure not recorded", generation_id)
                return self._store.get_generation(generation_id)

    def _run(self, generation: Generation, request: GenerationRequest) -> Generation:
        job_id = generation.id

        research = None
        if request.research_topic:
            self._advance(job_id, GenerationStatus.RESEARCHING)
            research = self._research(request)

        self._advance(job_id, GenerationStatus.OUTLINING)
        outline = self._generator.outline(request, research)

        blog = self._store.create_blog(
            Blog(
                title=outline.title,
                slug=self._store.unique_blog_slug(slugify(outline.slug or outline.title)),
                excerpt=outline.excerpt,
                status=BlogStatus.GENERATING,
                author_id=request.author_id,
                theme_id=request.theme_id,
                generated_by=job_id,
            )
        )
        self._advance(job_id, GenerationStatus.WRITING, blog_id=blog.id)

        sections: list[tuple[str, str]] = []
        sources_used: list[str] = []
        for section in outline.sections:
            logger.info("Generation %s: writing section %r", job_id, section.heading)
            sections.append((section.heading, self._generator.section(request, section, research)))
            if research:
                sources_used.extend(s.url for s in research.sources[:SOURCES_PER_SECTION])
            self._store.touch(job_id)

        intro = self._generator.introduction(request, outline)
        conclusion = self._generator.conclusion(request, outline)

        content = assemble_content(intro, sections, conclusion)
        words = count_words(content)

        completed = self._store.complete(
            job_id,
            blog.id,
            cost=estimate_cost(words),
            blog_fields={
                "content": content,
                "status": BlogStatus.DRAFT,
                "word_count": words,
                "reading_time": reading_time(words),
                "keywords": request.keywords or [request.topic],
                "sources": list(dict.fromkeys(sources_used)),
            },
        )
        logger.info("Blog generation completed: %s (%d words)", blog.id, words)
        return completed

    def _advance(self, job_id: str, status: GenerationStatus, **fields: object) -> None:
        self._store.advance(job_id, status, **fields)
        logger.info("Generation %s: %s", job_id, status.value)

    def _research(self, request: GenerationRequest) -> ResearchResult | None:
        """Cached or fresh research; any failure degrades to no research."""
        cached = self._store.find_research(request.topic)
        if cached is not None:
            logger.info("Reusing research %s for %r", cached.id, request.topic)
            return ResearchResult.from_record(cached)

        try:
            research = self._collector.collect(request.topic, request.keywords)
        except Exception:
            logger.warning("Research for %r failed, continuing without it", request.topic, exc_info=True)
            return None
        if research is None:
            return None

        self._store.save_research(
            request.topic,
            research.sources,
            research.key_stats,
            ttl_days=self._research_ttl_days,
            summary=research.summary,
        )
        return research
