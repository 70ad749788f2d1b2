"""Prompt stages for a long-form article: outline, sections, intro, conclusion."""

from __future__ import annotations

import json
import re

from pydantic import ValidationError

from blogforge.content.base import Outline, OutlineSection, voice_instructions
from blogforge.errors import OutlineParseError
from blogforge.llm.client import ClaudeClient
from blogforge.llm.prompts import render
from blogforge.research.collector import ResearchResult
from blogforge.storage.models import GenerationRequest

_FENCE = re.compile(r"^```(?:json)?\s*\n(.*)\n```\s*$", re.DOTALL)

MAX_SECTION_STATS = 3


def _strip_fence(text: str) -> str:
    text = text.strip()
    match = _FENCE.match(text)
    return match.group(1) if match else text


class ArticleGenerator:
    """Builds each prompt of the article pipeline and calls the model."""

    def __init__(self, client: ClaudeClient) -> None:
        self._client = client

    @property
    def client(self) -> ClaudeClient:
        return self._client

    def outline(self, request: GenerationRequest, research: ResearchResult | None) -> Outline:
        prompt = render(
            "outline.j2",
            topic=request.topic,
            voice_instructions=voice_instructions(request.voice),
            tone=request.tone,
            target_length=request.target_length,
            keywords=request.keywords,
            research=research,
        )
        response = self._client.complete(prompt)

        try:
            data = json.loads(_strip_fence(response))
        except json.JSONDecodeError as exc:
            raise OutlineParseError(f"Outline is not valid JSON: {exc}") from exc
        try:
            return Outline.model_validate(data)
        except ValidationError as exc:
            raise OutlineParseError(
                f"Outline JSON has the wrong shape: {exc.error_count()} errors"
            ) from exc

    def section(
        self,
        request: GenerationRequest,
        section: OutlineSection,
        research: ResearchResult | None,
    ) -> str:
        prompt = render(
            "section.j2",
            topic=request.topic,
            voice_instructions=voice_instructions(request.voice),
            section=section,
            tone=request.tone,
            keywords=request.keywords,
            stats=research.key_stats[:MAX_SECTION_STATS] if research else [],
        )
        return self._client.complete(prompt)

    def introduction(self, request: GenerationRequest, outline: Outline) -> str:
        prompt = render(
            "introduction.j2",
            title=outline.title,
            topic=request.topic,
            voice_instructions=voice_instructions(request.voice),
            tone=request.tone,
            key_points=outline.key_points,
        )
        return self._client.complete(prompt)

    def conclusion(self, request: GenerationRequest, outline: Outline) -> str:
        prompt = render(
            "conclusion.j2",
            title=outline.title,
            topic=request.topic,
            voice_instructions=voice_instructions(request.voice),
            tone=request.tone,
            key_points=outline.key_points,
        )
        return self._client.complete(prompt)
