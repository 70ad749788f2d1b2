"""Shared content types, voice blocks and article metrics."""

from __future__ import annotations

import math
import re
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Voice(str, Enum):
    EXPERT = "expert"
    EXPERIENCED = "experienced"
    CURIOUS = "curious"
    SKEPTICAL = "skeptical"


VOICE_INSTRUCTIONS = {
    Voice.EXPERT: (
        "Voice: Expert Authority\n"
        "- Write as an experienced professional\n"
        "- Share insights from years of experience\n"
        '- Use phrases like "In my experience...", "What I\'ve learned..."\n'
        "- Confident but not arrogant\n"
        "- Include specific expertise markers"
    ),
    Voice.EXPERIENCED: (
        "Voice: Been-There-Done-That\n"
        "- Write as someone who's made mistakes and learned\n"
        '- Use "When I first started...", "I used to think..."\n'
        "- Share failures and lessons\n"
        "- Empathetic and encouraging\n"
        '- "Here\'s what I wish I knew..."'
    ),
    Voice.CURIOUS: (
        "Voice: Curious Explorer\n"
        "- Write as someone learning alongside reader\n"
        '- Use "I discovered...", "I was surprised to learn..."\n'
        "- Ask questions and explore answers\n"
        "- Enthusiastic about finding things out\n"
        '- "Let\'s figure this out together..."'
    ),
    Voice.SKEPTICAL: (
        "Voice: Healthy Skeptic\n"
        "- Question conventional wisdom\n"
        '- Use "But wait...", "Here\'s what they don\'t tell you..."\n'
        "- Challenge assumptions\n"
        "- Back up skepticism with data\n"
        '- "I was doubtful until I saw..."'
    ),
}


def voice_instructions(voice: str | None) -> str:
    """Instruction block for ``voice``; unknown voices get the expert block."""
    try:
        return VOICE_INSTRUCTIONS[Voice(voice)]
    except ValueError:
        return VOICE_INSTRUCTIONS[Voice.EXPERT]


class OutlineSection(BaseModel):
    heading: str
    subsections: list[str] = Field(default_factory=list)
    word_count: int = 400


class Outline(BaseModel):
    """The model's plan for an article, parsed from its JSON answer."""

    model_config = ConfigDict(populate_by_name=True)

    title: str
    slug: str = ""
    excerpt: str = ""
    sections: list[OutlineSection]
    key_points: list[str] = Field(default_factory=list, alias="keyPoints")
    sources_to_cite: list[str] = Field(default_factory=list)


WORDS_PER_MINUTE = 200
WORDS_PER_1K_TOKENS = 750
COST_PER_1K_TOKENS = 0.003


def count_words(text: str) -> int:
    return len(text.split())


def reading_time(word_count: int) -> int:
    return math.ceil(word_count / WORDS_PER_MINUTE)


def estimate_cost(word_count: int) -> float:
    """Rough dollar estimate: outline + intro + conclusion + sections, per call."""
    api_calls = 4 + math.ceil(word_count / 500)
    tokens = word_count / WORDS_PER_1K_TOKENS * 1000
    return tokens / 1000 * COST_PER_1K_TOKENS * api_calls


def assemble_content(intro: str, sections: list[tuple[str, str]], conclusion: str) -> str:
    body = "".join(f"\n\n## {heading}\n\n{text}" for heading, text in sections)
    return f"{intro}\n\n{body}\n\n## Conclusion\n\n{conclusion}"


def slugify(text: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")
    return slug or "post"
