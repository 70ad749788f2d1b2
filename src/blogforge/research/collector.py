"""Collect web search results for a topic and score them."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from urllib.parse import urlparse

import httpx

from blogforge.config import Settings
from blogforge.storage.models import Research, ResearchSource

logger = logging.getLogger(__name__)

BRAVE_SEARCH_URL = "https://api.search.brave.com/res/v1/web/search"

MAX_QUERIES = 3
RESULTS_PER_QUERY = 5
MAX_SOURCES = 10
MAX_STATS = 10
MATCHES_PER_PATTERN = 5

MAJOR_OUTLETS = ["reuters.com", "bloomberg.com", "forbes.com", "wsj.com", "nytimes.com"]
PLATFORMS = ["medium.com", "substack.com", "linkedin.com"]

STAT_PATTERNS = [
    re.compile(r"\d+%"),
    re.compile(r"\$[\d,]+(?:\.\d{2})?"),
    re.compile(r"\d+ million", re.IGNORECASE),
    re.compile(r"\d+ billion", re.IGNORECASE),
]


@dataclass
class ResearchResult:
    """Structured research gathered for one topic."""

    query: str
    sources: list[ResearchSource] = field(default_factory=list)
    key_stats: list[str] = field(default_factory=list)
    summary: str = ""

    @classmethod
    def from_record(cls, record: Research) -> ResearchResult:
        return cls(
            query=record.query,
            sources=list(record.sources),
            key_stats=list(record.key_stats),
            summary=record.summary,
        )


def credibility_score(url: str) -> float:
    """Static trust weight for a source, by domain."""
    try:
        domain = (urlparse(url).hostname or "").lower()
    except ValueError:
        return 0.5

    if re.search(r"\.(edu|gov)$", domain):
        return 0.95
    if any(outlet in domain for outlet in MAJOR_OUTLETS):
        return 0.9
    if any(platform in domain for platform in PLATFORMS):
        return 0.7
    return 0.5


def extract_stats(text: str) -> list[str]:
    """Pull percentages, dollar amounts and millions/billions out of free text."""
    stats: list[str] = []
    for pattern in STAT_PATTERNS:
        stats.extend(pattern.findall(text)[:MATCHES_PER_PATTERN])
    return list(dict.fromkeys(stats))[:MAX_STATS]


def build_queries(topic: str, keywords: list[str] | None = None) -> list[str]:
    candidates = [
        topic,
        f"{topic} statistics 2024",
        f"{topic} trends",
        *(keywords or [])[:2],
    ]
    return candidates[:MAX_QUERIES]


class ResearchCollector:
    """Query the Brave web search API for a topic."""

    def __init__(self, settings: Settings, client: httpx.Client | None = None) -> None:
        self._api_key = settings.brave_api_key
        self._client = client or httpx.Client(
            timeout=settings.search_timeout_seconds,
            headers={"Accept": "application/json"},
        )

    @property
    def enabled(self) -> bool:
        return bool(self._api_key)

    def collect(self, topic: str, keywords: list[str] | None = None) -> ResearchResult | None:
        """Search, score and extract statistics; None when research is unavailable."""
        if not self.enabled:
            logger.warning("BRAVE_API_KEY not set, skipping research")
            return None

        try:
            results: list[dict] = []
            for query in build_queries(topic, keywords):
                results.extend(self._search(query))
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Research failed for %r: %s", topic, exc)
            return None

        sources = [
            ResearchSource(
                url=item.get("url", ""),
                title=item.get("title", ""),
                description=item.get("description", ""),
                age=item.get("age"),
                credibility=credibility_score(item.get("url", "")),
            )
            for item in results[:MAX_SOURCES]
        ]
        descriptions = " ".join(item.get("description", "") or "" for item in results)

        return ResearchResult(
            query=topic,
            sources=sources,
            key_stats=extract_stats(descriptions),
        )

    def _search(self, query: str) -> list[dict]:
        resp = self._client.get(
            BRAVE_SEARCH_URL,
            params={"q": query, "count": RESULTS_PER_QUERY},
            headers={"X-Subscription-Token": self._api_key},
        )
        if not resp.is_success:
            logger.warning("Search for %r returned %s, skipping", query, resp.status_code)
            return []
        return resp.json().get("web", {}).get("results", [])

    def close(self) -> None:
        self._client.close()
