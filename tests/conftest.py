"""Shared test fixtures."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from blogforge.config import Settings
from blogforge.llm.client import ClaudeClient
from blogforge.storage.database import Database
from blogforge.storage.store import Store


@pytest.fixture
def tmp_data_dir(tmp_path: Path) -> Path:
    """Create a temporary data directory."""
    data = tmp_path / "data"
    data.mkdir()
    return data


@pytest.fixture
def settings(tmp_data_dir: Path) -> Settings:
    """Create test settings with temporary paths."""
    return Settings(
        anthropic_api_key="test-key-not-real",
        brave_api_key="",
        session_secret="test-session-secret",
        model="claude-sonnet-4-20250514",
        max_tokens=1024,
        temperature=0.7,
        db_path=tmp_data_dir / "test.db",
        site_url="http://localhost:3000",
    )


@pytest.fixture
def database(settings: Settings):
    db = Database(settings.db_path)
    yield db
    db.close()


@pytest.fixture
def store(database: Database) -> Store:
    return Store(database)


@pytest.fixture
def mock_claude_client(settings: Settings) -> ClaudeClient:
    """Create a ClaudeClient with a mocked Anthropic SDK."""
    client = ClaudeClient(settings)
    # Replace the internal Anthropic client with a mock
    mock_anthropic = MagicMock()
    client._client = mock_anthropic
    return client


def make_mock_response(text: str, input_tokens: int = 100, output_tokens: int = 200):
    """Helper to create a mock Anthropic API response."""
    mock_response = MagicMock()
    mock_response.content = [MagicMock(text=text)]
    mock_response.usage.input_tokens = input_tokens
    mock_response.usage.output_tokens = output_tokens
    return mock_response


def make_outline_json(title: str = "How to Save $10,000 in One Year", sections: int = 2) -> str:
    """A well-formed outline answer, as the model would return it."""
    return json.dumps({
        "title": title,
        "slug": "save-10000-one-year",
        "excerpt": "A practical plan for saving ten thousand dollars in twelve months.",
        "sections": [
            {"heading": f"Step {i + 1}", "subsections": [], "word_count": 300}
            for i in range(sections)
        ],
        "keyPoints": ["Automate savings", "Cut fixed costs", "Track progress"],
        "sources_to_cite": [],
    })


def pipeline_responses(outline: str | None = None, sections: int = 2) -> list:
    """Model answers for one full pipeline run: outline, sections, intro, conclusion."""
    answers = [outline or make_outline_json(sections=sections)]
    answers.extend(f"Body text for section {i + 1} with concrete advice." for i in range(sections))
    answers.append("An opening paragraph that hooks the reader.")
    answers.append("A closing paragraph with one clear next step.")
    return [make_mock_response(text) for text in answers]
