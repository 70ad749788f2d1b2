"""Tests for the command-line interface."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from click.testing import CliRunner

from blogforge.cli import _run_until_terminal, main
from blogforge.config import Settings
from blogforge.content.article import ArticleGenerator
from blogforge.llm.client import ClaudeClient
from blogforge.pipeline.orchestrator import GenerationOrchestrator
from blogforge.pipeline.worker import Worker
from blogforge.storage.database import Database
from blogforge.storage.models import Blog, BlogStatus, GenerationRequest, GenerationStatus
from blogforge.storage.store import Store
from tests.conftest import pipeline_responses


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "cli.db"


@pytest.fixture
def runner(db_path: Path) -> CliRunner:
    return CliRunner(
        env={
            "BLOGFORGE_DB_PATH": str(db_path),
            "BLOGFORGE_SESSION_SECRET": "cli-test-secret",
            "ANTHROPIC_API_KEY": "",
            "BRAVE_API_KEY": "",
            "COLUMNS": "200",
        }
    )


def _store(db_path: Path) -> tuple[Database, Store]:
    db = Database(db_path)
    return db, Store(db)


def test_create_user(runner: CliRunner, db_path: Path) -> None:
    result = runner.invoke(
        main, ["create-user", "--email", "admin@example.com", "--password", "pw-123"]
    )

    assert result.exit_code == 0, result.output
    assert "admin@example.com" in result.output
    db, store = _store(db_path)
    assert store.get_user_by_email("admin@example.com").role == "admin"
    db.close()


def test_seed_posts_twice(runner: CliRunner) -> None:
    first = runner.invoke(main, ["seed-posts"])
    second = runner.invoke(main, ["seed-posts"])

    assert "Seeded 10 posts" in first.output
    assert "nothing seeded" in second.output


def test_submit_then_status_and_jobs(runner: CliRunner, db_path: Path) -> None:
    result = runner.invoke(main, ["submit", "--topic", "Index funds", "-k", "ETF"])
    assert result.exit_code == 0, result.output

    db, store = _store(db_path)
    [job] = store.list_generations()
    db.close()
    assert job.status is GenerationStatus.PENDING
    assert job.request.keywords == ["ETF"]

    status = runner.invoke(main, ["status", job.id])
    assert status.exit_code == 0
    assert "pending" in status.output

    jobs = runner.invoke(main, ["jobs"])
    assert "Index funds" in jobs.output


def test_status_unknown_job(runner: CliRunner) -> None:
    result = runner.invoke(main, ["status", "does-not-exist"])

    assert result.exit_code == 1
    assert "not found" in result.output


def test_submit_run_requires_api_key(runner: CliRunner) -> None:
    result = runner.invoke(main, ["submit", "--topic", "Budgeting", "--run"])

    assert result.exit_code == 1
    assert "ANTHROPIC_API_KEY" in result.output


def test_autogen_respects_daily_limit(runner: CliRunner, tmp_path: Path) -> None:
    queue = tmp_path / "queue.json"

    result = runner.invoke(main, ["autogen", "--queue", str(queue), "--daily-limit", "0"])

    assert result.exit_code == 0, result.output
    assert queue.exists()
    assert "Nothing to do" in result.output


def test_publish_and_unpublish(runner: CliRunner, db_path: Path) -> None:
    db, store = _store(db_path)
    blog = store.create_blog(Blog(title="Ready to ship", slug="ready-to-ship"))
    half = store.create_blog(Blog(title="Half", slug="half", status=BlogStatus.GENERATING))
    db.close()

    published = runner.invoke(main, ["publish", blog.id])
    assert published.exit_code == 0, published.output
    assert "published" in published.output

    db, store = _store(db_path)
    assert store.get_blog(blog.id).published_at is not None
    db.close()

    drafted = runner.invoke(main, ["publish", blog.id, "--draft"])
    assert "draft" in drafted.output

    assert runner.invoke(main, ["publish", half.id]).exit_code == 1
    missing = runner.invoke(main, ["publish", "nope"])
    assert missing.exit_code == 1
    assert "not found" in missing.output


def _inline_worker(store: Store, client: ClaudeClient) -> Worker:
    orchestrator = GenerationOrchestrator(store, ArticleGenerator(client), MagicMock())
    return Worker(store, orchestrator, worker_id="cli-inline")


def test_inline_run_leaves_other_jobs_queued(
    settings: Settings, store: Store, mock_claude_client: ClaudeClient
) -> None:
    mock_claude_client._client.messages.create.side_effect = pipeline_responses()
    queued = store.create_generation(GenerationRequest(topic="Someone else's"), model="m")
    mine = store.create_generation(
        GenerationRequest(topic="Mine", research_topic=False), model="m"
    )

    result = _run_until_terminal(
        settings, store, mine.id, max_wait=0, job_worker=_inline_worker(store, mock_claude_client)
    )

    assert result.status is GenerationStatus.COMPLETED
    other = store.get_generation(queued.id)
    assert other.status is GenerationStatus.PENDING
    assert other.worker_id is None


def test_inline_run_waits_on_job_held_elsewhere(
    settings: Settings, store: Store, mock_claude_client: ClaudeClient
) -> None:
    job = store.create_generation(GenerationRequest(topic="Held"), model="m")
    store.claim(job.id, "server-worker")

    result = _run_until_terminal(
        settings, store, job.id, max_wait=0, job_worker=_inline_worker(store, mock_claude_client)
    )

    assert result.status is GenerationStatus.PENDING
    assert result.worker_id == "server-worker"
    mock_claude_client._client.messages.create.assert_not_called()
