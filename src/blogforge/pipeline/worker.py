"""Polls the generation table and runs claimed jobs."""

from __future__ import annotations

import logging
import os
import socket
import threading
from datetime import datetime, timedelta, timezone
from uuid import uuid4

from blogforge.config import Settings
from blogforge.content.article import ArticleGenerator
from blogforge.errors import ErrorKind, InvalidTransition
from blogforge.llm.client import ClaudeClient
from blogforge.pipeline.orchestrator import GenerationOrchestrator
from blogforge.research.collector import ResearchCollector
from blogforge.storage.models import GenerationStatus
from blogforge.storage.store import Store

logger = logging.getLogger(__name__)


def default_worker_id() -> str:
    return f"{socket.gethostname()}:{os.getpid()}:{uuid4().hex[:6]}"


class Worker:
    """Claims pending jobs one at a time and hands them to the orchestrator."""

    def __init__(
        self,
        store: Store,
        orchestrator: GenerationOrchestrator,
        worker_id: str | None = None,
    ) -> None:
        self._store = store
        self._orchestrator = orchestrator
        self.worker_id = worker_id or default_worker_id()

    def claim_next(self) -> str | None:
        return self._store.claim_next(self.worker_id)

    def run_once(self) -> str | None:
        """Claim and run one job; return its id, or None if the queue was empty."""
        job_id = self.claim_next()
        if job_id is None:
            return None
        logger.info("Worker %s running generation %s", self.worker_id, job_id)
        self._orchestrator.run(job_id)
        return job_id

    def run_job(self, generation_id: str) -> bool:
        """Claim and run one specific job; False if another worker holds it."""
        if not self._store.claim(generation_id, self.worker_id):
            return False
        logger.info("Worker %s running generation %s", self.worker_id, generation_id)
        self._orchestrator.run(generation_id)
        return True

    def recover_abandoned(self, stale_after: int) -> list[str]:
        """Recover jobs held by a worker that is no longer updating them.

        Jobs that never left ``pending`` go back in the queue; jobs caught
        mid-pipeline are failed as abandoned.
        """
        cutoff = datetime.now(timezone.utc) - timedelta(seconds=stale_after)
        recovered = []
        for job in self._store.stale_jobs(cutoff):
            if job.status is GenerationStatus.PENDING:
                if self._store.release(job.id, job.worker_id):
                    logger.warning("Re-queued generation %s claimed by %s", job.id, job.worker_id)
                    recovered.append(job.id)
                continue
            try:
                self._store.fail(
                    job.id,
                    ErrorKind.ABANDONED,
                    f"No progress since {job.updated_at.isoformat()} (worker {job.worker_id})",
                )
            except InvalidTransition:
                continue
            logger.warning("Marked abandoned generation %s as failed", job.id)
            recovered.append(job.id)
        return recovered

    def run_forever(
        self,
        poll_interval: float,
        stop_event: threading.Event,
        *,
        stale_after: int = 1800,
    ) -> None:
        self.recover_abandoned(stale_after)
        logger.info("Worker %s polling every %ss", self.worker_id, poll_interval)
        while not stop_event.is_set():
            try:
                job_id = self.run_once()
            except Exception:
                logger.exception("Worker %s: unexpected error", self.worker_id)
                job_id = None
            if job_id is None:
                stop_event.wait(poll_interval)


class BackgroundWorker:
    """Runs a :class:`Worker` in a daemon thread, for single-process deployments."""

    def __init__(self, worker: Worker, poll_interval: float, stale_after: int) -> None:
        self._worker = worker
        self._poll_interval = poll_interval
        self._stale_after = stale_after
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        self._thread = threading.Thread(
            target=self._worker.run_forever,
            args=(self._poll_interval, self._stop),
            kwargs={"stale_after": self._stale_after},
            name=f"blogforge-worker-{self._worker.worker_id}",
            daemon=True,
        )
        self._thread.start()

    def stop(self, timeout: float | None = 10.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)


def build_worker(settings: Settings, store: Store, worker_id: str | None = None) -> Worker:
    """Wire a worker with the model client, generator and research collector."""
    orchestrator = GenerationOrchestrator(
        store,
        ArticleGenerator(ClaudeClient(settings)),
        ResearchCollector(settings),
        research_ttl_days=settings.research_ttl_days,
    )
    return Worker(store, orchestrator, worker_id=worker_id)
