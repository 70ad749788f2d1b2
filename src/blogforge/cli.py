"""CLI entry point for the blogforge generation service."""

from __future__ import annotations

import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from blogforge import __version__
from blogforge.content.base import Voice

console = Console()

_STATUS_STYLE = {
    "pending": "dim",
    "researching": "cyan",
    "outlining": "cyan",
    "writing": "cyan",
    "completed": "green",
    "failed": "red",
}


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """blogforge: research, outline and write blog articles with Claude."""


# ---------------------------------------------------------------------------
# serve / worker: long-running processes
# ---------------------------------------------------------------------------


@main.command()
@click.option("--host", default="127.0.0.1", help="Bind address")
@click.option("--port", "-p", default=8000, help="Port")
@click.option("--embedded-worker", is_flag=True, help="Also run a job worker in-process")
def serve(host: str, port: int, embedded_worker: bool) -> None:
    """Run the web API and public pages."""
    import uvicorn

    from blogforge.config import get_settings
    from blogforge.errors import ConfigurationError
    from blogforge.web.app import create_app

    settings = get_settings()
    if embedded_worker:
        settings.embedded_worker = True
    try:
        app = create_app(settings)
    except ConfigurationError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise SystemExit(1)

    if not settings.anthropic_api_key:
        console.print("[yellow]ANTHROPIC_API_KEY not set; generation jobs will fail.[/yellow]")
    uvicorn.run(app, host=host, port=port, log_level=settings.log_level.lower())


@main.command()
@click.option("--once", is_flag=True, help="Run at most one job, then exit")
@click.option("--worker-id", default=None, help="Identifier recorded on claimed jobs")
def worker(once: bool, worker_id: str | None) -> None:
    """Poll the job table and run pending generations."""
    import threading

    from blogforge.config import get_settings
    from blogforge.logs import configure_logging
    from blogforge.pipeline.worker import build_worker

    settings = get_settings()
    configure_logging(settings.log_level)
    _check_api_key(settings)

    with _open_store(settings) as store:
        job_worker = build_worker(settings, store, worker_id=worker_id)
        if once:
            job_worker.recover_abandoned(settings.job_stale_after_seconds)
            job_id = job_worker.run_once()
            if job_id is None:
                console.print("[dim]No pending jobs.[/dim]")
            else:
                _print_generation(store.get_generation(job_id))
            return

        console.print(f"[bold]Worker {job_worker.worker_id}[/bold] (Ctrl+C to stop)")
        stop = threading.Event()
        try:
            job_worker.run_forever(
                settings.worker_poll_seconds,
                stop,
                stale_after=settings.job_stale_after_seconds,
            )
        except KeyboardInterrupt:
            stop.set()
            console.print("\n[dim]Worker stopped.[/dim]")


# ---------------------------------------------------------------------------
# create-user / seed-posts: data seeding
# ---------------------------------------------------------------------------


@main.command("create-user")
@click.option("--email", "-e", required=True, help="Login email")
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
@click.option("--name", "-n", default=None, help="Display name")
@click.option("--role", type=click.Choice(["admin", "editor"]), default="admin")
def create_user(email: str, password: str, name: str | None, role: str) -> None:
    """Create a login, or reset the password of an existing one."""
    from blogforge.auth.credentials import seed_user
    from blogforge.config import get_settings

    if not password:
        console.print("[bold red]Error:[/bold red] password must not be empty.")
        raise SystemExit(1)

    settings = get_settings()
    with _open_store(settings) as store:
        user = seed_user(store, email, password, name=name, role=role)
    console.print(f"[green]User ready:[/green] {user.email} ({user.role})")


@main.command("seed-posts")
def seed_posts() -> None:
    """Insert the demo finance posts if the posts table is empty."""
    from blogforge.config import get_settings
    from blogforge.content.demo_posts import demo_posts

    settings = get_settings()
    with _open_store(settings) as store:
        added = store.seed_posts(demo_posts())
    if added:
        console.print(f"[green]Seeded {added} posts.[/green]")
    else:
        console.print("[dim]Posts already present, nothing seeded.[/dim]")


# ---------------------------------------------------------------------------
# submit / status / jobs: the job table
# ---------------------------------------------------------------------------


@main.command()
@click.option("--topic", "-t", required=True, help="Article topic")
@click.option("--keyword", "-k", "keywords", multiple=True, help="SEO keyword (repeatable)")
@click.option("--tone", default="professional", help="Writing tone")
@click.option(
    "--voice",
    type=click.Choice([v.value for v in Voice]),
    default="expert",
)
@click.option("--words", "-w", "target_length", default=2000, help="Target word count")
@click.option("--no-research", is_flag=True, help="Skip the web research step")
@click.option("--author", "author_email", default=None, help="Author email (must exist)")
@click.option("--run", "run_now", is_flag=True, help="Run the job in this process")
@click.option("--max-wait", default=900, help="Seconds to wait if another worker holds the job")
def submit(
    topic: str,
    keywords: tuple[str, ...],
    tone: str,
    voice: str,
    target_length: int,
    no_research: bool,
    author_email: str | None,
    run_now: bool,
    max_wait: int,
) -> None:
    """Queue a generation job (optionally run it right away)."""
    from blogforge.config import get_settings
    from blogforge.storage.models import GenerationRequest

    if not topic.strip():
        console.print("[bold red]Error:[/bold red] topic must not be blank.")
        raise SystemExit(1)

    settings = get_settings()
    if run_now:
        _check_api_key(settings)

    with _open_store(settings) as store:
        author_id = None
        if author_email:
            author = store.get_user_by_email(author_email)
            if author is None:
                console.print(f"[bold red]Error:[/bold red] no user {author_email}")
                raise SystemExit(1)
            author_id = author.id

        request = GenerationRequest(
            topic=topic.strip(),
            author_id=author_id,
            keywords=list(keywords),
            tone=tone,
            voice=voice,
            target_length=target_length,
            research_topic=not no_research,
        )
        generation = store.create_generation(request, model=settings.model)
        console.print(f"[green]Queued[/green] {generation.id}: {request.topic}")

        if run_now:
            generation = _run_until_terminal(settings, store, generation.id, max_wait)
            _print_generation(generation)


@main.command()
@click.argument("generation_id")
def status(generation_id: str) -> None:
    """Show one generation job."""
    from blogforge.config import get_settings

    settings = get_settings()
    with _open_store(settings) as store:
        generation = store.get_generation(generation_id)
    if generation is None:
        console.print(f"[bold red]Generation not found:[/bold red] {generation_id}")
        raise SystemExit(1)
    _print_generation(generation)


@main.command()
@click.argument("blog_id")
@click.option("--draft", is_flag=True, help="Unpublish back to draft instead")
def publish(blog_id: str, draft: bool) -> None:
    """Publish a finished blog so the public pages show it."""
    from blogforge.config import get_settings
    from blogforge.errors import InvalidTransition
    from blogforge.storage.models import BlogStatus

    settings = get_settings()
    target = BlogStatus.DRAFT if draft else BlogStatus.PUBLISHED
    with _open_store(settings) as store:
        try:
            blog = store.set_blog_status(blog_id, target)
        except InvalidTransition as e:
            console.print(f"[bold red]Cannot change status:[/bold red] {e}")
            raise SystemExit(1)
    if blog is None:
        console.print(f"[bold red]Blog not found:[/bold red] {blog_id}")
        raise SystemExit(1)
    console.print(
        f"[green]{blog.title}[/green] is now [bold]{blog.status.value}[/bold] (/blog/{blog.slug})"
    )


@main.command()
@click.option("--limit", "-n", default=20, help="Number of jobs to list")
def jobs(limit: int) -> None:
    """List recent generation jobs."""
    from blogforge.config import get_settings

    settings = get_settings()
    with _open_store(settings) as store:
        generations = store.list_generations(limit)

    if not generations:
        console.print("[dim]No generation jobs yet.[/dim]")
        return

    table = Table(title="Recent Generations")
    table.add_column("ID", width=32)
    table.add_column("Topic", width=40)
    table.add_column("Status", width=12)
    table.add_column("Error", width=20)
    table.add_column("Created", width=16)
    for g in generations:
        style = _STATUS_STYLE.get(g.status.value, "")
        table.add_row(
            g.id,
            g.prompt[:40],
            f"[{style}]{g.status.value}[/{style}]" if style else g.status.value,
            g.error_kind.value if g.error_kind else "",
            g.created_at.strftime("%Y-%m-%d %H:%M"),
        )
    console.print(table)


# ---------------------------------------------------------------------------
# autogen: unattended daily generation from a topic queue
# ---------------------------------------------------------------------------


@main.command()
@click.option(
    "--queue",
    "queue_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Topic queue JSON (created with defaults if missing)",
)
@click.option("--daily-limit", default=1, help="Maximum articles per day")
@click.option("--max-wait", default=900, help="Seconds to wait if another worker holds the job")
def autogen(queue_path: Path | None, daily_limit: int, max_wait: int) -> None:
    """Generate the next queued topic, respecting a daily limit."""
    from blogforge.config import get_settings
    from blogforge.logs import configure_logging
    from blogforge.pipeline.topics import TopicQueue
    from blogforge.storage.models import GenerationRequest, GenerationStatus

    settings = get_settings()
    configure_logging(settings.log_level)
    queue_path = queue_path or settings.db_path.parent / "topic-queue.json"
    queue = TopicQueue.load(queue_path)

    if not queue.should_generate(daily_limit):
        queue.save(queue_path)
        console.print(
            f"[dim]Nothing to do: {queue.generated_today}/{daily_limit} generated today, "
            f"{len(queue.topics)} topics queued.[/dim]"
        )
        return

    _check_api_key(settings)
    topic = queue.select_next()
    console.print(f"[bold]Generating:[/bold] {topic.topic}")

    with _open_store(settings) as store:
        generation = store.create_generation(
            GenerationRequest(topic=topic.topic, keywords=topic.keywords),
            model=settings.model,
        )
        generation = _run_until_terminal(settings, store, generation.id, max_wait)

    _print_generation(generation)
    if generation.status is GenerationStatus.COMPLETED and generation.blog_id:
        queue.mark_completed(topic, generation.blog_id)
        console.print(f"[green]Done.[/green] {len(queue.topics)} topics remaining.")
    queue.save(queue_path)

    if generation.status is not GenerationStatus.COMPLETED:
        raise SystemExit(1)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _check_api_key(settings: object) -> None:
    """Exit with a helpful message if the API key is not set."""
    if not getattr(settings, "anthropic_api_key", ""):
        console.print(
            "[bold red]Error:[/bold red] ANTHROPIC_API_KEY not set.\n"
            "Add it to your environment or .env file."
        )
        raise SystemExit(1)


@contextmanager
def _open_store(settings) -> Iterator:
    """Open the database for one command and dispose it afterwards."""
    from blogforge.storage.database import Database
    from blogforge.storage.store import Store

    database = Database(settings.db_path)
    try:
        yield Store(database)
    finally:
        database.close()


def _run_until_terminal(settings, store, generation_id: str, max_wait: int, job_worker=None):
    """Run ``generation_id`` inline, or wait for the worker that claimed it.

    Only this job is run; other queued jobs are left for the workers.
    ``max_wait`` bounds the wait on a job claimed elsewhere.
    """
    if job_worker is None:
        from blogforge.pipeline.worker import build_worker

        job_worker = build_worker(settings, store)
    with console.status("[bold green]Generating article..."):
        if job_worker.run_job(generation_id):
            return store.get_generation(generation_id)

        deadline = time.monotonic() + max_wait
        while True:
            generation = store.get_generation(generation_id)
            if generation.status.is_terminal:
                return generation
            if time.monotonic() >= deadline:
                console.print(f"[yellow]Gave up waiting after {max_wait}s.[/yellow]")
                return generation
            time.sleep(settings.worker_poll_seconds)


def _print_generation(generation) -> None:
    lines = [
        f"Status: {generation.status.value}",
        f"Model: {generation.model}",
    ]
    if generation.blog_id:
        lines.append(f"Blog: {generation.blog_id}")
    if generation.cost is not None:
        lines.append(f"Cost: ${generation.cost:.4f}")
    if generation.error_kind:
        lines.append(f"Error ({generation.error_kind.value}): {generation.error}")
    if generation.worker_id:
        lines.append(f"Worker: {generation.worker_id}")
    console.print(
        Panel("\n".join(lines), title=f"[bold]{generation.prompt}", subtitle=generation.id)
    )
