"""FastAPI application factory; the composition root for the web process."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from blogforge import __version__
from blogforge.config import Settings, get_settings
from blogforge.logs import configure_logging
from blogforge.pipeline.worker import BackgroundWorker, build_worker
from blogforge.storage.database import Database
from blogforge.storage.store import Store
from blogforge.web.routes import auth, blogs, generate, pages, posts, themes

logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    return f"{location}: {message}" if location else message


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": _validation_message(exc)})


def create_app(settings: Settings | None = None, store: Store | None = None) -> FastAPI:
    """Build the app. A store passed in is used as-is and never closed here."""
    settings = settings or get_settings()
    settings.check_session_secret()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database = None
        if app.state.store is None:
            database = Database(settings.db_path)
            app.state.store = Store(database)
            logger.info("Opened database at %s", settings.db_path)

        background = None
        if settings.embedded_worker:
            background = BackgroundWorker(
                build_worker(settings, app.state.store),
                poll_interval=settings.worker_poll_seconds,
                stale_after=settings.job_stale_after_seconds,
            )
            background.start()
            logger.info("Embedded worker started")

        yield

        if background is not None:
            background.stop()
        if database is not None:
            database.close()
            app.state.store = None

    app = FastAPI(
        title="blogforge",
        version=__version__,
        lifespan=lifespan,
        description="AI-assisted blog generation API",
    )
    app.state.settings = settings
    app.state.store = store

    app.include_router(generate.router, prefix="/api/generate", tags=["generate"])
    app.include_router(blogs.router, prefix="/api/blogs", tags=["blogs"])
    app.include_router(themes.router, prefix="/api/themes", tags=["themes"])
    app.include_router(posts.router, prefix="/api", tags=["posts"])
    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    app.include_router(pages.router, tags=["pages"])

    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(RequestValidationError, _validation_error)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.site_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    return app
