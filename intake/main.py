"""Intake API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery, ExMA anti-pattern)
    - Global error handlers map IntakeError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Registry and upload validator created once per app and kept on app.state

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Process stats reporter runs as a lifespan task, cancelled on shutdown
    - create_app() factory plus a module-level app: uvicorn imports `intake.main:app`,
      tests may build isolated apps
"""

import asyncio
import logging
from contextlib import asynccontextmanager, suppress

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from intake import __version__
from intake.api.error_handlers import register_error_handlers
from intake.api.routes import health, submissions, uploads
from intake.config import Settings, get_settings
from intake.core.submission_registry import SubmissionRegistry
from intake.core.upload_tracker import PlaceholderNameGenerator
from intake.infrastructure.observability import setup_logging
from intake.infrastructure.ops_reporter import start_ops_reporter
from intake.infrastructure.request_logging import RequestLoggingMiddleware
from intake.services.upload_validator import UploadStreamValidator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = app.state.settings
    setup_logging(settings.log_level, settings.log_format)
    ops_task = start_ops_reporter(
        settings.ops_interval_seconds, lambda: len(app.state.registry),
    )
    logger.info("Intake API started")
    yield
    if ops_task is not None:
        ops_task.cancel()
        with suppress(asyncio.CancelledError):
            await ops_task
    logger.info(
        f"Intake API shutting down ({len(app.state.registry)} submissions dropped)",
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title="Intake API", version=__version__, lifespan=lifespan)

    app.state.settings = settings
    app.state.registry = SubmissionRegistry()
    app.state.upload_validator = UploadStreamValidator(
        app.state.registry,
        names=PlaceholderNameGenerator(),
        field_name=settings.upload_field_name,
    )

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routes: explicit registration (ExMA: no convention-over-config)
    app.include_router(health.router)
    app.include_router(submissions.router)
    app.include_router(uploads.router)

    register_error_handlers(app)
    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    logger.info(f"HTTP Server listening on http://{settings.http_host}:{settings.http_port}")
    uvicorn.run(
        app, host=settings.http_host, port=settings.http_port, log_config=None,
    )
