"""Application lifecycle management for startup and shutdown tasks.

This module handles the FastAPI lifespan context manager that builds the
long-lived objects routes depend on and tears them down again.

Startup:
- Logging configuration
- Database engine (for /db-test)
- Spotify HTTP client + auth service
- Session code store + auth flow service
- SessionCleanupWorker task (sweeps expired codes)

Shutdown runs in reverse and ALWAYS runs, even if startup failed halfway.
"""

import asyncio
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI

from soundbridge.application.services.auth_flow_service import AuthFlowService
from soundbridge.application.services.session_store import InMemorySessionCodeStore
from soundbridge.application.services.spotify_auth_service import (
    SpotifyAuthService,
)
from soundbridge.application.workers.session_cleanup_worker import (
    create_session_cleanup_worker,
)
from soundbridge.config import Settings, get_settings
from soundbridge.infrastructure.integrations.spotify_client import SpotifyClient
from soundbridge.infrastructure.observability import configure_logging
from soundbridge.infrastructure.persistence import Database

logger = logging.getLogger(__name__)


# Listen future me, everything before `yield` runs at STARTUP, everything after at SHUTDOWN.
# Objects go on app.state so dependencies.py can hand them to routes. Settings come from
# app.state.settings when create_app() got explicit ones (tests), else from the environment.
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings: Settings = getattr(app.state, "settings", None) or get_settings()
    app.state.settings = settings

    configure_logging(
        log_level=settings.log_level,
        json_format=settings.log_json_format,
        app_name=settings.app_name,
    )
    logger.info("Starting application: %s", settings.app_name)

    if not settings.spotify.is_configured:
        logger.warning(
            "Spotify client credentials are not configured - "
            "/auth/spotify will fail until SPOTIFY_CLIENT_ID and "
            "SPOTIFY_CLIENT_SECRET are set"
        )

    db: Database | None = None
    spotify_client: SpotifyClient | None = None
    cleanup_worker = None
    cleanup_task: asyncio.Task[None] | None = None
    try:
        db = Database(settings.database)
        app.state.db = db
        logger.info("Database engine initialized")

        spotify_client = SpotifyClient(settings.spotify)

        session_store = InMemorySessionCodeStore(
            ttl_seconds=settings.session.code_ttl_seconds
        )
        app.state.session_store = session_store
        logger.info(
            "Session code store initialized (ttl=%ss)",
            settings.session.code_ttl_seconds,
        )

        app.state.auth_flow = AuthFlowService(
            auth_service=SpotifyAuthService(spotify_client),
            session_store=session_store,
            default_app_redirect=settings.session.default_app_redirect,
        )

        # Hey future me - the sweep runs for the whole process lifetime, independent of
        # traffic. It's a plain asyncio task, no orchestrator needed for one worker.
        cleanup_worker = create_session_cleanup_worker(
            session_store=session_store,
            sweep_interval=settings.session.sweep_interval_seconds,
        )
        cleanup_task = asyncio.create_task(
            cleanup_worker.start(), name="session-cleanup"
        )

        logger.info("Server listening on port %s", settings.port)
        yield
    finally:
        logger.info("Shutting down application")

        if cleanup_worker is not None:
            cleanup_worker.stop()
        if cleanup_task is not None:
            cleanup_task.cancel()
            with suppress(asyncio.CancelledError):
                await cleanup_task

        if spotify_client is not None:
            await spotify_client.close()

        if db is not None:
            await db.close()
            logger.info("Database engine disposed")
