"""FastAPI application factory and server entry point."""

import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from soundbridge import __version__
from soundbridge.api.exception_handlers import register_exception_handlers
from soundbridge.api.routers import api_router
from soundbridge.config import Settings, get_settings
from soundbridge.infrastructure.lifecycle import lifespan
from soundbridge.infrastructure.observability import RequestLoggingMiddleware

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        settings: Explicit settings (tests); defaults to environment settings at startup

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="SoundBridge",
        version=__version__,
        lifespan=lifespan,
    )
    if settings is not None:
        app.state.settings = settings

    cors_origins = (settings or get_settings()).cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    # Added last so it runs first and every response (CORS preflight too) gets a correlation ID
    app.add_middleware(RequestLoggingMiddleware)

    register_exception_handlers(app)
    app.include_router(api_router)

    return app


def run() -> None:
    """Run the server with uvicorn (console script entry point)."""
    settings = get_settings()
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    run()
