"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from muhasebi import __version__
from muhasebi.api.middleware import (
    ErrorHandlingMiddleware,
    RequestContextMiddleware,
    RequestLoggingMiddleware,
)
from muhasebi.api.routers import health_router, v1_router
from muhasebi.config.settings import Settings, get_settings
from muhasebi.core.logging import setup_logging
from muhasebi.db.config import close_db, init_db

logger = structlog.get_logger("muhasebi.api")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings override (useful for testing)

    Returns:
        Configured FastAPI application

    Example:
        # Production
        app = create_app()

        # Testing
        app = create_app(settings=Settings(ENVIRONMENT="test"))

        # Run with uvicorn
        uvicorn muhasebi.api.app:create_app --factory
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="Muhasebi API",
        description="Risk trends and subscription usage for accounting offices",
        version=__version__,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        lifespan=_lifespan,
    )

    app.state.settings = settings

    _configure_middleware(app, settings)
    _configure_routers(app)

    return app


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Configures logging and verifies the database on startup, releases the
    connection pool on shutdown.
    """
    settings: Settings = app.state.settings
    setup_logging(log_level=settings.log_level)
    logger.info("application_starting", version=__version__, environment=settings.ENVIRONMENT)

    await init_db()
    logger.info("database_ready")

    yield

    logger.info("application_stopping")
    await close_db()


def _configure_middleware(app: FastAPI, settings: Settings) -> None:
    """Configure middleware stack.

    Middleware order (outermost to innermost execution):
    1. RequestLoggingMiddleware - Logs all requests
    2. ErrorHandlingMiddleware - Converts exceptions to HTTP responses
    3. CORSMiddleware - Handles CORS (if configured)
    4. RequestContextMiddleware - Reads X-Tenant-ID, sets the RequestContext

    Note: Middleware is added in reverse order because Starlette
    processes them from last-added to first-added.
    """
    app.add_middleware(RequestContextMiddleware)

    if settings.CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.CORS_ORIGINS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.add_middleware(ErrorHandlingMiddleware, debug=settings.DEBUG)

    app.add_middleware(RequestLoggingMiddleware)


def _configure_routers(app: FastAPI) -> None:
    """Configure API routers."""
    # Health check endpoints (no prefix - at root level)
    app.include_router(health_router)

    app.include_router(v1_router)
