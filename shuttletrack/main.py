"""
Application entry point.

Creates the FastAPI application and wires together:
- The fleet router
- Error handlers (centralized error-to-JSON:API mapping)
- HTTP middleware (request logging, method override)
- Logging configuration
- The bus repository and its storage backend

No business logic belongs here.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from shuttletrack.core.config import Settings, settings as default_settings
from shuttletrack.domain.fleet.repository import BusRepository
from shuttletrack.interfaces.fleet.dependencies import build_repository
from shuttletrack.interfaces.fleet.router import router as fleet_router
from shuttletrack.shared.errors.handlers import register_error_handlers
from shuttletrack.shared.logging import configure_logging
from shuttletrack.shared.middleware import (
    MethodOverrideMiddleware,
    RequestLoggingMiddleware,
)

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    repository: Optional[BusRepository] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Registers routers, error handlers, and middleware.
    This is the composition root of the application.

    Args:
        settings: Configuration to use. Defaults to the environment settings.
        repository: Pre-built repository. Built from ``settings`` when omitted.

    Returns:
        A fully configured FastAPI application instance.
    """
    settings = settings or default_settings
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Application lifespan: close the repository on shutdown."""
        yield
        logger.info("Shutting down, closing bus repository.")
        app.state.repository.close()

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )
    app.state.repository = repository or build_repository(settings)

    # --- Middleware (last added runs first) ---
    app.add_middleware(MethodOverrideMiddleware)
    app.add_middleware(RequestLoggingMiddleware)

    # --- Error Handlers ---
    register_error_handlers(app)

    # --- Routers ---
    app.include_router(fleet_router)

    return app
