# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI Application Factory.

This module provides the main application factory for the AdaptarIA API.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy.exc import SQLAlchemyError

from src import __version__
from src.api.middleware.auth import AuthMiddleware
from src.api.middleware.rate_limit import limiter, rate_limit_exceeded_handler
from src.api.routes import health
from src.api.v1 import router as v1_router
from src.core.config import get_settings
from src.infrastructure.background import start_scheduler, stop_scheduler
from src.infrastructure.database.connection import (
    DatabaseError,
    close_database,
    get_session,
    init_database,
)
from src.infrastructure.database.seeds import seed_admin
from src.infrastructure.notifications import close_mailer, init_mailer
from src.utils.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Initializes and cleans up:
    - Logging
    - Database connections (and the first admin)
    - Mailer
    - APScheduler for the content publication job

    Args:
        app: The FastAPI application instance.

    Yields:
        None during application runtime.
    """
    settings = get_settings()
    setup_logging(settings)
    logger.info(
        "Starting AdaptarIA API (environment=%s, debug=%s)",
        settings.environment,
        settings.debug,
    )

    # =========================================================================
    # Startup
    # =========================================================================

    await init_database(settings)
    logger.info("Database connection initialized")

    try:
        async with get_session() as session:
            await seed_admin(session, settings.admin)
    except (DatabaseError, SQLAlchemyError) as e:
        logger.warning("Failed to seed initial admin: %s", str(e))

    init_mailer(settings)

    if settings.scheduler.enabled:
        await start_scheduler(settings)
        logger.info("Scheduler started")

    yield

    # =========================================================================
    # Shutdown
    # =========================================================================

    # Stop scheduler first (its jobs use the database)
    if settings.scheduler.enabled:
        await stop_scheduler()
        logger.info("Scheduler stopped")

    close_mailer()

    await close_database()
    logger.info("Database connection closed")

    logger.info("Shutting down AdaptarIA API")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="AdaptarIA API",
        description="Multi-institute school management backend",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
        # Disable automatic redirects from /path to /path/
        # This prevents 307 redirects that lose Authorization headers
        redirect_slashes=False,
    )

    # =========================================================================
    # State
    # =========================================================================
    app.state.limiter = limiter

    # =========================================================================
    # Exception handlers
    # =========================================================================
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    # =========================================================================
    # Middleware (order matters - last added is first executed)
    # =========================================================================

    # Rate limiting runs after auth so authenticated clients are keyed by user
    app.add_middleware(SlowAPIMiddleware)

    # Auth middleware - validates JWT tokens
    app.add_middleware(AuthMiddleware)

    # CORS middleware (should be last to execute first)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.origins_list,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allow_methods,
        allow_headers=settings.cors.allow_headers,
    )

    # =========================================================================
    # Routes
    # =========================================================================
    app.include_router(health.router, tags=["Health"])
    app.include_router(v1_router)

    return app
