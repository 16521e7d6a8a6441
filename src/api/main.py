"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures exception handlers, and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from psycopg_pool import ConnectionPool

from src.adapters.repository.memory import InMemoryRegistrationRepository
from src.adapters.repository.postgres import PostgresRegistrationRepository, run_migrations
from src.api.dependencies import get_admin_dispatcher
from src.api.errors import register_exception_handlers
from src.api.v1 import router as v1_router
from src.config.logging_config import configure_logging
from src.config.settings import get_settings

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "v1",
        "description": "Conference Registration API v1 - Attendee intake and administration",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates the repository (database pool + migrations for PostgreSQL)
    - Closes the pool and drains pending admin notifications on shutdown
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    logger.info("Starting application...")

    pool = None
    if settings.storage_backend == "memory":
        logger.warning("Using in-memory storage; registrations are lost on restart")
        app.state.repository = InMemoryRegistrationRepository()
    else:
        logger.info("Connecting to database...")
        pool = ConnectionPool(
            conninfo=settings.database_url,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
        )

        logger.info("Running database migrations...")
        run_migrations(pool)

        app.state.pool = pool
        app.state.repository = PostgresRegistrationRepository(pool)

    logger.info("Application startup complete")

    yield

    logger.info("Shutting down application...")
    get_admin_dispatcher().shutdown(wait=True)
    get_admin_dispatcher.cache_clear()
    if pool is not None:
        pool.close()
        logger.info("Database connection pool closed")


app = FastAPI(
    title="conference-registration",
    description="Conference Registration API - Attendee intake with best-effort email confirmation",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

register_exception_handlers(app)

# Include v1 API routes
app.include_router(v1_router, prefix="/v1")


@app.get("/health")
def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint with database validation.

    Returns 200 OK if application and database are healthy.
    Raises exception if database connection fails.
    """
    pool = getattr(request.app.state, "pool", None)
    if pool is not None:
        with pool.connection() as conn:
            conn.execute("SELECT 1")

    return {"status": "healthy"}
