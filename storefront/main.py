"""Storefront Orders API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map StorefrontError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Storage handle built on startup, stored on app.state, disposed on shutdown

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.api.error_handlers import register_error_handlers
from storefront.api.routes import health, orders, products
from storefront.config import get_settings
from storefront.infrastructure.database import DatabaseSessionManager
from storefront.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    app.state.storage = DatabaseSessionManager(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        connect_timeout=settings.database_connect_timeout_seconds,
        command_timeout=settings.database_command_timeout_seconds,
    )
    logger.info("Storefront API started")
    yield
    await app.state.storage.dispose()
    logger.info("Storefront API shutting down")


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title="Storefront Orders API", version="1.0.0", lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(products.router)
    app.include_router(orders.router)

    register_error_handlers(app)
    return app


app = create_app()
