"""
FastAPI Application Entry Point

This module initializes the FastAPI application and configures:
- API routes
- Middleware (request logging with correlation ids, security headers, body size limit)
- Exception handlers for the service error taxonomy
- The datastore lifetime (opened at startup, disposed at shutdown)
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from shortlinks import __version__
from shortlinks.api import endpoints
from shortlinks.api.errors import add_exception_handlers
from shortlinks.core.logging_config import setup_logging
from shortlinks.core.setting import Settings, settings as default_settings
from shortlinks.db.session import Database
from shortlinks.middleware.logging import add_logging_middleware
from shortlinks.middleware.security import add_security_middleware

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application for the given settings.

    Args:
        settings: Settings to use (defaults to the environment-loaded settings)
    """
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.LOG_LEVEL, settings.LOG_FILE or None)
        database = Database(settings.DATABASE_URL)
        if settings.CREATE_TABLES_ON_STARTUP:
            await database.create_tables()
        app.state.database = database
        app.state.settings = settings
        logger.info(f"URL Shortener running on {settings.BASE_URL}")
        try:
            yield
        finally:
            await database.dispose()
            logger.info("Database connections released")

    app = FastAPI(
        title="URL Shortener Service",
        description="Short links with expiry and click analytics",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    add_security_middleware(app, settings.MAX_BODY_BYTES)
    add_logging_middleware(app)
    add_exception_handlers(app)

    # Health endpoints defined before router to match before catch-all route
    @app.get("/", tags=["Health"])
    async def root():
        return {
            "message": "URL Shortener Service",
            "version": __version__,
            "docs": "/docs"
        }

    @app.get("/health", tags=["Health"])
    async def health_check():
        return {"status": "healthy"}

    app.include_router(endpoints.router, tags=["URL Shortener"])

    return app


app = create_app()
