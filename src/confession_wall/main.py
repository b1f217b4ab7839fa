"""Main entry point for the Confession Wall application."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from sqlalchemy import Engine

from confession_wall.api import admin_router, confessions_router, system_router
from confession_wall.api.errors import register_exception_handlers
from confession_wall.core.settings import Settings, settings
from confession_wall.db.session import build_engine, build_session_factory, create_tables
from confession_wall.services.mirror import MirrorDispatcher, MirrorSink, build_mirror
from confession_wall.services.policy import ContentPolicy

logger = logging.getLogger(__name__)


def create_app(
    app_settings: Settings | None = None,
    *,
    engine: Engine | None = None,
    mirror: MirrorSink | None = None,
) -> FastAPI:
    """Build the FastAPI app and the handles it owns.

    Args:
        app_settings: Configuration; defaults to the environment-loaded settings.
        engine: Existing engine to use instead of one built from the database URL.
            A supplied engine is left open on shutdown.
        mirror: Mirror sink to use instead of the one derived from settings.
    """
    app_settings = app_settings or settings
    logging.basicConfig(level=app_settings.log_level.upper())

    owns_engine = engine is None
    db_engine = engine or build_engine(app_settings.database_url, echo=app_settings.sql_debug)
    dispatcher = MirrorDispatcher(
        mirror if mirror is not None else build_mirror(app_settings),
        timeout_seconds=app_settings.mirror_timeout_seconds,
    )

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        if app_settings.auto_create_tables:
            create_tables(db_engine)
        logger.info("%s %s started", app_settings.app_name, app_settings.app_version)
        try:
            yield
        finally:
            await dispatcher.aclose()
            if owns_engine:
                db_engine.dispose()

    app = FastAPI(
        title="Confession Wall API",
        description="Anonymous confessions with a moderated public feed",
        version=app_settings.app_version,
        debug=app_settings.debug,
        lifespan=lifespan,
    )

    app.state.settings = app_settings
    app.state.engine = db_engine
    app.state.session_factory = build_session_factory(db_engine)
    app.state.mirror = dispatcher
    app.state.content_policy = ContentPolicy.from_settings(app_settings)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=app_settings.cors_allow_credentials,
        allow_methods=app_settings.cors_allow_methods,
        allow_headers=app_settings.cors_allow_headers,
    )

    # Add GZip middleware for compression
    app.add_middleware(GZipMiddleware)

    register_exception_handlers(app)

    # Include API routers
    app.include_router(confessions_router, prefix="/api")
    app.include_router(admin_router, prefix="/api")
    app.include_router(system_router, prefix="/api")

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint to verify the service is running."""
        return {"status": "ok"}

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint with basic information about the API."""
        return {
            "name": app_settings.app_name,
            "version": app_settings.app_version,
            "docs": "/docs",
        }

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("confession_wall.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
