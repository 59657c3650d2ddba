"""
FastAPI Application Entry Point

This module builds the FastAPI application and configures:
- The link store lifecycle (engine created on startup, disposed on shutdown)
- API routes and the catch-all redirect route
- Middleware (logging, CORS)

Design Decisions:
- create_app() takes a Settings object, so tests can build an isolated app
  against a temporary database
- The store is created here and injected into the services through
  app.state; no module-level engine or connection pool exists
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shortlink.api import endpoints
from shortlink.api.dependencies import get_link_store, get_settings
from shortlink.api.schemas import HealthResponse
from shortlink.core.exceptions import DatabaseError
from shortlink.core.setting import Settings, settings as default_settings
from shortlink.db import (
    LinkStore,
    SQLLinkStore,
    build_engine,
    build_session_maker,
    create_tables,
    get_database_adapter,
)
from shortlink.middleware.logging import add_logging_middleware

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str) -> None:
    """Configure root logging once; later calls only adjust the level."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger().setLevel(level.upper())


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the link store on startup and release its connections on shutdown."""
    settings: Settings = app.state.settings
    adapter = get_database_adapter(settings)
    engine = build_engine(settings, adapter)

    try:
        if settings.AUTO_CREATE_TABLES:
            await create_tables(engine)

        app.state.link_store = SQLLinkStore(
            build_session_maker(engine),
            adapter,
            timeout=settings.STORE_TIMEOUT_SECONDS
        )
        logger.info(f"Link store ready ({adapter.get_dialect_name()})")

        yield
    finally:
        await engine.dispose()
        logger.info("Link store closed")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Settings to use (environment-based defaults when omitted)

    Returns:
        Configured FastAPI instance
    """
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="Link Shortener Service",
        description="Short, shareable codes for long URLs with visit counting",
        version=settings.APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings

    add_logging_middleware(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health endpoint defined before the redirect router to match before the catch-all route
    @app.get("/healthz", response_model=HealthResponse, tags=["Health"])
    async def health_check(
        store: LinkStore = Depends(get_link_store),
        app_settings: Settings = Depends(get_settings)
    ):
        """
        Health check endpoint for monitoring.

        Returns 503 when the database cannot be reached.
        """
        try:
            await store.ping()
        except DatabaseError:
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"ok": False, "version": app_settings.APP_VERSION}
            )
        return HealthResponse(ok=True, version=app_settings.APP_VERSION)

    app.include_router(endpoints.router, tags=["Links"])
    app.include_router(endpoints.redirect_router, tags=["Redirect"])

    return app


app = create_app()
