"""
Database Engine and Session Factory

This module builds the async SQLAlchemy engine and session factory for a
given Settings object. Nothing is created at import time: the application
lifespan owns the engine, disposes it on shutdown, and hands the resulting
link store to the services.

Key Features:
- Database abstraction: the adapter picked from DATABASE_URL configures the engine
- Async session management: expire_on_commit=False so returned links stay usable
- Schema bootstrap for development and tests (Alembic in production)
"""

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession

from shortlink.core.setting import Settings
from shortlink.db import models  # noqa: F401  (registers tables on SQLModel.metadata)
from shortlink.db.adapters import get_database_adapter
from shortlink.db.interface import DatabaseAdapter


def build_engine(settings: Settings, adapter: DatabaseAdapter = None) -> AsyncEngine:
    """
    Create the async engine for settings.DATABASE_URL.

    Args:
        settings: Application settings
        adapter: Database adapter to use (picked from the URL when omitted)

    Returns:
        Configured AsyncEngine
    """
    adapter = adapter or get_database_adapter(settings)
    return adapter.create_engine(settings.DATABASE_URL)


def build_session_maker(engine: AsyncEngine) -> async_sessionmaker:
    """Create the session factory bound to engine."""
    return async_sessionmaker(
        engine,
        class_=SQLModelAsyncSession,
        expire_on_commit=False,  # Returned links are read after the session closes
        autoflush=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """Create any missing tables. Existing tables are left untouched."""
    async with engine.begin() as connection:
        await connection.run_sync(SQLModel.metadata.create_all)
