"""
Database Adapters

This module implements the DatabaseAdapter interface for SQLite and
PostgreSQL. All dialect-specific configuration lives here.

SQLite is the default and suits local development, tests and single-instance
deployments. PostgreSQL (asyncpg driver) is used in production; hosted
instances usually need DATABASE_SSL enabled.
"""

from typing import Any, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool, Pool

from shortlink.core.setting import Settings
from shortlink.db.interface import DatabaseAdapter

POSTGRES_UNIQUE_VIOLATION = "23505"


class SQLiteAdapter(DatabaseAdapter):
    """
    SQLite database adapter implementation.

    SQLite allows a single writer at a time; concurrent writers wait on the
    file lock for up to busy_timeout seconds instead of failing immediately.
    """

    def __init__(self, busy_timeout: float = 5.0):
        self.busy_timeout = busy_timeout

    def create_engine(self, database_url: str, **kwargs) -> AsyncEngine:
        """
        Create SQLite async engine with appropriate configuration.

        Args:
            database_url: SQLite connection string (sqlite+aiosqlite:///...)
            **kwargs: Additional engine options (merged with SQLite defaults)

        Returns:
            Configured AsyncEngine for SQLite
        """
        engine_kwargs = self.get_engine_kwargs()
        engine_kwargs.update(kwargs)

        return create_async_engine(
            database_url,
            poolclass=self.get_pool_class(),
            connect_args=self.get_connect_args(),
            **engine_kwargs
        )

    def get_pool_class(self) -> type[NullPool]:
        """
        SQLite uses NullPool: a file-based database gains nothing from
        keeping connections open between operations.
        """
        return NullPool

    def get_connect_args(self) -> dict[str, Any]:
        return {
            "check_same_thread": False,
            "timeout": self.busy_timeout,
        }

    def get_engine_kwargs(self) -> dict[str, Any]:
        return {
            "echo": False  # Set to True only for SQL debugging in development
        }

    def is_unique_violation(self, error: IntegrityError) -> bool:
        return "UNIQUE constraint failed" in str(error.orig)

    def get_dialect_name(self) -> str:
        return "sqlite"


class PostgreSQLAdapter(DatabaseAdapter):
    """
    PostgreSQL database adapter implementation (asyncpg driver).

    Uses SQLAlchemy's default async queue pool with pre-ping so connections
    dropped by the server are replaced transparently.
    """

    def __init__(
        self,
        pool_size: int = 10,
        max_overflow: int = 20,
        command_timeout: float = 5.0,
        ssl: bool = False
    ):
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.command_timeout = command_timeout
        self.ssl = ssl

    def create_engine(self, database_url: str, **kwargs) -> AsyncEngine:
        engine_kwargs = self.get_engine_kwargs()
        engine_kwargs.update(kwargs)

        return create_async_engine(
            database_url,
            connect_args=self.get_connect_args(),
            **engine_kwargs
        )

    def get_pool_class(self) -> Optional[type[Pool]]:
        return None

    def get_connect_args(self) -> dict[str, Any]:
        connect_args: dict[str, Any] = {"command_timeout": self.command_timeout}
        if self.ssl:
            # Encrypt without verifying the certificate chain (hosted providers)
            connect_args["ssl"] = "require"
        return connect_args

    def get_engine_kwargs(self) -> dict[str, Any]:
        return {
            "echo": False,
            "pool_size": self.pool_size,
            "max_overflow": self.max_overflow,
            "pool_pre_ping": True,
        }

    def is_unique_violation(self, error: IntegrityError) -> bool:
        orig = error.orig
        code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
        if code is None and orig is not None and orig.__cause__ is not None:
            code = getattr(orig.__cause__, "sqlstate", None)
        if code is not None:
            return code == POSTGRES_UNIQUE_VIOLATION
        return "duplicate key value violates unique constraint" in str(orig)

    def get_dialect_name(self) -> str:
        return "postgresql"


def get_database_adapter(settings: Settings) -> DatabaseAdapter:
    """
    Factory function to get the database adapter for DATABASE_URL.

    Args:
        settings: Application settings

    Returns:
        DatabaseAdapter instance

    Raises:
        ValueError: If the URL scheme is not supported
    """
    database_url = settings.DATABASE_URL
    if database_url.startswith("sqlite"):
        return SQLiteAdapter(busy_timeout=settings.STORE_TIMEOUT_SECONDS)
    if database_url.startswith("postgresql"):
        return PostgreSQLAdapter(
            pool_size=settings.DATABASE_POOL_SIZE,
            max_overflow=settings.DATABASE_MAX_OVERFLOW,
            command_timeout=settings.STORE_TIMEOUT_SECONDS,
            ssl=settings.DATABASE_SSL,
        )
    raise ValueError(f"Unsupported database URL scheme: {database_url.split(':', 1)[0]}")
