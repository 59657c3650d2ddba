"""
Database Abstraction Interface

This module defines the two abstractions the rest of the codebase talks to:

- DatabaseAdapter: everything dialect-specific (engine options, how a
  unique-constraint violation looks). Lets us switch between SQLite and
  PostgreSQL by changing DATABASE_URL only.
- LinkStore: the persistence contract used by the allocation, resolution
  and query services. Services never build queries themselves.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.pool import Pool

from shortlink.db.models import Link


class DatabaseAdapter(ABC):
    """
    Abstract base class for database adapters.

    To add a new database backend:
    1. Create a new class inheriting from DatabaseAdapter
    2. Implement all abstract methods
    3. Register it in get_database_adapter()
    """

    @abstractmethod
    def create_engine(self, database_url: str, **kwargs) -> AsyncEngine:
        """
        Create and configure the async database engine.

        Args:
            database_url: Connection string for the database
            **kwargs: Additional engine configuration options

        Returns:
            Configured AsyncEngine instance
        """
        pass

    @abstractmethod
    def get_pool_class(self) -> Optional[type[Pool]]:
        """
        Get the connection pool class for this database type.

        Returns:
            Pool class (e.g., NullPool for SQLite) or None to use the default
        """
        pass

    @abstractmethod
    def get_connect_args(self) -> dict[str, Any]:
        """Get DBAPI connection arguments specific to this database type."""
        pass

    @abstractmethod
    def get_engine_kwargs(self) -> dict[str, Any]:
        """Get additional engine configuration specific to this database type."""
        pass

    @abstractmethod
    def is_unique_violation(self, error: IntegrityError) -> bool:
        """
        Tell a unique-constraint violation apart from other integrity errors.

        Args:
            error: The IntegrityError raised by SQLAlchemy

        Returns:
            True if the error was caused by a duplicate key
        """
        pass

    @abstractmethod
    def get_dialect_name(self) -> str:
        """
        Get the SQLAlchemy dialect name for this database.

        Returns:
            Dialect name (e.g., 'sqlite', 'postgresql')
        """
        pass


class LinkStore(ABC):
    """
    Persistence contract for links.

    Implementations must make short_code unique, and increment_clicks must
    be atomic at the storage level so concurrent visits are never lost.
    """

    @abstractmethod
    async def insert(self, original_url: str, short_code: str) -> Link:
        """
        Persist a new link with click_count = 0.

        Raises:
            UniqueViolationError: If short_code is already in use
            DatabaseError: On any other storage failure
        """
        pass

    @abstractmethod
    async def find_by_code(self, short_code: str) -> Optional[Link]:
        """Return the link for short_code, or None."""
        pass

    @abstractmethod
    async def list_all(self) -> List[Link]:
        """Return every link, newest first."""
        pass

    @abstractmethod
    async def delete_by_code(self, short_code: str) -> bool:
        """Hard-delete the link. Returns True if a row was removed."""
        pass

    @abstractmethod
    async def increment_clicks(self, link_id: int) -> None:
        """Atomically add one to click_count and set last_clicked_at to now."""
        pass

    @abstractmethod
    async def ping(self) -> None:
        """Check connectivity. Raises DatabaseError if the store is unreachable."""
        pass
