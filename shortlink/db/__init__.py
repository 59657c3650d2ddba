"""
Database module with abstraction layer.

This module provides:
- LinkStore interface: persistence contract used by the services
- SQLLinkStore: SQLAlchemy implementation of LinkStore
- DatabaseAdapter implementations: SQLite (default) and PostgreSQL
- Engine/session factories used by the application lifespan

To add a new database backend:
1. Create a new adapter class inheriting from DatabaseAdapter
2. Implement all abstract methods
3. Register it in get_database_adapter() in adapters.py
"""

from shortlink.db.adapters import get_database_adapter
from shortlink.db.interface import DatabaseAdapter, LinkStore
from shortlink.db.link_store import SQLLinkStore
from shortlink.db.session import build_engine, build_session_maker, create_tables

__all__ = [
    "DatabaseAdapter",
    "LinkStore",
    "SQLLinkStore",
    "build_engine",
    "build_session_maker",
    "create_tables",
    "get_database_adapter",
]
