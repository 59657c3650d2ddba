"""
Shared fixtures for the link shortener tests.

- settings: Settings pointing at a throwaway SQLite file
- store: a real SQLLinkStore on that file (tables created, engine disposed after)
- fake_store: in-memory LinkStore whose failures can be scripted
- client: FastAPI TestClient running the full application lifespan
"""

from typing import Dict, List, Optional

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from shortlink.core.exceptions import DatabaseError, UniqueViolationError
from shortlink.core.setting import Settings
from shortlink.db import (
    LinkStore,
    SQLLinkStore,
    build_engine,
    build_session_maker,
    create_tables,
    get_database_adapter,
)
from shortlink.db.models import Link, utc_now
from shortlink.main import create_app


class FakeLinkStore(LinkStore):
    """
    In-memory LinkStore for fault injection.

    insert_errors is consumed one entry per insert call: an exception is
    raised, None lets the insert proceed normally.
    """

    def __init__(self, insert_errors: Optional[List[Optional[Exception]]] = None):
        self.links: Dict[str, Link] = {}
        self.insert_errors = list(insert_errors or [])
        self.insert_calls: List[str] = []
        self.increments: List[int] = []
        self.find_error: Optional[Exception] = None
        self.increment_error: Optional[Exception] = None
        self._next_id = 1

    async def insert(self, original_url: str, short_code: str) -> Link:
        self.insert_calls.append(short_code)
        if self.insert_errors:
            error = self.insert_errors.pop(0)
            if error is not None:
                raise error
        if short_code in self.links:
            raise UniqueViolationError(short_code)

        link = Link(
            id=self._next_id,
            original_url=original_url,
            short_code=short_code,
            click_count=0,
            created_at=utc_now()
        )
        self._next_id += 1
        self.links[short_code] = link
        return link

    async def find_by_code(self, short_code: str) -> Optional[Link]:
        if self.find_error:
            raise self.find_error
        return self.links.get(short_code)

    async def list_all(self) -> List[Link]:
        return sorted(self.links.values(), key=lambda link: link.id, reverse=True)

    async def delete_by_code(self, short_code: str) -> bool:
        return self.links.pop(short_code, None) is not None

    async def increment_clicks(self, link_id: int) -> None:
        if self.increment_error:
            raise self.increment_error
        self.increments.append(link_id)
        for link in self.links.values():
            if link.id == link_id:
                link.click_count += 1
                link.last_clicked_at = utc_now()

    async def ping(self) -> None:
        if self.find_error:
            raise DatabaseError("unreachable")


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'shortlink_test.db'}",
        AUTO_CREATE_TABLES=True,
        LOG_LEVEL="DEBUG",
    )


@pytest_asyncio.fixture
async def store(settings):
    adapter = get_database_adapter(settings)
    engine = build_engine(settings, adapter)
    await create_tables(engine)
    yield SQLLinkStore(
        build_session_maker(engine),
        adapter,
        timeout=settings.STORE_TIMEOUT_SECONDS
    )
    await engine.dispose()


@pytest.fixture
def fake_store() -> FakeLinkStore:
    return FakeLinkStore()


@pytest.fixture
def make_fake_store():
    """Factory for FakeLinkStore with scripted insert failures."""
    return FakeLinkStore


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client
