"""
SQL Link Store

SQLAlchemy implementation of the LinkStore contract. Each operation opens
its own session from the injected factory, so the store can be shared by
concurrent requests and by background tasks that outlive a request.

Error translation:
- Duplicate short_code on insert -> UniqueViolationError
- Any other SQLAlchemy failure -> DatabaseError
- A round-trip slower than the configured timeout -> DatabaseError
"""

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, TypeVar

from sqlalchemy import delete, select, text, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from shortlink.core.exceptions import DatabaseError, UniqueViolationError
from shortlink.db.interface import DatabaseAdapter, LinkStore
from shortlink.db.models import Link, utc_now

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SQLLinkStore(LinkStore):
    """Link store backed by a relational database."""

    def __init__(
        self,
        session_maker: async_sessionmaker,
        adapter: DatabaseAdapter,
        timeout: float = 5.0
    ):
        """
        Args:
            session_maker: Factory producing async sessions
            adapter: Dialect adapter (used to recognise unique violations)
            timeout: Seconds allowed for a single store operation
        """
        self.session_maker = session_maker
        self.adapter = adapter
        self.timeout = timeout

    async def _run(
        self,
        operation: str,
        work: Callable[[AsyncSession], Awaitable[T]]
    ) -> T:
        async def in_session() -> T:
            async with self.session_maker() as session:
                return await work(session)

        try:
            return await asyncio.wait_for(in_session(), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"Link store {operation} timed out after {self.timeout}s")
            raise DatabaseError(f"{operation} timed out", original_error=e)
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Link store {operation} failed: {e}", exc_info=True)
            raise DatabaseError(f"{operation} failed", original_error=e)

    async def insert(self, original_url: str, short_code: str) -> Link:
        async def work(session: AsyncSession) -> Link:
            link = Link(original_url=original_url, short_code=short_code, click_count=0)
            session.add(link)
            try:
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                if self.adapter.is_unique_violation(e):
                    raise UniqueViolationError(short_code, original_error=e)
                raise DatabaseError(
                    "Failed to create link: database constraint violation",
                    original_error=e
                )
            await session.refresh(link)
            return link

        return await self._run("insert", work)

    async def find_by_code(self, short_code: str) -> Optional[Link]:
        async def work(session: AsyncSession) -> Optional[Link]:
            statement = select(Link).where(Link.short_code == short_code)
            result = await session.execute(statement)
            return result.scalar_one_or_none()

        return await self._run("find_by_code", work)

    async def list_all(self) -> List[Link]:
        async def work(session: AsyncSession) -> List[Link]:
            statement = select(Link).order_by(Link.created_at.desc(), Link.id.desc())
            result = await session.execute(statement)
            return list(result.scalars().all())

        return await self._run("list_all", work)

    async def delete_by_code(self, short_code: str) -> bool:
        async def work(session: AsyncSession) -> bool:
            statement = delete(Link).where(Link.short_code == short_code)
            result = await session.execute(statement)
            await session.commit()
            return result.rowcount > 0

        return await self._run("delete_by_code", work)

    async def increment_clicks(self, link_id: int) -> None:
        """
        Increment click_count with a single UPDATE.

        The addition happens inside the database, so concurrent visits
        cannot overwrite each other's increments. A missing row is a no-op.
        """
        async def work(session: AsyncSession) -> None:
            statement = (
                update(Link)
                .where(Link.id == link_id)
                .values(
                    click_count=Link.click_count + 1,
                    last_clicked_at=utc_now()
                )
            )
            await session.execute(statement)
            await session.commit()

        await self._run("increment_clicks", work)

    async def ping(self) -> None:
        async def work(session: AsyncSession) -> None:
            await session.execute(text("SELECT 1"))

        await self._run("ping", work)
