"""
Background Task Helpers

Work that must not delay a redirect response runs here: the click counter
update is dispatched after the target URL has been returned.

Two ways of dispatching:
- Inside a request, FastAPI's BackgroundTasks.add_task (runs after the
  response has been sent)
- Anywhere else, TaskDispatcher, which schedules an asyncio task and can
  drain pending work on shutdown
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Set

from shortlink.db.interface import LinkStore

logger = logging.getLogger(__name__)

Dispatch = Callable[..., Any]


async def increment_clicks_background(store: LinkStore, link_id: int) -> None:
    """
    Background task to increment a link's click counter.

    The counter is best-effort: a failed increment is logged and dropped,
    it never turns a successful redirect into an error.

    Args:
        store: Link store holding the link
        link_id: Primary key of the visited link
    """
    try:
        await store.increment_clicks(link_id)
    except Exception as e:
        logger.error(
            f"Failed to increment click count for link {link_id}: {str(e)}",
            exc_info=True
        )


class TaskDispatcher:
    """
    Fire-and-forget scheduler for coroutine functions.

    Keeps a reference to every running task so it is not garbage collected
    before finishing; finished tasks remove themselves.
    """

    def __init__(self):
        self._tasks: Set[asyncio.Task] = set()

    def dispatch(self, func: Callable[..., Awaitable[Any]], *args, **kwargs) -> None:
        """Schedule func(*args, **kwargs) on the running event loop and return immediately."""
        task = asyncio.create_task(func(*args, **kwargs))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait for every task dispatched so far."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
