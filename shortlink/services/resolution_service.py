"""
Link Resolution Service

This service turns a visited short code into its redirect target and
records the visit.

Design Decisions:
- The click increment is dispatched, not awaited: the redirect target is
  returned as soon as the lookup finishes
- The counter is therefore best-effort; a failed increment never fails the
  redirect
- Counting is an atomic UPDATE in the store, never read-modify-write here
"""

import logging
from typing import Optional

from shortlink.core.exceptions import ShortCodeNotFoundError
from shortlink.core.validators import sanitize_short_code
from shortlink.db.interface import LinkStore
from shortlink.services.background_tasks import (
    Dispatch,
    TaskDispatcher,
    increment_clicks_background,
)

logger = logging.getLogger(__name__)


class LinkResolutionService:
    """Service for resolving short codes to their original URLs."""

    def __init__(self, store: LinkStore, dispatch: Optional[Dispatch] = None):
        """
        Initialize the resolution service.

        Args:
            store: Link store to look codes up in
            dispatch: Callable scheduling func(*args) without waiting for it,
                e.g. BackgroundTasks.add_task. Defaults to a TaskDispatcher.
        """
        self.store = store
        self.dispatch = dispatch or TaskDispatcher().dispatch

    async def resolve(self, short_code: str) -> str:
        """
        Resolve a short code and count the visit.

        Args:
            short_code: The code from the visited URL

        Returns:
            The original URL to redirect to

        Raises:
            ShortCodeNotFoundError: If no link has this code (nothing is counted)
            DatabaseError: If the lookup itself fails
        """
        sanitized_code = sanitize_short_code(short_code)
        if not sanitized_code:
            raise ShortCodeNotFoundError(short_code)

        link = await self.store.find_by_code(sanitized_code)
        if link is None:
            raise ShortCodeNotFoundError(sanitized_code)

        self.dispatch(increment_clicks_background, self.store, link.id)
        logger.debug(f"Resolved {link.short_code} -> {link.original_url}")
        return link.original_url
