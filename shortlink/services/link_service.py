"""
Link Query Service

Read and delete operations behind the management API: listing links,
fetching one link's stats and hard-deleting a link.
"""

import logging
from typing import List

from shortlink.core.exceptions import ShortCodeNotFoundError
from shortlink.core.validators import sanitize_short_code
from shortlink.db.interface import LinkStore
from shortlink.db.models import Link

logger = logging.getLogger(__name__)


class LinkService:
    """Service for inspecting and removing existing links."""

    def __init__(self, store: LinkStore):
        self.store = store

    async def list_links(self) -> List[Link]:
        """Return all links, newest first."""
        return await self.store.list_all()

    async def get_link(self, short_code: str) -> Link:
        """
        Get a single link including its click statistics.

        Raises:
            ShortCodeNotFoundError: If the code does not exist
        """
        sanitized_code = sanitize_short_code(short_code)
        link = await self.store.find_by_code(sanitized_code) if sanitized_code else None
        if link is None:
            raise ShortCodeNotFoundError(short_code)
        return link

    async def delete_link(self, short_code: str) -> None:
        """
        Hard-delete a link. Its code becomes free for reuse.

        Raises:
            ShortCodeNotFoundError: If the code does not exist
        """
        sanitized_code = sanitize_short_code(short_code)
        deleted = await self.store.delete_by_code(sanitized_code) if sanitized_code else False
        if not deleted:
            raise ShortCodeNotFoundError(short_code)
        logger.info(f"Deleted link {sanitized_code}")
