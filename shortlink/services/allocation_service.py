"""
Link Allocation Service

This service handles the core business logic for creating short links:
- Rejecting empty target URLs
- Validating caller-chosen custom codes
- Generating random codes and retrying on collisions

Design Decisions:
- Optimistic inserts: uniqueness is enforced by the database's unique index,
  so two requests racing for the same code need no application-level lock
- Custom codes are never retried or replaced; a taken code is reported back
- Generated codes are retried a bounded number of times, then the request
  fails with ShortCodeExhaustedError instead of looping
"""

import logging
from typing import Callable, Optional

from shortlink.core.exceptions import (
    EmptyURLError,
    ShortCodeExhaustedError,
    ShortCodeTakenError,
    UniqueViolationError,
)
from shortlink.core.validators import validate_short_code
from shortlink.db.interface import LinkStore
from shortlink.db.models import Link
from shortlink.services.code_generator import DEFAULT_CODE_LENGTH, generate_short_code

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 5


class LinkAllocationService:
    """
    Creates persisted, uniquely-coded links.

    Holds no mutable state, so one instance can serve concurrent requests.
    """

    def __init__(
        self,
        store: LinkStore,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        code_length: int = DEFAULT_CODE_LENGTH,
        generate_code: Callable[[int], str] = generate_short_code
    ):
        """
        Initialize the allocation service.

        Args:
            store: Link store the new links are written to
            max_attempts: Inserts tried with generated codes before giving up
            code_length: Length of generated codes
            generate_code: Code generator, called with code_length
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.store = store
        self.max_attempts = max_attempts
        self.code_length = code_length
        self.generate_code = generate_code

    async def allocate(self, original_url: Optional[str], custom_code: Optional[str] = None) -> Link:
        """
        Create a new link for original_url.

        Args:
            original_url: The long URL to shorten
            custom_code: Code chosen by the caller; None or "" means generate one

        Returns:
            The persisted Link with click_count = 0

        Raises:
            EmptyURLError: If original_url is missing or blank
            InvalidShortCodeError: If custom_code is not 6-8 alphanumerics
            ShortCodeTakenError: If custom_code is already in use
            ShortCodeExhaustedError: If every generated code collided
            DatabaseError: If the store fails for any other reason
        """
        if not original_url or not original_url.strip():
            raise EmptyURLError()

        if custom_code:
            return await self._allocate_custom(original_url, custom_code)
        return await self._allocate_generated(original_url)

    async def _allocate_custom(self, original_url: str, custom_code: str) -> Link:
        validate_short_code(custom_code)
        try:
            link = await self.store.insert(original_url, custom_code)
        except UniqueViolationError:
            logger.info(f"Custom short code '{custom_code}' already taken")
            raise ShortCodeTakenError(custom_code)

        logger.info(f"Created link {link.short_code} (custom) -> {original_url}")
        return link

    async def _allocate_generated(self, original_url: str) -> Link:
        for attempt in range(1, self.max_attempts + 1):
            candidate = self.generate_code(self.code_length)
            try:
                link = await self.store.insert(original_url, candidate)
            except UniqueViolationError:
                logger.warning(
                    f"Short code collision on '{candidate}' "
                    f"(attempt {attempt}/{self.max_attempts})"
                )
                continue

            logger.info(f"Created link {link.short_code} -> {original_url}")
            return link

        logger.error(f"Gave up allocating a short code after {self.max_attempts} collisions")
        raise ShortCodeExhaustedError(self.max_attempts)
