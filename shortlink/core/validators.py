"""
Input Validators and Sanitizers

This module provides validation and sanitization functions for short codes.

- validate_short_code: strict format check for caller-chosen custom codes
- sanitize_short_code: loose guard for codes arriving in URL paths, so that
  malformed input never reaches a database query
"""

import re
from typing import Optional

from shortlink.core.exceptions import InvalidShortCodeError

# Custom codes: 6 to 8 characters, base62 only
SHORT_CODE_PATTERN = re.compile(r'^[A-Za-z0-9]{6,8}$')

SANITIZE_PATTERN = re.compile(r'^[0-9a-zA-Z]+$')
MAX_PATH_CODE_LENGTH = 20


def is_valid_short_code(short_code: str) -> bool:
    """
    Check whether a custom short code has an acceptable format.

    Only syntax is checked here; whether the code is already taken is
    decided by the database's unique index at insert time.
    """
    if not isinstance(short_code, str):
        return False
    # fullmatch so a trailing newline is not accepted by '$'
    return SHORT_CODE_PATTERN.fullmatch(short_code) is not None


def validate_short_code(short_code: str) -> None:
    """
    Validate a caller-supplied custom short code.

    Args:
        short_code: The custom code to check

    Raises:
        InvalidShortCodeError: If the code is not 6-8 characters of [A-Za-z0-9]
    """
    if not is_valid_short_code(short_code):
        raise InvalidShortCodeError(short_code)


def sanitize_short_code(short_code: str) -> Optional[str]:
    """
    Sanitize a short code taken from a request path.

    Args:
        short_code: The short code to sanitize

    Returns:
        Sanitized short code if it looks like a code, None otherwise

    Security:
    - Only allows alphanumeric characters
    - Prevents path traversal attacks
    """
    if not short_code or not isinstance(short_code, str):
        return None

    short_code = short_code.strip()

    if len(short_code) > MAX_PATH_CODE_LENGTH:
        return None

    if not SANITIZE_PATTERN.fullmatch(short_code):
        return None

    return short_code
