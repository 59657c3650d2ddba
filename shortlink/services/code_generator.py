"""
Short Code Generator

Produces random candidate codes for the allocation service.

Design Decisions:
- Alphabet [A-Za-z0-9]: URL-safe, case-sensitive, 62 symbols per character
- 6 characters by default: 62^6 (about 5.6e10) possible codes
- secrets instead of random: live codes cannot be predicted from earlier ones,
  so enumerating them is no faster than brute force over the whole keyspace
- No uniqueness check here; the database unique index rejects collisions and
  the allocation service retries
"""

import secrets
import string

SHORT_CODE_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits
DEFAULT_CODE_LENGTH = 6


def generate_short_code(length: int = DEFAULT_CODE_LENGTH) -> str:
    """
    Generate a random short code.

    Args:
        length: Number of characters (default: 6)

    Returns:
        A string of `length` characters drawn uniformly from SHORT_CODE_ALPHABET

    Example:
        generate_short_code() -> "aZ3kQ9"
    """
    return ''.join(secrets.choice(SHORT_CODE_ALPHABET) for _ in range(length))
