"""
Custom Exceptions

This module defines the exceptions raised by the allocation and resolution
services and by the link store.

Benefits:
- Each failure mode maps to exactly one HTTP status in the API layer
- Store failures carry the original error for logging without leaking it
- Callers can catch the base class to handle every service error at once
"""


class URLShortenerException(Exception):
    """Base exception for the link shortener service."""
    pass


class EmptyURLError(URLShortenerException):
    """Raised when a link is requested without a target URL."""

    def __init__(self, reason: str = "URL is required"):
        self.reason = reason
        super().__init__(reason)


class InvalidShortCodeError(URLShortenerException):
    """Raised when a custom short code fails the format check."""

    def __init__(
        self,
        short_code: str,
        reason: str = "Short code must be 6-8 alphanumeric characters."
    ):
        self.short_code = short_code
        self.reason = reason
        super().__init__(reason)


class ShortCodeTakenError(URLShortenerException):
    """Raised when a custom short code is already used by another link."""

    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__("Short code already exists.")


class ShortCodeNotFoundError(URLShortenerException):
    """Raised when a short code is not found in the database."""

    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__(f"Short code '{short_code}' not found")


class UniqueViolationError(URLShortenerException):
    """
    Raised by the link store when an insert hits the short_code unique index.

    Never surfaced to API consumers: the allocation service turns it into a
    retry or a ShortCodeTakenError.
    """

    def __init__(self, short_code: str, original_error: Exception = None):
        self.short_code = short_code
        self.original_error = original_error
        super().__init__(f"Short code '{short_code}' violates unique constraint")


class DatabaseError(URLShortenerException):
    """Raised when database operations fail."""

    def __init__(self, message: str, original_error: Exception = None):
        self.original_error = original_error
        super().__init__(f"Database error: {message}")


class ShortCodeExhaustedError(DatabaseError):
    """Raised when every generated candidate collided with an existing code."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(
            f"Could not allocate a unique short code after {attempts} attempts"
        )
