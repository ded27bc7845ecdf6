"""
Custom Exceptions

This module defines the error taxonomy of the shortener.

Every exception carries a machine-readable ``kind`` which the HTTP layer
returns to clients next to the request's correlation id.
"""

from typing import Optional


class URLShortenerException(Exception):
    """Base exception for URL shortener service."""
    kind = "error"


class InvalidURLError(URLShortenerException):
    """Raised when URL validation fails."""
    kind = "invalid_url"

    def __init__(self, url: Optional[str], reason: str = "Invalid or missing URL"):
        self.url = url
        self.reason = reason
        super().__init__(f"{reason}: {url}" if url else reason)


class InvalidShortCodeError(URLShortenerException):
    """Raised when a requested short code does not match the allowed syntax."""
    kind = "invalid_shortcode"

    def __init__(self, short_code: str, reason: Optional[str] = None):
        self.short_code = short_code
        super().__init__(
            reason or f"Short code '{short_code}' must be 4-32 characters of letters, digits, '-' or '_'"
        )


class DuplicateShortCodeError(URLShortenerException):
    """Raised when a short code is already taken."""
    kind = "duplicate_shortcode"

    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__(f"Short code '{short_code}' already exists")


class ShortCodeNotFoundError(URLShortenerException):
    """Raised when a short code is not found in the database."""
    kind = "not_found"

    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__(f"Short code '{short_code}' not found")


class ShortCodeExpiredError(URLShortenerException):
    """Raised when a short code exists but its validity window has passed."""
    kind = "expired"

    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__(f"Short code '{short_code}' has expired")


class StorageError(URLShortenerException):
    """Raised when database operations fail."""
    kind = "storage_error"

    def __init__(self, message: str, original_error: Exception = None):
        self.original_error = original_error
        super().__init__(f"Storage error: {message}")


class VisitRecordingError(StorageError):
    """
    Raised when a redirect target was resolved but the visit could not be recorded.

    Carries ``long_url`` so the caller can still serve the redirect.
    """

    def __init__(self, short_code: str, long_url: str, original_error: Exception = None):
        self.short_code = short_code
        self.long_url = long_url
        super().__init__(
            f"failed to record visit for '{short_code}'",
            original_error=original_error
        )
