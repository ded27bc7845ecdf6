"""
Input Validators and Normalizers

Pure functions used before any storage access. None of them raise:
malformed input yields ``False`` or an empty string.
"""

import re
from typing import Any
from urllib.parse import urlsplit

SHORT_CODE_PATTERN = re.compile(r"^[A-Za-z0-9_-]{4,32}$")
ALLOWED_SCHEMES = {"http", "https"}


def is_valid_url(url: Any) -> bool:
    """
    Check that ``url`` is an absolute http/https URL.

    Args:
        url: The value to validate

    Returns:
        True if the value parses with an http/https scheme and a host, False otherwise
    """
    if not url or not isinstance(url, str):
        return False

    # Leading/trailing whitespace or embedded spaces are not part of a valid URI
    if url != url.strip() or any(ch.isspace() for ch in url):
        return False

    try:
        result = urlsplit(url)
        # Accessing port validates it (raises ValueError when out of range)
        result.port
    except ValueError:
        return False

    if result.scheme.lower() not in ALLOWED_SCHEMES:
        return False

    return bool(result.hostname)


def normalize_code(short_code: Any) -> str:
    """Trim and lowercase a short code; ``None`` becomes an empty string."""
    if short_code is None:
        return ""
    return str(short_code).strip().lower()


def is_valid_code_syntax(short_code: Any) -> bool:
    """Return True if ``short_code`` is 4-32 characters of ``[A-Za-z0-9_-]``."""
    if not isinstance(short_code, str):
        return False
    return SHORT_CODE_PATTERN.fullmatch(short_code) is not None


# Paths served by the application itself; a short code with one of these
# names would never reach the redirect route.
RESERVED_CODES = frozenset({"docs", "redoc", "health", "openapi.json", "shorturls"})


def is_reserved_code(short_code: Any) -> bool:
    """Return True if ``short_code`` collides with one of the application's own routes."""
    return normalize_code(short_code) in RESERVED_CODES
