"""
Short Code Generation

Generated codes are drawn from the URL-safe alphabet with ``secrets`` and
lowercased so they survive the case-normalization applied to every lookup.
Collisions are not assumed away: the link store's primary key rejects them
and the shortening service retries a bounded number of times.
"""

import secrets
import string

URL_SAFE_ALPHABET = string.ascii_letters + string.digits + "_-"
DEFAULT_CODE_LENGTH = 7


def generate_short_code(length: int = DEFAULT_CODE_LENGTH) -> str:
    """
    Generate a random short code.

    Args:
        length: Number of characters (default: 7)

    Returns:
        Lowercased random string of exactly ``length`` characters
    """
    if length <= 0:
        raise ValueError("length must be positive")
    return "".join(secrets.choice(URL_SAFE_ALPHABET) for _ in range(length)).lower()
