"""
URL Shortening Service

This service handles the core business logic for creating short links:
- Validating the target URL and any requested short code
- Resolving the validity window and computing the expiry time
- Generating a random code when the caller does not supply one
- Building the public short link from the configured base URL

Design Decisions:
- All validation happens before storage is touched (no partial writes)
- Requested codes are never retried: a collision is reported to the caller
- Generated codes are retried a bounded number of times on collision
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Optional

from shortlinks.core.clock import Clock, utc_now
from shortlinks.core.codegen import DEFAULT_CODE_LENGTH, generate_short_code
from shortlinks.core.exceptions import (
    DuplicateShortCodeError,
    InvalidShortCodeError,
    InvalidURLError,
)
from shortlinks.core.validators import (
    is_reserved_code,
    is_valid_code_syntax,
    is_valid_url,
    normalize_code,
)
from shortlinks.services.link_store import LinkStore

logger = logging.getLogger(__name__)

# Ten years
MAX_VALIDITY_MINUTES = 10 * 365 * 24 * 60


@dataclass(frozen=True)
class CreatedLink:
    """Result of a successful shortening."""
    code: str
    short_link: str
    expiry_at: datetime


def resolve_validity(validity_minutes: Any, default_minutes: int) -> int:
    """
    Return ``validity_minutes`` if it is a positive whole number, else the default.

    Whole-valued floats (``5.0``) count as integers, booleans do not.
    Values above MAX_VALIDITY_MINUTES are capped so the expiry stays a
    representable datetime.
    """
    if isinstance(validity_minutes, bool):
        return default_minutes
    if isinstance(validity_minutes, float):
        if not validity_minutes.is_integer():
            return default_minutes
        validity_minutes = int(validity_minutes)
    if not isinstance(validity_minutes, int) or validity_minutes <= 0:
        return default_minutes
    return min(validity_minutes, MAX_VALIDITY_MINUTES)


def build_short_link(base_url: str, code: str) -> str:
    return f"{base_url.rstrip('/')}/{code}"


class URLShorteningService:
    """
    Creates new short code mappings.
    """

    def __init__(
        self,
        link_store: LinkStore,
        base_url: str,
        default_validity_minutes: int = 30,
        code_length: int = DEFAULT_CODE_LENGTH,
        max_attempts: int = 3,
        code_generator: Callable[[int], str] = generate_short_code,
        now: Clock = utc_now,
    ):
        """
        Args:
            link_store: Store the new mappings are written to
            base_url: Public prefix of short links (e.g. "https://sho.rt")
            default_validity_minutes: Validity used when the caller supplies none
            code_length: Length of generated codes
            max_attempts: Insert attempts for generated codes before giving up
            code_generator: Callable producing a random code of the given length
            now: Clock returning timezone-aware UTC datetimes
        """
        self.link_store = link_store
        self.base_url = base_url
        self.default_validity_minutes = default_validity_minutes
        self.code_length = code_length
        self.max_attempts = max_attempts
        self.code_generator = code_generator
        self.now = now

    async def create_short_link(
        self,
        long_url: Any,
        validity_minutes: Any = None,
        requested_code: Optional[str] = None
    ) -> CreatedLink:
        """
        Create a short link for ``long_url``.

        Args:
            long_url: Absolute http/https URL to shorten
            validity_minutes: Optional positive number of minutes the link stays valid
            requested_code: Optional custom short code

        Returns:
            CreatedLink with the code, the public short link and the expiry time

        Raises:
            InvalidURLError: If the URL is missing or not absolute http/https
            InvalidShortCodeError: If the requested code has invalid syntax or is reserved
            DuplicateShortCodeError: If the code is already taken
            StorageError: If the database operation fails
        """
        if not is_valid_url(long_url):
            raise InvalidURLError(
                long_url if isinstance(long_url, str) else None,
                reason="Invalid or missing URL. URL must be an absolute http:// or https:// address"
            )

        minutes = resolve_validity(validity_minutes, self.default_validity_minutes)
        expiry_at = self.now() + timedelta(minutes=minutes)

        code = normalize_code(requested_code)
        if code:
            if not is_valid_code_syntax(code):
                raise InvalidShortCodeError(code)
            if is_reserved_code(code):
                raise InvalidShortCodeError(code, reason=f"Short code '{code}' is reserved")
            await self.link_store.insert(code, long_url, expiry_at)
        else:
            code = await self._insert_generated(long_url, expiry_at)

        logger.info(f"Created short link {code} (valid {minutes} min)")
        return CreatedLink(
            code=code,
            short_link=build_short_link(self.base_url, code),
            expiry_at=expiry_at
        )

    async def _insert_generated(self, long_url: str, expiry_at: datetime) -> str:
        for attempt in range(1, self.max_attempts + 1):
            code = self.code_generator(self.code_length)
            try:
                await self.link_store.insert(code, long_url, expiry_at)
                return code
            except DuplicateShortCodeError:
                if attempt == self.max_attempts:
                    raise
                logger.warning(
                    f"Generated short code collided (attempt {attempt}/{self.max_attempts}), retrying"
                )
