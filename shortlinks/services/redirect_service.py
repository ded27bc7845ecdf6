"""
Redirect Service

Resolves a short code to its target URL and records the visit.

Design Decisions:
- Expiry is checked lazily at read time; expired rows are kept, not counted
- A resolved redirect is never lost to an analytics failure: recording
  errors are raised as VisitRecordingError, which carries the target URL
"""

import logging
from dataclasses import dataclass
from typing import Optional

from shortlinks.core.clock import Clock, utc_now
from shortlinks.core.exceptions import (
    ShortCodeExpiredError,
    ShortCodeNotFoundError,
    StorageError,
    VisitRecordingError,
)
from shortlinks.core.validators import normalize_code
from shortlinks.services.link_store import LinkStore
from shortlinks.services.visit_ledger import VisitLedger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VisitorContext:
    """Request metadata captured for each visit."""
    ip: Optional[str] = None
    user_agent: Optional[str] = None
    referrer: Optional[str] = None


class RedirectService:
    """
    Service for handling URL redirections.
    """

    def __init__(self, link_store: LinkStore, visit_ledger: VisitLedger, now: Clock = utc_now):
        self.link_store = link_store
        self.visit_ledger = visit_ledger
        self.now = now

    async def resolve_and_record(self, short_code: str, visitor: VisitorContext) -> str:
        """
        Get the target URL for a short code and count the visit.

        Args:
            short_code: Short code as received from the client
            visitor: IP, user agent and referrer of the request

        Returns:
            The stored long URL

        Raises:
            ShortCodeNotFoundError: If the code does not exist
            ShortCodeExpiredError: If the validity window has passed
            VisitRecordingError: If the target was resolved but the visit was not recorded
        """
        code = normalize_code(short_code)
        short_link = await self.link_store.find_by_code(code)

        if short_link is None:
            raise ShortCodeNotFoundError(code)

        if short_link.expiry_at < self.now():
            raise ShortCodeExpiredError(code)

        try:
            await self.link_store.record_visit(code)
            await self.visit_ledger.append(
                code,
                ip=visitor.ip,
                user_agent=visitor.user_agent,
                referrer=visitor.referrer
            )
        except (StorageError, ShortCodeNotFoundError) as e:
            raise VisitRecordingError(code, short_link.long_url, original_error=e) from e

        return short_link.long_url
