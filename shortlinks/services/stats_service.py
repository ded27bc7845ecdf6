"""
Statistics Service

Builds the analytics summary of a short code from the link store and
the visit ledger.
"""

from dataclasses import dataclass
from datetime import datetime

from shortlinks.core.exceptions import ShortCodeNotFoundError
from shortlinks.core.validators import normalize_code
from shortlinks.db.models import Visit
from shortlinks.services.link_store import LinkStore
from shortlinks.services.visit_ledger import VisitLedger


@dataclass(frozen=True)
class LinkStats:
    code: str
    long_url: str
    created_at: datetime
    expiry_at: datetime
    total_clicks: int
    unique_visitors: int
    detailed_clicks: list[Visit]


class StatsService:
    """
    Service for retrieving URL statistics.

    Expired links still have statistics; only unknown codes fail.
    """

    def __init__(self, link_store: LinkStore, visit_ledger: VisitLedger):
        self.link_store = link_store
        self.visit_ledger = visit_ledger

    async def get_stats(self, short_code: str) -> LinkStats:
        """
        Get statistics for a short code.

        total_clicks is the record's counter, not the ledger length; both are
        updated by every successful redirect.

        Raises:
            ShortCodeNotFoundError: If the code does not exist
        """
        code = normalize_code(short_code)
        short_link = await self.link_store.find_by_code(code)

        if short_link is None:
            raise ShortCodeNotFoundError(code)

        visits = await self.visit_ledger.list_by_code(code)
        unique_visitors = await self.visit_ledger.count_distinct_visitors(code)

        return LinkStats(
            code=short_link.code,
            long_url=short_link.long_url,
            created_at=short_link.created_at,
            expiry_at=short_link.expiry_at,
            total_clicks=short_link.clicks,
            unique_visitors=unique_visitors,
            detailed_clicks=visits,
        )
