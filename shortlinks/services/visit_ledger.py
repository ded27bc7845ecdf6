"""
Visit Ledger

Append-only log of redirects served, used for the detailed click listing
and unique-visitor counts.

Design Decisions:
- Rows are only ever inserted; there is no update or delete path
- Identical visits are separate rows (no uniqueness on content)
- Unique visitors are distinct non-null IPs, counted by the database
"""

from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from shortlinks.core.clock import Clock, as_utc, utc_now
from shortlinks.core.exceptions import StorageError
from shortlinks.db.models import Visit
from shortlinks.db.session import Database


class VisitLedger:
    """
    Repository for Visit rows.
    """

    def __init__(self, database: Database, now: Clock = utc_now):
        self.database = database
        self.now = now

    async def append(
        self,
        code: str,
        ip: Optional[str] = None,
        user_agent: Optional[str] = None,
        referrer: Optional[str] = None
    ) -> Visit:
        """
        Record one visit to a short code.

        Args:
            code: The short code that was accessed
            ip: IP address of the visitor
            user_agent: User agent string
            referrer: Referer header value

        Raises:
            StorageError: If the row could not be written
        """
        visit = Visit(
            code=code,
            ip=ip,
            user_agent=user_agent,
            referrer=referrer,
            visited_at=self.now()
        )

        try:
            async with self.database.session() as session:
                session.add(visit)
        except SQLAlchemyError as e:
            raise StorageError(f"failed to append visit for '{code}'", original_error=e) from e

        visit.visited_at = as_utc(visit.visited_at)
        return visit

    async def list_by_code(self, code: str) -> list[Visit]:
        """All visits for a code, oldest first."""
        statement = (
            select(Visit)
            .where(Visit.code == code)
            .order_by(Visit.visited_at, Visit.id)
        )

        try:
            async with self.database.session() as session:
                result = await session.execute(statement)
                visits = list(result.scalars().all())
        except SQLAlchemyError as e:
            raise StorageError(f"failed to list visits for '{code}'", original_error=e) from e

        for visit in visits:
            visit.visited_at = as_utc(visit.visited_at)
        return visits

    async def count_distinct_visitors(self, code: str) -> int:
        """Number of distinct non-null IPs among the visits for a code."""
        statement = select(func.count(func.distinct(Visit.ip))).where(Visit.code == code)

        try:
            async with self.database.session() as session:
                result = await session.execute(statement)
                count = result.scalar_one()
        except SQLAlchemyError as e:
            raise StorageError(f"failed to count visitors for '{code}'", original_error=e) from e

        return count or 0
