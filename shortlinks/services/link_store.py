"""
Link Store

Durable table of short code mappings and the single source of truth for
redirect decisions.

Design Decisions:
- Uniqueness is the primary-key constraint: check and insert happen in one statement
- Click counting uses a database-level UPDATE (no read-modify-write, no lost updates)
- Every operation runs in its own short transaction on the injected Database
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from shortlinks.core.clock import Clock, as_utc, utc_now
from shortlinks.core.exceptions import (
    DuplicateShortCodeError,
    ShortCodeNotFoundError,
    StorageError,
)
from shortlinks.db.models import ShortLink
from shortlinks.db.session import Database

logger = logging.getLogger(__name__)


def _to_utc(short_link: ShortLink) -> ShortLink:
    short_link.created_at = as_utc(short_link.created_at)
    short_link.expiry_at = as_utc(short_link.expiry_at)
    short_link.last_accessed_at = as_utc(short_link.last_accessed_at)
    return short_link


class LinkStore:
    """
    Repository for ShortLink rows.
    """

    def __init__(self, database: Database, now: Clock = utc_now):
        """
        Args:
            database: Datastore handle
            now: Clock returning timezone-aware UTC datetimes
        """
        self.database = database
        self.now = now

    async def insert(self, code: str, long_url: str, expiry_at: datetime) -> ShortLink:
        """
        Create a new mapping with zero clicks.

        Args:
            code: Normalized short code
            long_url: Validated target URL
            expiry_at: Absolute expiry time, must be after now

        Returns:
            The stored ShortLink

        Raises:
            DuplicateShortCodeError: If the code already exists (nothing is written)
            StorageError: On any other persistence failure
        """
        created_at = self.now()
        if as_utc(expiry_at) <= created_at:
            raise ValueError("expiry_at must be later than the creation time")

        short_link = ShortLink(
            code=code,
            long_url=long_url,
            created_at=created_at,
            expiry_at=expiry_at,
            last_accessed_at=None,
            clicks=0,
        )

        try:
            async with self.database.session() as session:
                session.add(short_link)
        except IntegrityError as e:
            if self.database.adapter.is_unique_violation(e):
                raise DuplicateShortCodeError(code) from e
            raise StorageError("failed to create short link", original_error=e) from e
        except SQLAlchemyError as e:
            logger.error(f"Failed to insert short link {code}: {e}", exc_info=True)
            raise StorageError("failed to create short link", original_error=e) from e

        return _to_utc(short_link)

    async def find_by_code(self, code: str) -> Optional[ShortLink]:
        """
        Look up a mapping by its normalized code.

        Returns:
            ShortLink if found, None otherwise
        """
        try:
            async with self.database.session() as session:
                statement = select(ShortLink).where(ShortLink.code == code)
                result = await session.execute(statement)
                short_link = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StorageError(f"failed to look up '{code}'", original_error=e) from e

        return _to_utc(short_link) if short_link else None

    async def record_visit(self, code: str) -> None:
        """
        Atomically increment ``clicks`` and set ``last_accessed_at`` to now.

        Raises:
            ShortCodeNotFoundError: If no row has this code
            StorageError: On persistence failure
        """
        statement = (
            update(ShortLink)
            .where(ShortLink.code == code)
            .values(clicks=ShortLink.clicks + 1, last_accessed_at=self.now())
        )

        try:
            async with self.database.session() as session:
                result = await session.execute(statement)
                updated = result.rowcount
        except SQLAlchemyError as e:
            raise StorageError(f"failed to update counters for '{code}'", original_error=e) from e

        if updated == 0:
            raise ShortCodeNotFoundError(code)
