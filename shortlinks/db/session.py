"""
Database Session Management

This module owns the datastore handle used by the stores.

A ``Database`` is constructed explicitly (at application startup or in a
test), injected into the link store and visit ledger, and disposed at
shutdown. Nothing here is a module-level global.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from shortlinks.db.interface import DatabaseAdapter
from shortlinks.db.sqlite_adapter import get_database_adapter, sqlite_file_path

logger = logging.getLogger(__name__)


class Database:
    """
    Async engine plus session factory for one database URL.

    Usage:
        database = Database(settings.DATABASE_URL)
        await database.create_tables()
        async with database.session() as session:
            ...
        await database.dispose()
    """

    def __init__(self, database_url: str, adapter: Optional[DatabaseAdapter] = None):
        self.database_url = database_url
        self.adapter = adapter or get_database_adapter()

        db_file = sqlite_file_path(database_url)
        if db_file is not None:
            db_file.parent.mkdir(parents=True, exist_ok=True)

        self.engine: AsyncEngine = self.adapter.create_engine(database_url)
        self.session_maker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,  # Objects stay readable after the session closes
            autoflush=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Open a session that commits on success and rolls back on exception.
        """
        async with self.session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def create_tables(self) -> None:
        """Create all tables that do not exist yet."""
        # Import models so they are registered on SQLModel.metadata
        from shortlinks.db import models  # noqa: F401

        async with self.engine.begin() as connection:
            await connection.run_sync(SQLModel.metadata.create_all)
        logger.info("Database tables ensured for %s", self.adapter.get_dialect_name())

    async def dispose(self) -> None:
        """Release all connections held by the engine."""
        await self.engine.dispose()
