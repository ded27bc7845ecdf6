"""
SQLite Database Adapter

This module implements the DatabaseAdapter interface for SQLite.
All SQLite-specific configuration and behavior is encapsulated here.

Key characteristics:
- File-based (single .db file)
- Single writer at a time (file locking); WAL lets readers run alongside it
- Writers wait on the busy timeout instead of failing immediately
"""

from pathlib import Path
from typing import Any, Optional

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool

from shortlinks.db.interface import DatabaseAdapter

BUSY_TIMEOUT_SECONDS = 15


class SQLiteAdapter(DatabaseAdapter):
    """
    SQLite database adapter implementation.

    Engines created here switch every connection to WAL journaling, which
    is what lets redirects keep reading while a visit is being written.
    """

    def create_engine(self, database_url: str, **kwargs) -> AsyncEngine:
        """
        Create SQLite async engine with appropriate configuration.

        Args:
            database_url: SQLite connection string (sqlite+aiosqlite:///...)
            **kwargs: Additional engine options (merged with SQLite defaults)

        Returns:
            Configured AsyncEngine for SQLite
        """
        engine_kwargs = self.get_engine_kwargs()
        engine_kwargs.update(kwargs)

        engine = create_async_engine(
            database_url,
            poolclass=self.get_pool_class(),
            connect_args=self.get_connect_args(),
            **engine_kwargs
        )

        @event.listens_for(engine.sync_engine, "connect")
        def _set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.close()

        return engine

    def get_pool_class(self) -> type[NullPool]:
        """
        SQLite uses NullPool: a fresh connection per session, which keeps
        each request's transaction on its own connection.
        """
        return NullPool

    def get_connect_args(self) -> dict[str, Any]:
        return {
            "check_same_thread": False,
            "timeout": BUSY_TIMEOUT_SECONDS,
        }

    def get_engine_kwargs(self) -> dict[str, Any]:
        return {
            "echo": False  # Set to True only for SQL debugging in development
        }

    def is_unique_violation(self, error: IntegrityError) -> bool:
        # sqlite3 reports both PRIMARY KEY and UNIQUE collisions as "UNIQUE constraint failed"
        return "UNIQUE" in str(error.orig).upper()

    def get_dialect_name(self) -> str:
        return "sqlite"


def sqlite_file_path(database_url: str) -> Optional[Path]:
    """
    Return the database file path of a SQLite URL, or None for in-memory databases.
    """
    url = make_url(database_url)
    if not url.drivername.startswith("sqlite"):
        return None
    if not url.database or url.database == ":memory:":
        return None
    return Path(url.database)


def get_database_adapter() -> DatabaseAdapter:
    """
    Factory function to get the database adapter.

    Returns SQLiteAdapter by default.
    """
    return SQLiteAdapter()
