"""
Database module with abstraction layer.

This module provides:
- DatabaseAdapter interface: Abstract base class for database implementations
- SQLiteAdapter: SQLite-specific implementation (default)
- Database: explicitly constructed engine + session factory
"""

from shortlinks.db.interface import DatabaseAdapter
from shortlinks.db.session import Database

__all__ = [
    "DatabaseAdapter",
    "Database",
]
