"""
Database Abstraction Interface

This module defines the database abstraction layer that allows switching between
different database backends without changing the stores or services.

The interface defines engine configuration and the backend-specific error
recognition the link store needs to report duplicate short codes.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.pool import Pool


class DatabaseAdapter(ABC):
    """
    Abstract base class for database adapters.

    To add a new database backend:
    1. Create a new class inheriting from DatabaseAdapter
    2. Implement all abstract methods
    3. Update get_database_adapter() to return the new adapter
    """

    @abstractmethod
    def create_engine(self, database_url: str, **kwargs) -> AsyncEngine:
        """
        Create and configure the async database engine.

        Args:
            database_url: Connection string for the database
            **kwargs: Additional engine configuration options

        Returns:
            Configured AsyncEngine instance
        """
        pass

    @abstractmethod
    def get_pool_class(self) -> Optional[type[Pool]]:
        """Get the connection pool class for this database type (None for default)."""
        pass

    @abstractmethod
    def get_connect_args(self) -> dict[str, Any]:
        """Get connection arguments specific to this database type."""
        pass

    @abstractmethod
    def get_engine_kwargs(self) -> dict[str, Any]:
        """Get additional engine configuration specific to this database type."""
        pass

    @abstractmethod
    def is_unique_violation(self, error: IntegrityError) -> bool:
        """
        Tell whether an IntegrityError was raised by a unique/primary key constraint.

        Args:
            error: The IntegrityError raised by the driver

        Returns:
            True for uniqueness violations, False for other integrity failures
        """
        pass

    @abstractmethod
    def get_dialect_name(self) -> str:
        """Get the SQLAlchemy dialect name (e.g. 'sqlite')."""
        pass
