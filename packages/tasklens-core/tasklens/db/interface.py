"""
Abstract database adapter interface.

Supports both PostgreSQL and SQLite; services write $1, $2 style queries
and each adapter converts them and their parameters to its own dialect.
"""

import re
from abc import ABC, abstractmethod
from typing import Any


class DatabaseAdapter(ABC):
    """
    Abstract base class for database adapters.

    Implementations must support:
    - Basic CRUD operations (execute, fetch, fetchrow, fetchval)
    - Dialect details (placeholder style, schemas, case-insensitive LIKE)
    - Parameter conversion for types the driver cannot bind directly
    """

    @abstractmethod
    async def connect(self) -> None:
        """Initialize connection/pool."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close connection/pool."""
        pass

    @abstractmethod
    async def execute(self, query: str, *args) -> str:
        """
        Execute a query and return status.

        Args:
            query: SQL query with $1, $2 placeholders
            *args: Query parameters

        Returns:
            Status string (e.g., "INSERT 0 1")
        """
        pass

    @abstractmethod
    async def fetch(self, query: str, *args) -> list[dict]:
        """
        Fetch multiple rows as list of dicts.

        Args:
            query: SQL SELECT query
            *args: Query parameters

        Returns:
            List of row dicts
        """
        pass

    @abstractmethod
    async def fetchrow(self, query: str, *args) -> dict | None:
        """
        Fetch single row as dict.

        Args:
            query: SQL SELECT query
            *args: Query parameters

        Returns:
            Row dict or None if no results
        """
        pass

    @abstractmethod
    async def fetchval(self, query: str, *args) -> Any:
        """
        Fetch single value.

        Args:
            query: SQL SELECT query returning one column
            *args: Query parameters

        Returns:
            The value or None
        """
        pass

    @property
    @abstractmethod
    def placeholder_style(self) -> str:
        """
        Return the placeholder style for this adapter.

        Returns:
            "dollar" for PostgreSQL ($1, $2, ...)
            "qmark" for SQLite (?, ?, ...)
        """
        pass

    @property
    @abstractmethod
    def supports_schemas(self) -> bool:
        """Are tables kept in a dedicated schema (tasklens.tasks)?"""
        pass

    @property
    def like_operator(self) -> str:
        """Operator for case-insensitive substring matching."""
        return "LIKE"

    def table(self, name: str) -> str:
        """Get the full table name."""
        if self.supports_schemas:
            return f"tasklens.{name}"
        return name

    def adapt_value(self, value: Any) -> Any:
        """Convert a Python value into something the driver can bind."""
        return value

    def format_query(self, query: str) -> str:
        """
        Convert query placeholders to the adapter's style.

        Input uses $1, $2 style (PostgreSQL).
        For SQLite, converts to ? style.
        """
        if self.placeholder_style == "dollar":
            return query

        # Convert $1, $2, etc. to ? for SQLite
        return re.sub(r'\$\d+', '?', query)

    async def ensure_schema(self) -> None:
        """
        Create schema if needed (PostgreSQL only).
        Default implementation does nothing.
        """
        pass
