"""
SQLite database adapter using aiosqlite.

SQLite has no native timestamp or boolean type, so datetimes are bound as
ISO-8601 text (fixed microsecond precision, which keeps text comparison in
time order) and booleans as integers.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, List, Any

import aiosqlite

from tasklens.db.interface import DatabaseAdapter

logger = logging.getLogger(__name__)


def datetime_to_text(value: datetime) -> str:
    """Serialize a datetime for SQLite storage."""
    return value.isoformat(timespec="microseconds")


class SQLiteAdapter(DatabaseAdapter):
    """
    SQLite adapter.

    Uses aiosqlite for async database operations.
    Automatically creates the database file and parent directories.
    """

    def __init__(self, db_path: str = "~/.tasklens/tasklens.db"):
        """
        Initialize SQLite adapter.

        Args:
            db_path: Path to SQLite database file.
                    Supports ~ expansion for home directory.
        """
        self.db_path = Path(db_path).expanduser()
        self._conn: Optional[aiosqlite.Connection] = None

    async def connect(self) -> None:
        """Initialize database connection and create file if needed."""
        if self._conn is not None:
            return

        # Ensure parent directory exists
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        # Connect (creates file if doesn't exist)
        self._conn = await aiosqlite.connect(str(self.db_path))

        await self._conn.execute("PRAGMA foreign_keys = ON")

        # Use WAL mode for better concurrent access
        await self._conn.execute("PRAGMA journal_mode = WAL")

        # Row factory to return dicts
        self._conn.row_factory = aiosqlite.Row

        logger.info(f"SQLite database connected: {self.db_path}")

    async def close(self) -> None:
        """Close database connection."""
        if self._conn is not None:
            await self._conn.close()
            self._conn = None
            logger.info("SQLite connection closed")

    async def _get_conn(self) -> aiosqlite.Connection:
        """Get or create connection."""
        if self._conn is None:
            await self.connect()
        return self._conn

    def _params(self, args) -> tuple:
        return tuple(self.adapt_value(arg) for arg in args)

    async def execute(self, query: str, *args) -> str:
        """Execute query and return status."""
        conn = await self._get_conn()
        query = self.format_query(query)

        cursor = await conn.execute(query, self._params(args))
        await conn.commit()

        # Return a status string similar to PostgreSQL
        if query.strip().upper().startswith("INSERT"):
            return f"INSERT 0 {cursor.rowcount}"
        elif query.strip().upper().startswith("UPDATE"):
            return f"UPDATE {cursor.rowcount}"
        elif query.strip().upper().startswith("DELETE"):
            return f"DELETE {cursor.rowcount}"
        return "OK"

    async def fetch(self, query: str, *args) -> List[dict]:
        """Fetch rows as list of dicts."""
        conn = await self._get_conn()
        query = self.format_query(query)

        cursor = await conn.execute(query, self._params(args))
        rows = await cursor.fetchall()

        # Convert Row objects to dicts
        return [dict(row) for row in rows]

    async def fetchrow(self, query: str, *args) -> Optional[dict]:
        """Fetch single row as dict."""
        conn = await self._get_conn()
        query = self.format_query(query)

        cursor = await conn.execute(query, self._params(args))
        row = await cursor.fetchone()

        return dict(row) if row else None

    async def fetchval(self, query: str, *args) -> Any:
        """Fetch single value."""
        conn = await self._get_conn()
        query = self.format_query(query)

        cursor = await conn.execute(query, self._params(args))
        row = await cursor.fetchone()

        if row:
            # Return first column value
            return row[0]
        return None

    @property
    def placeholder_style(self) -> str:
        """SQLite uses ? style placeholders."""
        return "qmark"

    @property
    def supports_schemas(self) -> bool:
        """SQLite keeps everything in the main database."""
        return False

    def adapt_value(self, value: Any) -> Any:
        """Bind datetimes as ISO text and booleans as 0/1."""
        if isinstance(value, datetime):
            return datetime_to_text(value)
        if isinstance(value, bool):
            return int(value)
        return value
