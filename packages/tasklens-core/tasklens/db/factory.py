"""
Database adapter factory.

Builds the adapter named by the database section of the config and keeps one
shared instance for the services.
"""

import logging

from tasklens.config import DatabaseConfig, TasklensConfig, get_config
from tasklens.db.interface import DatabaseAdapter
from tasklens.db.schema import init_schema

logger = logging.getLogger(__name__)

# Shared adapter used by services constructed without one
_adapter: DatabaseAdapter | None = None


def create_adapter(database: DatabaseConfig) -> DatabaseAdapter:
    """
    Build a new, unconnected adapter for a database section.

    Raises:
        ValueError: If the type is unknown or postgres has no URL
    """
    db_type = database.type.lower()

    if db_type == "sqlite":
        from tasklens.db.sqlite import SQLiteAdapter

        logger.info(f"Using SQLite adapter: {database.sqlite_path}")
        return SQLiteAdapter(database.sqlite_path)

    if db_type == "postgres":
        from tasklens.db.postgres import PostgresAdapter

        if not database.postgres_url:
            raise ValueError(
                "PostgreSQL URL not configured. "
                "Set database.postgres.url in config or TASKLENS_DATABASE_URL env var."
            )
        logger.info("Using PostgreSQL adapter")
        return PostgresAdapter(database.postgres_url)

    raise ValueError(f"Unknown database type: {db_type}. Use 'postgres' or 'sqlite'.")


def get_adapter(config: TasklensConfig | None = None) -> DatabaseAdapter:
    """
    Return the shared adapter, creating it on first use.

    Args:
        config: Config to build from; the cached config when omitted.
            Ignored once the shared adapter exists.
    """
    global _adapter

    if _adapter is None:
        _adapter = create_adapter((config or get_config()).database)
    return _adapter


async def init_adapter(config: TasklensConfig | None = None) -> DatabaseAdapter:
    """Connect the shared adapter and make sure the tasks table exists."""
    adapter = get_adapter(config)
    await adapter.connect()
    await init_schema(adapter)
    return adapter


async def close_adapter() -> None:
    """Close and forget the shared adapter."""
    global _adapter

    adapter, _adapter = _adapter, None
    if adapter is not None:
        await adapter.close()


def reset_adapter() -> None:
    """Forget the shared adapter without closing it."""
    global _adapter
    _adapter = None
