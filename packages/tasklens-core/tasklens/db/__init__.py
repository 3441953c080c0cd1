"""
Database abstraction layer supporting PostgreSQL and SQLite.
"""

from tasklens.db.factory import (
    close_adapter,
    create_adapter,
    get_adapter,
    init_adapter,
    reset_adapter,
)
from tasklens.db.interface import DatabaseAdapter
from tasklens.db.schema import init_schema

__all__ = [
    "DatabaseAdapter",
    "create_adapter",
    "get_adapter",
    "init_adapter",
    "close_adapter",
    "reset_adapter",
    "init_schema",
]
