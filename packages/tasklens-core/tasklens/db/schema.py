"""
Table definitions for the task store.
"""

import logging

from tasklens.db.interface import DatabaseAdapter

logger = logging.getLogger(__name__)

SQLITE_STATEMENTS = [
    """
    CREATE TABLE IF NOT EXISTS tasks (
        id TEXT PRIMARY KEY,
        user_id TEXT,
        title TEXT NOT NULL,
        description TEXT,
        due_date TEXT,
        priority TEXT NOT NULL DEFAULT 'NORMAL',
        completed INTEGER NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL,
        recurrence TEXT NOT NULL DEFAULT 'NONE',
        recurrence_end TEXT,
        estimated_minutes INTEGER,
        reminder_time TEXT,
        tags TEXT,
        category TEXT
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_tasks_user ON tasks (user_id)",
    "CREATE INDEX IF NOT EXISTS idx_tasks_user_due ON tasks (user_id, due_date)",
]

POSTGRES_STATEMENTS = [
    """
    CREATE TABLE IF NOT EXISTS tasklens.tasks (
        id TEXT PRIMARY KEY,
        user_id TEXT,
        title TEXT NOT NULL,
        description TEXT,
        due_date TIMESTAMP,
        priority TEXT NOT NULL DEFAULT 'NORMAL',
        completed BOOLEAN NOT NULL DEFAULT FALSE,
        created_at TIMESTAMP NOT NULL,
        updated_at TIMESTAMP NOT NULL,
        recurrence TEXT NOT NULL DEFAULT 'NONE',
        recurrence_end TIMESTAMP,
        estimated_minutes INTEGER,
        reminder_time TIMESTAMP,
        tags TEXT,
        category TEXT
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_tasks_user ON tasklens.tasks (user_id)",
    "CREATE INDEX IF NOT EXISTS idx_tasks_user_due ON tasklens.tasks (user_id, due_date)",
]


async def init_schema(adapter: DatabaseAdapter) -> None:
    """Create the tasks table and indexes if they don't exist."""
    await adapter.ensure_schema()

    statements = POSTGRES_STATEMENTS if adapter.supports_schemas else SQLITE_STATEMENTS
    for statement in statements:
        await adapter.execute(statement)

    logger.info("Task tables ready")
