"""
Tasklens Core Library

Recurring task scheduling and productivity analytics over a task store.
"""

__version__ = "0.1.0"

from tasklens.config import TasklensConfig, load_config
from tasklens.db import DatabaseAdapter, get_adapter
from tasklens.errors import NotRecurring, RecurrenceEnded, TasklensError

__all__ = [
    "load_config",
    "TasklensConfig",
    "get_adapter",
    "DatabaseAdapter",
    "TasklensError",
    "NotRecurring",
    "RecurrenceEnded",
]
