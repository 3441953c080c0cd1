"""
Exceptions raised by Tasklens services.
"""

from datetime import datetime
from typing import Optional


class TasklensError(Exception):
    """Base class for Tasklens errors."""


class NotRecurring(TasklensError, ValueError):
    """Raised when asking for the next occurrence of a non-recurring task."""

    def __init__(self, task_id: Optional[str] = None):
        self.task_id = task_id
        super().__init__(f"Task is not recurring: {task_id}")


class RecurrenceEnded(TasklensError, ValueError):
    """Raised when a recurring task is past its recurrence end."""

    def __init__(self, task_id: Optional[str] = None, ended_at: Optional[datetime] = None):
        self.task_id = task_id
        self.ended_at = ended_at
        when = ended_at.isoformat() if ended_at else "unknown"
        super().__init__(f"Recurring task has ended: {task_id} (ended {when})")
