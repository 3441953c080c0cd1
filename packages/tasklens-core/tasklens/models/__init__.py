"""
Core data models for Tasklens.
"""

from tasklens.models.analytics import AnalyticsSnapshot, PeriodWindow
from tasklens.models.task import NewTaskRecord, Priority, Recurrence, Task

__all__ = [
    "Task",
    "NewTaskRecord",
    "Priority",
    "Recurrence",
    "AnalyticsSnapshot",
    "PeriodWindow",
]
