"""
Business logic services for Tasklens.
"""

from tasklens.services.analytics import AnalyticsService
from tasklens.services.recurrence import RecurrenceService, generate_next
from tasklens.services.tasks import TaskService

__all__ = [
    "TaskService",
    "RecurrenceService",
    "AnalyticsService",
    "generate_next",
]
