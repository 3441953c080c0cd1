"""
Task query interface consumed by the analytics aggregator.

All queries are scoped to one user. Time ranges are PeriodWindows and
include both ends.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Optional

from tasklens.models.analytics import PeriodWindow

# Fields that group_count() accepts
GROUPABLE_FIELDS = ("category", "priority")


def check_group_field(field: str) -> str:
    if field not in GROUPABLE_FIELDS:
        raise ValueError(f"Invalid group field. Must be one of: {', '.join(GROUPABLE_FIELDS)}")
    return field


class TaskQuery(ABC):
    """Read-only counting and grouping over a user's tasks."""

    @abstractmethod
    async def count(
        self,
        user_id: str,
        *,
        completed: Optional[bool] = None,
        updated_between: Optional[PeriodWindow] = None,
        created_between: Optional[PeriodWindow] = None,
        due_before: Optional[datetime] = None,
        due_between: Optional[PeriodWindow] = None,
        category: Optional[str] = None,
        priority: Optional[str] = None,
    ) -> int:
        """
        Count tasks matching every given filter.

        Args:
            user_id: Owner of the tasks
            completed: Completion flag
            updated_between: Window on updated_at
            created_between: Window on created_at
            due_before: Due date strictly before this instant
            due_between: Window on due_date
            category: Exact category
            priority: Exact priority

        Returns:
            Number of matching tasks
        """
        pass

    @abstractmethod
    async def sum_estimated_minutes(
        self,
        user_id: str,
        *,
        completed: Optional[bool] = None,
        updated_between: Optional[PeriodWindow] = None,
    ) -> int:
        """Sum estimated_minutes of matching tasks, counting missing values as 0."""
        pass

    @abstractmethod
    async def group_count(self, user_id: str, field: str) -> Dict[Optional[str], int]:
        """
        Count tasks per distinct value of `field`.

        Tasks without a value are grouped under None.

        Raises:
            ValueError: If `field` is not groupable
        """
        pass
