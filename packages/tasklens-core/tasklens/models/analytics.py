"""
Analytics value objects for Tasklens.

Snapshots are computed per request and never stored.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional


@dataclass(frozen=True)
class PeriodWindow:
    """A closed time window: both `start` and `end` are included."""

    start: datetime
    end: datetime

    def contains(self, moment: Optional[datetime]) -> bool:
        """Check if a timestamp falls inside the window."""
        return moment is not None and self.start <= moment <= self.end


@dataclass(frozen=True)
class AnalyticsSnapshot:
    """
    Productivity metrics for one period and the period before it.

    Attributes:
        period: Resolved period name (day, week, month)
        start_date: First instant of the current window
        end_date: Last instant of the current window
        total_tasks: All tasks owned by the user
        completed_tasks_current_period: Completed, updated inside the current window
        completed_tasks_previous_period: Completed, updated inside the previous window
        total_time_spent: Estimated minutes of tasks completed in the current window
        tasks_by_category: Task count per category (None is its own group)
        tasks_by_priority: Task count per priority
        overdue_tasks: Incomplete tasks due before now
        tasks_due_soon: Incomplete tasks due within the due-soon horizon
        completion_rate: Percent of tasks created this period that were completed
        productivity_trend: Percent change in completions over the previous period
    """

    period: str
    start_date: datetime
    end_date: datetime
    total_tasks: int = 0
    completed_tasks_current_period: int = 0
    completed_tasks_previous_period: int = 0
    total_time_spent: int = 0
    tasks_by_category: Dict[Optional[str], int] = field(default_factory=dict)
    tasks_by_priority: Dict[str, int] = field(default_factory=dict)
    overdue_tasks: int = 0
    tasks_due_soon: int = 0
    completion_rate: int = 0
    productivity_trend: int = 0

    def to_dict(self) -> dict:
        """Convert to the dashboard response shape."""
        return {
            "period": self.period,
            "totalTasks": self.total_tasks,
            "completedTasksCurrentPeriod": self.completed_tasks_current_period,
            "completedTasksPreviousPeriod": self.completed_tasks_previous_period,
            "totalTimeSpent": self.total_time_spent,
            "tasksByCategory": [
                {"category": key, "count": count}
                for key, count in self.tasks_by_category.items()
            ],
            "tasksByPriority": [
                {"priority": key, "count": count}
                for key, count in self.tasks_by_priority.items()
            ],
            "overdueTasks": self.overdue_tasks,
            "tasksDueSoon": self.tasks_due_soon,
            "completionRate": self.completion_rate,
            "productivityTrend": self.productivity_trend,
            "dateRange": {
                "start": self.start_date.isoformat(),
                "end": self.end_date.isoformat(),
            },
        }
