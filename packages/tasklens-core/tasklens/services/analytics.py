"""
Analytics Service for Tasklens.

Productivity metrics for a user over the current day, week or month, compared
with the period just before it. Snapshots are recomputed on every call and
depend only on the task data and the supplied `now`.
"""

import logging
import math
from datetime import datetime, timedelta
from typing import Tuple

from tasklens.config import get_config
from tasklens.dates import (
    add_months,
    end_of_day,
    end_of_month,
    end_of_week,
    start_of_day,
    start_of_month,
    start_of_week,
)
from tasklens.db import get_adapter
from tasklens.models.analytics import AnalyticsSnapshot, PeriodWindow
from tasklens.query.interface import TaskQuery
from tasklens.query.sql import SQLTaskQuery

logger = logging.getLogger(__name__)

PERIODS = ("day", "week", "month")
FALLBACK_PERIOD = "week"
DEFAULT_DUE_SOON = timedelta(hours=48)


def resolve_period(value) -> str:
    """The window granularity for a period name. Matching is exact; anything else means week."""
    if value in PERIODS:
        return value
    return FALLBACK_PERIOD


def period_window(period: str, moment: datetime) -> PeriodWindow:
    """The day, Monday-based week, or month containing `moment`."""
    period = resolve_period(period)
    if period == "day":
        return PeriodWindow(start_of_day(moment), end_of_day(moment))
    if period == "month":
        return PeriodWindow(start_of_month(moment), end_of_month(moment))
    return PeriodWindow(start_of_week(moment), end_of_week(moment))


def period_windows(period: str, now: datetime) -> Tuple[PeriodWindow, PeriodWindow]:
    """
    Current and previous windows for a period.

    The previous window is the one containing `now` moved back by one
    day, week or calendar month.
    """
    period = resolve_period(period)
    if period == "day":
        earlier = now - timedelta(days=1)
    elif period == "month":
        earlier = add_months(now, -1)
    else:
        earlier = now - timedelta(weeks=1)
    return period_window(period, now), period_window(period, earlier)


def percent(numerator: int, denominator: int) -> int:
    """100 * numerator / denominator rounded to the nearest integer, halves up."""
    return math.floor(100 * numerator / denominator + 0.5)


def completion_rate(completed: int, created: int) -> int:
    if created == 0:
        return 0
    return percent(completed, created)


def productivity_trend(current: int, previous: int) -> int:
    if previous > 0:
        return percent(current - previous, previous)
    if current > 0:
        return 100
    return 0


async def compute(
    period: str,
    now: datetime,
    query: TaskQuery,
    user_id: str,
    due_soon: timedelta = DEFAULT_DUE_SOON,
) -> AnalyticsSnapshot:
    """
    Compute a user's productivity snapshot.

    The snapshot echoes `period` as given; only a missing period is reported
    as "week".

    Args:
        period: "day", "week" or "month"; anything else is treated as "week"
        now: Reference time
        query: Task query collaborator
        user_id: User whose tasks are counted
        due_soon: How far ahead of `now` a due date counts as due soon

    Returns:
        AnalyticsSnapshot for the current window
    """
    granularity = resolve_period(period)
    current, previous = period_windows(granularity, now)
    logger.debug(
        f"Analytics windows for {user_id} ({granularity}): "
        f"current {current.start} - {current.end}, previous {previous.start} - {previous.end}"
    )

    completed_current = await query.count(user_id, completed=True, updated_between=current)
    completed_previous = await query.count(user_id, completed=True, updated_between=previous)
    created_current = await query.count(user_id, created_between=current)

    snapshot = AnalyticsSnapshot(
        period=period or FALLBACK_PERIOD,
        start_date=current.start,
        end_date=current.end,
        total_tasks=await query.count(user_id),
        completed_tasks_current_period=completed_current,
        completed_tasks_previous_period=completed_previous,
        total_time_spent=await query.sum_estimated_minutes(
            user_id, completed=True, updated_between=current
        ),
        tasks_by_category=await query.group_count(user_id, "category"),
        tasks_by_priority=await query.group_count(user_id, "priority"),
        overdue_tasks=await query.count(user_id, completed=False, due_before=now),
        tasks_due_soon=await query.count(
            user_id, completed=False, due_between=PeriodWindow(now, now + due_soon)
        ),
        completion_rate=completion_rate(completed_current, created_current),
        productivity_trend=productivity_trend(completed_current, completed_previous),
    )

    logger.debug(f"Analytics snapshot for {user_id}: {snapshot}")
    return snapshot


class AnalyticsService:
    """
    Service computing analytics against the task store.
    """

    def __init__(self, adapter=None, config=None):
        """
        Initialize analytics service.

        Args:
            adapter: Optional DatabaseAdapter. If not provided, uses global adapter.
            config: Optional TasklensConfig. If not provided, uses cached config.
        """
        self._adapter = adapter
        self._config = config

    @property
    def adapter(self):
        """Get the database adapter."""
        if self._adapter is None:
            self._adapter = get_adapter()
        return self._adapter

    @property
    def config(self):
        """Get the configuration."""
        if self._config is None:
            self._config = get_config()
        return self._config

    async def compute(
        self,
        user_id: str,
        now: datetime,
        period: str | None = None,
    ) -> AnalyticsSnapshot:
        """
        Compute a snapshot for `user_id`.

        Args:
            user_id: User whose tasks are counted
            now: Reference time
            period: Period name, defaults to analytics.default_period

        Returns:
            AnalyticsSnapshot
        """
        return await compute(
            period or self.config.analytics.default_period,
            now,
            SQLTaskQuery(self.adapter),
            user_id,
            due_soon=timedelta(hours=self.config.analytics.due_soon_hours),
        )
