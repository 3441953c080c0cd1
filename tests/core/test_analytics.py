"""
Tests for the analytics aggregator.
"""

import pytest
from datetime import datetime, timedelta

from tasklens.models.analytics import PeriodWindow
from tasklens.query.memory import InMemoryTaskQuery
from tasklens.services.analytics import (
    completion_rate,
    compute,
    period_windows,
    productivity_trend,
    resolve_period,
)

USER = "user-1"
OTHER_USER = "user-2"
NOW = datetime(2024, 6, 12, 12, 0)  # Wednesday
END = dict(hour=23, minute=59, second=59, microsecond=999000)


class TestPeriods:
    """Tests for period resolution and windows."""

    @pytest.mark.parametrize("value", ["day", "week", "month"])
    def test_known_periods(self, value):
        assert resolve_period(value) == value

    @pytest.mark.parametrize("value", ["quarter", "", None, 7, "Month", " day"])
    def test_unknown_periods_default_to_week(self, value):
        assert resolve_period(value) == "week"

    def test_week_windows(self):
        current, previous = period_windows("week", NOW)

        assert current == PeriodWindow(datetime(2024, 6, 10), datetime(2024, 6, 16, **END))
        assert previous == PeriodWindow(datetime(2024, 6, 3), datetime(2024, 6, 9, **END))

    def test_day_windows(self):
        current, previous = period_windows("day", NOW)

        assert current == PeriodWindow(datetime(2024, 6, 12), datetime(2024, 6, 12, **END))
        assert previous == PeriodWindow(datetime(2024, 6, 11), datetime(2024, 6, 11, **END))

    def test_month_windows(self):
        current, previous = period_windows("month", datetime(2024, 3, 31, 18, 0))

        assert current == PeriodWindow(datetime(2024, 3, 1), datetime(2024, 3, 31, **END))
        assert previous == PeriodWindow(datetime(2024, 2, 1), datetime(2024, 2, 29, **END))

    def test_month_windows_across_year(self):
        current, previous = period_windows("month", datetime(2024, 1, 5))

        assert previous == PeriodWindow(datetime(2023, 12, 1), datetime(2023, 12, 31, **END))

    def test_unknown_period_uses_week_windows(self):
        assert period_windows("fortnight", NOW) == period_windows("week", NOW)


class TestRates:
    """Tests for the percentage metrics."""

    def test_completion_rate_guards_zero(self):
        assert completion_rate(5, 0) == 0

    def test_completion_rate_rounds(self):
        assert completion_rate(1, 3) == 33
        assert completion_rate(2, 3) == 67
        assert completion_rate(1, 8) == 13  # 12.5 rounds up

    def test_completion_rate_can_exceed_100(self):
        assert completion_rate(3, 2) == 150

    def test_trend(self):
        assert productivity_trend(4, 2) == 100
        assert productivity_trend(1, 4) == -75
        assert productivity_trend(3, 0) == 100
        assert productivity_trend(0, 0) == 0
        assert productivity_trend(0, 2) == -100


@pytest.fixture
def week_tasks(make_task):
    """
    Ten tasks for USER around Wednesday 2024-06-12, plus one for another user.

    Current week: 4 completed (two with estimates), 2 created.
    Previous week: 2 completed.
    """
    this_week = datetime(2024, 6, 11, 10, 0)
    last_week = datetime(2024, 6, 5, 10, 0)
    old = datetime(2024, 5, 1, 10, 0)

    return [
        make_task(completed=True, updated_at=this_week, created_at=old,
                  estimated_minutes=30, category="Work", priority="HIGH"),
        make_task(completed=True, updated_at=this_week, created_at=old,
                  estimated_minutes=45, category="Work"),
        make_task(completed=True, updated_at=datetime(2024, 6, 10), created_at=old,
                  category="Home"),
        make_task(completed=True, updated_at=datetime(2024, 6, 16, **END), created_at=old,
                  category="Home"),
        make_task(completed=True, updated_at=last_week, created_at=old,
                  estimated_minutes=60, category="Work"),
        make_task(completed=True, updated_at=last_week, created_at=old, category="Work"),
        # overdue
        make_task(due_date=NOW - timedelta(minutes=1), created_at=this_week,
                  updated_at=this_week, category="Work", priority="URGENT"),
        # due soon, at the horizon edge
        make_task(due_date=NOW + timedelta(hours=48), created_at=this_week,
                  updated_at=this_week, category="Home", priority="LOW"),
        # due later
        make_task(due_date=NOW + timedelta(hours=49), created_at=old,
                  updated_at=old, category="Home"),
        # due exactly now: due soon, not overdue
        make_task(due_date=NOW, created_at=old, updated_at=old, category="Errands"),
        make_task(user_id=OTHER_USER, completed=True, updated_at=this_week,
                  category="Work", estimated_minutes=500),
    ]


class TestCompute:
    """Tests for compute()."""

    async def test_week_snapshot(self, week_tasks):
        snapshot = await compute("week", NOW, InMemoryTaskQuery(week_tasks), USER)

        assert snapshot.period == "week"
        assert snapshot.start_date == datetime(2024, 6, 10)
        assert snapshot.end_date == datetime(2024, 6, 16, **END)
        assert snapshot.total_tasks == 10
        assert snapshot.completed_tasks_current_period == 4
        assert snapshot.completed_tasks_previous_period == 2
        assert snapshot.total_time_spent == 75
        assert snapshot.overdue_tasks == 1
        assert snapshot.tasks_due_soon == 2
        assert snapshot.completion_rate == 200  # 4 completed / 2 created
        assert snapshot.productivity_trend == 100

    async def test_groupings(self, week_tasks):
        snapshot = await compute("week", NOW, InMemoryTaskQuery(week_tasks), USER)

        assert snapshot.tasks_by_category == {"Work": 5, "Home": 4, "Errands": 1}
        assert snapshot.tasks_by_priority == {"HIGH": 1, "NORMAL": 7, "URGENT": 1, "LOW": 1}
        assert sum(snapshot.tasks_by_category.values()) == snapshot.total_tasks

    async def test_missing_category_is_its_own_group(self, make_task):
        tasks = [make_task(category="Work"), make_task(), make_task()]

        snapshot = await compute("week", NOW, InMemoryTaskQuery(tasks), USER)

        assert snapshot.tasks_by_category == {"Work": 1, None: 2}

    async def test_no_tasks_created_means_zero_rate(self, make_task):
        tasks = [make_task(completed=True, updated_at=NOW, created_at=datetime(2024, 1, 1))]

        snapshot = await compute("day", NOW, InMemoryTaskQuery(tasks), USER)

        assert snapshot.completed_tasks_current_period == 1
        assert snapshot.completion_rate == 0
        assert snapshot.productivity_trend == 100

    async def test_empty_user(self):
        snapshot = await compute("month", NOW, InMemoryTaskQuery([]), USER)

        assert snapshot.total_tasks == 0
        assert snapshot.tasks_by_category == {}
        assert snapshot.completion_rate == 0
        assert snapshot.productivity_trend == 0
        assert snapshot.start_date == datetime(2024, 6, 1)
        assert snapshot.end_date == datetime(2024, 6, 30, **END)

    async def test_unknown_period_uses_week_window_and_is_echoed(self, week_tasks):
        snapshot = await compute("quarter", NOW, InMemoryTaskQuery(week_tasks), USER)

        assert snapshot.period == "quarter"
        assert snapshot.start_date == datetime(2024, 6, 10)
        assert snapshot.end_date == datetime(2024, 6, 16, **END)
        assert snapshot.completed_tasks_current_period == 4

    async def test_period_matching_is_case_sensitive(self, week_tasks):
        snapshot = await compute("Month", NOW, InMemoryTaskQuery(week_tasks), USER)

        assert snapshot.period == "Month"
        assert snapshot.start_date == datetime(2024, 6, 10)
        assert snapshot.end_date == datetime(2024, 6, 16, **END)

    @pytest.mark.parametrize("period", [None, ""])
    async def test_missing_period_is_reported_as_week(self, week_tasks, period):
        snapshot = await compute(period, NOW, InMemoryTaskQuery(week_tasks), USER)

        assert snapshot.period == "week"
        assert snapshot.start_date == datetime(2024, 6, 10)

    async def test_custom_due_soon_horizon(self, week_tasks):
        snapshot = await compute(
            "week", NOW, InMemoryTaskQuery(week_tasks), USER, due_soon=timedelta(hours=1)
        )

        assert snapshot.tasks_due_soon == 1

    async def test_negative_estimates_are_not_clamped(self, make_task):
        tasks = [make_task(completed=True, updated_at=NOW, estimated_minutes=-20)]

        snapshot = await compute("day", NOW, InMemoryTaskQuery(tasks), USER)

        assert snapshot.total_time_spent == -20

    async def test_compute_is_idempotent(self, week_tasks):
        query = InMemoryTaskQuery(week_tasks)

        first = await compute("week", NOW, query, USER)
        second = await compute("week", NOW, query, USER)

        assert first == second
        assert first.to_dict() == second.to_dict()
