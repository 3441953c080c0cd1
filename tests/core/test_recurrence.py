"""
Tests for next-occurrence generation.
"""

import pytest
from datetime import datetime, timedelta

from tasklens.errors import NotRecurring, RecurrenceEnded
from tasklens.models.task import Recurrence
from tasklens.services.recurrence import generate_next, next_due_date

NOW = datetime(2024, 6, 12, 8, 0)  # Wednesday
FRIDAY = datetime(2024, 6, 14, 17, 30)


class TestNextDueDate:
    """Tests for the advancement table."""

    @pytest.mark.parametrize(
        "recurrence, expected",
        [
            (Recurrence.DAILY, datetime(2024, 6, 15, 17, 30)),
            (Recurrence.WEEKDAYS, datetime(2024, 6, 17, 17, 30)),
            (Recurrence.WEEKLY, datetime(2024, 6, 21, 17, 30)),
            (Recurrence.BIWEEKLY, datetime(2024, 6, 28, 17, 30)),
            (Recurrence.MONTHLY, datetime(2024, 7, 14, 17, 30)),
            (Recurrence.YEARLY, datetime(2025, 6, 14, 17, 30)),
            (Recurrence.CUSTOM, datetime(2024, 6, 15, 17, 30)),
        ],
    )
    def test_from_friday(self, recurrence, expected):
        assert next_due_date(recurrence, FRIDAY) == expected

    def test_weekdays_midweek_moves_one_day(self):
        assert next_due_date(Recurrence.WEEKDAYS, NOW) == NOW + timedelta(days=1)

    def test_weekdays_from_saturday_lands_on_tuesday(self):
        saturday = datetime(2024, 6, 15, 9, 0)

        assert next_due_date(Recurrence.WEEKDAYS, saturday) == datetime(2024, 6, 18, 9, 0)

    def test_weekdays_from_sunday_lands_on_monday(self):
        sunday = datetime(2024, 6, 16, 9, 0)

        assert next_due_date(Recurrence.WEEKDAYS, sunday) == datetime(2024, 6, 17, 9, 0)

    def test_weekdays_from_thursday_lands_on_friday(self):
        thursday = datetime(2024, 6, 13, 9, 0)

        assert next_due_date(Recurrence.WEEKDAYS, thursday) == datetime(2024, 6, 14, 9, 0)

    def test_monthly_clamps(self):
        assert next_due_date(Recurrence.MONTHLY, datetime(2023, 1, 31)) == datetime(2023, 2, 28)
        assert next_due_date(Recurrence.MONTHLY, datetime(2024, 1, 31)) == datetime(2024, 2, 29)

    def test_yearly_from_leap_day(self):
        assert next_due_date(Recurrence.YEARLY, datetime(2024, 2, 29)) == datetime(2025, 2, 28)

    def test_none_raises(self):
        with pytest.raises(NotRecurring):
            next_due_date(Recurrence.NONE, NOW)


class TestGenerateNext:
    """Tests for generate_next()."""

    def test_not_recurring(self, make_task):
        task = make_task(id="t1", due_date=FRIDAY)

        with pytest.raises(NotRecurring) as exc:
            generate_next(task, NOW)

        assert exc.value.task_id == "t1"

    def test_recurrence_ended(self, make_task):
        end = datetime(2024, 6, 1)
        task = make_task(recurrence="DAILY", due_date=FRIDAY, recurrence_end=end)

        with pytest.raises(RecurrenceEnded) as exc:
            generate_next(task, NOW)

        assert exc.value.ended_at == end

    def test_recurrence_end_is_inclusive(self, make_task):
        task = make_task(recurrence="DAILY", due_date=FRIDAY, recurrence_end=NOW)

        record = generate_next(task, NOW)

        assert record.due_date == datetime(2024, 6, 15, 17, 30)

    @pytest.mark.parametrize("recurrence", [r for r in Recurrence if r != Recurrence.NONE])
    def test_no_end_never_ends(self, make_task, recurrence):
        task = make_task(recurrence=recurrence, due_date=FRIDAY)

        record = generate_next(task, datetime(2099, 1, 1))

        assert record.due_date > FRIDAY

    def test_daily_from_friday_is_saturday(self, make_task):
        record = generate_next(make_task(recurrence="DAILY", due_date=FRIDAY), NOW)

        assert record.due_date.weekday() == 5

    def test_weekdays_from_friday_is_monday(self, make_task):
        record = generate_next(make_task(recurrence="WEEKDAYS", due_date=FRIDAY), NOW)

        assert record.due_date == datetime(2024, 6, 17, 17, 30)

    def test_monthly_from_jan_31(self, make_task):
        task = make_task(recurrence="MONTHLY", due_date=datetime(2023, 1, 31, 10, 0))

        assert generate_next(task, NOW).due_date == datetime(2023, 2, 28, 10, 0)

    def test_without_due_date_uses_now(self, make_task):
        task = make_task(recurrence="WEEKLY")

        record = generate_next(task, NOW)

        assert record.due_date == NOW + timedelta(weeks=1)
        assert record.reminder_time is None

    def test_reminder_without_due_date_is_dropped(self, make_task):
        task = make_task(recurrence="DAILY", reminder_time=datetime(2024, 6, 12, 7, 0))

        assert generate_next(task, NOW).reminder_time is None

    def test_reminder_offset_is_preserved(self, make_task):
        task = make_task(
            recurrence="WEEKDAYS",
            due_date=FRIDAY,
            reminder_time=FRIDAY - timedelta(minutes=30),
        )

        record = generate_next(task, NOW)

        assert record.due_date - record.reminder_time == timedelta(minutes=30)
        assert record.reminder_time == datetime(2024, 6, 17, 17, 0)

    def test_reminder_after_due_date_is_kept_as_is(self, make_task):
        task = make_task(
            recurrence="DAILY",
            due_date=FRIDAY,
            reminder_time=FRIDAY + timedelta(hours=1),
        )

        record = generate_next(task, NOW)

        assert record.reminder_time - record.due_date == timedelta(hours=1)

    def test_clock_time_is_preserved(self, make_task):
        due = datetime(2024, 1, 31, 23, 45, 10)
        task = make_task(recurrence="MONTHLY", due_date=due)

        record = generate_next(task, NOW)

        assert (record.due_date.hour, record.due_date.minute) == (23, 45)
        assert record.due_date.date() == datetime(2024, 2, 29).date()

    def test_fields_are_copied(self, make_task):
        task = make_task(
            title="Standup",
            description="Daily sync",
            priority="HIGH",
            recurrence="CUSTOM",
            recurrence_end=datetime(2025, 1, 1),
            estimated_minutes=15,
            tags=["team", "sync"],
            category="Work",
            due_date=FRIDAY,
            completed=True,
        )

        record = generate_next(task, NOW)

        assert record.title == "Standup"
        assert record.user_id == task.user_id
        assert record.description == "Daily sync"
        assert record.priority == task.priority
        assert record.recurrence is Recurrence.CUSTOM
        assert record.recurrence_end == datetime(2025, 1, 1)
        assert record.estimated_minutes == 15
        assert record.tags == ["team", "sync"]
        assert record.category == "Work"
        assert record.completed is False

    def test_source_task_is_not_mutated(self, make_task):
        task = make_task(recurrence="DAILY", due_date=FRIDAY, tags=["a"])
        before = task.to_dict()

        record = generate_next(task, NOW)
        record.tags.append("b")

        assert task.to_dict() == before
