"""
Calendar arithmetic for recurrence and analytics windows.

All helpers keep the tzinfo of their input and never convert between zones.
"""

import calendar
from datetime import datetime, timedelta

# Window ends are reported with millisecond precision.
END_OF_DAY = dict(hour=23, minute=59, second=59, microsecond=999000)

SATURDAY = 5


def add_months(moment: datetime, months: int) -> datetime:
    """
    Shift by whole calendar months.

    The day of month is kept; if the target month is shorter it is clamped
    to that month's last day (Jan 31 + 1 month -> Feb 28/29).
    """
    index = moment.month - 1 + months
    year = moment.year + index // 12
    month = index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def add_years(moment: datetime, years: int) -> datetime:
    """Shift by whole calendar years. Feb 29 clamps to Feb 28 in non-leap years."""
    return add_months(moment, 12 * years)


def is_weekend(moment: datetime) -> bool:
    return moment.weekday() >= SATURDAY


def skip_weekend(moment: datetime) -> datetime:
    """Move a Saturday or Sunday two days on. Saturday lands on Monday, Sunday on Tuesday."""
    if is_weekend(moment):
        return moment + timedelta(days=2)
    return moment


def start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(moment: datetime) -> datetime:
    return moment.replace(**END_OF_DAY)


def start_of_week(moment: datetime) -> datetime:
    """Monday 00:00 of the week containing `moment`."""
    return start_of_day(moment - timedelta(days=moment.weekday()))


def end_of_week(moment: datetime) -> datetime:
    """Sunday 23:59:59.999 of the week containing `moment`."""
    return end_of_day(moment + timedelta(days=6 - moment.weekday()))


def start_of_month(moment: datetime) -> datetime:
    return start_of_day(moment.replace(day=1))


def end_of_month(moment: datetime) -> datetime:
    last_day = calendar.monthrange(moment.year, moment.month)[1]
    return end_of_day(moment.replace(day=last_day))
