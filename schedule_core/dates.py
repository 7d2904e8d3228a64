"""Calendar date helpers.

Dates travel through the planner as ``"YYYY-MM-DD"`` strings. They are plain
calendar dates with no time zone, so all arithmetic goes through
``datetime.date``.
"""
from __future__ import annotations

import calendar
import typing as t
from datetime import date, timedelta

from schedule_core.constants import WEEKDAYS

DATE_FORMAT = "%Y-%m-%d"

DateLike = t.Union[str, date]


def to_date(value: DateLike) -> date:
    """Parse a ``YYYY-MM-DD`` string (or pass a ``date`` through).

    :param value: Date string or date object.
    :return: The corresponding ``date``.
    :raises ValueError: If the string is not a valid ISO calendar date.
    """
    if isinstance(value, date):
        return value
    return date.fromisoformat(value.strip())


def to_date_string(value: DateLike) -> str:
    """Normalize a date or date string to ``YYYY-MM-DD``."""
    return to_date(value).strftime(DATE_FORMAT)


def weekday_of(value: DateLike) -> int:
    """Return the weekday of a date with 0 = Sunday through 6 = Saturday.

    ``date.weekday()`` counts from Monday, so it is shifted by one.
    """
    return (to_date(value).weekday() + 1) % 7


def get_today() -> str:
    """Today's local date as ``YYYY-MM-DD``."""
    return date.today().strftime(DATE_FORMAT)


def is_today(value: DateLike) -> bool:
    return to_date_string(value) == get_today()


def add_days(value: DateLike, days: int) -> str:
    """Shift a date by a number of days (negative moves backwards)."""
    return (to_date(value) + timedelta(days=days)).strftime(DATE_FORMAT)


def get_date_range(start: DateLike, end: DateLike) -> list[str]:
    """Enumerate every date from start to end, both inclusive.

    An end before the start yields an empty list.
    """
    first = to_date(start)
    last = to_date(end)
    span = (last - first).days
    return [(first + timedelta(days=offset)).strftime(DATE_FORMAT) for offset in range(span + 1)]


def get_week_dates(value: DateLike, week_start: str = "monday") -> list[str]:
    """Return the seven dates of the week containing ``value``.

    :param value: Any date inside the week.
    :param week_start: ``"monday"`` or ``"sunday"``.
    :return: Seven ``YYYY-MM-DD`` strings starting on the configured day.
    """
    current = to_date(value)
    start_weekday = 1 if week_start == "monday" else 0
    offset = (weekday_of(current) - start_weekday) % 7
    first = current - timedelta(days=offset)
    return [(first + timedelta(days=i)).strftime(DATE_FORMAT) for i in range(7)]


def get_first_day_of_month(year: int, month: int) -> str:
    return date(year, month, 1).strftime(DATE_FORMAT)


def get_last_day_of_month(year: int, month: int) -> str:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, last_day).strftime(DATE_FORMAT)


def get_month_dates(year: int, month: int) -> list[str]:
    """All dates of a calendar month in order."""
    return get_date_range(get_first_day_of_month(year, month), get_last_day_of_month(year, month))


def get_year_month(value: DateLike) -> tuple[int, int]:
    """Return ``(year, month)`` for a date; month is 1-based."""
    current = to_date(value)
    return current.year, current.month


def format_date_display(value: DateLike) -> str:
    """Format a date for headings, e.g. ``"Monday, March 4"``."""
    current = to_date(value)
    return f"{WEEKDAYS[weekday_of(current)]}, {current.strftime('%B')} {current.day}"
