"""
Temporal utilities: ISO weeks, date windows and rounding.

Timestamps are ISO-8601 strings.  The calendar date of a timestamp is its
written date component; no timezone conversion is applied, so
``2024-01-07T23:30:00+02:00`` is always January 7.
"""

import math
from calendar import monthrange
from datetime import date, datetime, timedelta
from typing import Iterable, TypeVar

from .models import DAY_TYPES, Workout

DateLike = str | date | datetime

W = TypeVar("W", bound=Workout)


def round_half_up(x: float) -> int:
    """
    Round to the nearest integer, halves away from negative infinity.

    Python's round() uses banker's rounding (round(2.5) == 2); every
    rounded figure in lift-log uses this function instead.
    """
    return math.floor(x + 0.5)


def round_to_increment(value: float, increment: float) -> float:
    """
    Round value to the nearest multiple of increment (e.g. 2.5 kg plates).

    Args:
        value: Value to round
        increment: Step size; values <= 0 leave the input unchanged

    Returns:
        Nearest multiple of increment, halves rounded up
    """
    if increment <= 0:
        return value
    return round_half_up(value / increment) * increment


def parse_timestamp(value: DateLike) -> datetime:
    """
    Parse an ISO date or datetime into a naive datetime.

    Accepts ``YYYY-MM-DD``, ``YYYY-MM-DDTHH:MM[:SS]`` with an optional
    trailing ``Z`` or UTC offset.  The offset is dropped, not applied.

    Raises:
        ValueError: If the string is not ISO-8601
    """
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1]
    return datetime.fromisoformat(text).replace(tzinfo=None)


def to_date(value: DateLike) -> date:
    """Return the calendar date of a timestamp."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_timestamp(value).date()


def date_key(value: DateLike) -> str:
    """Return the ``YYYY-MM-DD`` key of a timestamp."""
    return to_date(value).isoformat()


def iso_week(value: DateLike) -> int:
    """ISO-8601 week number (week 1 contains the year's first Thursday)."""
    return to_date(value).isocalendar()[1]


def iso_week_year(value: DateLike) -> int:
    """ISO-8601 week-numbering year; differs from the calendar year near Jan 1."""
    return to_date(value).isocalendar()[0]


def iso_week_key(value: DateLike) -> tuple[int, int]:
    """Sortable ``(iso_week_year, iso_week)`` bucket of a timestamp."""
    iso = to_date(value).isocalendar()
    return iso[0], iso[1]


def week_key(value: DateLike) -> str:
    """Weekly aggregation key, e.g. ``"2024-1"``."""
    year, week = iso_week_key(value)
    return f"{year}-{week}"


def day_type_for(value: DateLike) -> str:
    """Weekday tag (``monday`` … ``sunday``) of a timestamp."""
    return DAY_TYPES[to_date(value).weekday()]


def months_ago(now: DateLike, months: int) -> date:
    """
    Subtract calendar months, clamping the day to the target month's length.

    months_ago(2024-05-31, 3) == 2024-02-29
    """
    d = to_date(now)
    index = d.year * 12 + (d.month - 1) - months
    year, month = divmod(index, 12)
    month += 1
    day = min(d.day, monthrange(year, month)[1])
    return date(year, month, day)


def window_start(months: int, now: DateLike | None = None) -> date | None:
    """
    First day of a trailing window of ``months`` calendar months.

    Returns:
        Start date, or None when months <= 0 (all history)
    """
    if months <= 0:
        return None
    return months_ago(now if now is not None else datetime.now(), months)


def in_window(value: DateLike, months: int, now: DateLike | None = None) -> bool:
    """True when the timestamp falls on or after the window start."""
    start = window_start(months, now)
    return start is None or to_date(value) >= start


def filter_window(
    workouts: Iterable[W],
    months: int,
    now: DateLike | None = None,
) -> list[W]:
    """Workouts dated inside the trailing window (all of them when months == 0)."""
    start = window_start(months, now)
    return [w for w in workouts if start is None or to_date(w.date) >= start]


def monday_of(value: DateLike) -> date:
    """The Monday starting the ISO week of a timestamp."""
    d = to_date(value)
    return d - timedelta(days=d.weekday())


def sort_by_date(workouts: Iterable[W], newest_first: bool = False) -> list[W]:
    """Stable chronological sort by parsed timestamp."""
    return sorted(workouts, key=lambda w: parse_timestamp(w.date), reverse=newest_first)
