"""Calendar-day arithmetic used by recurrence evaluation and materialization.

All helpers work on local calendar days (`datetime.date`). Datetimes are truncated
to their date first, so differences are whole-day counts and never elapsed-seconds
divisions.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import List, Tuple, Union

DateLike = Union[date, datetime]


def start_of_day(value: DateLike) -> date:
    """Normalize a date or datetime to its calendar day."""
    if isinstance(value, datetime):
        return value.date()
    return value


def add_days(day: DateLike, days: int) -> date:
    return start_of_day(day) + timedelta(days=days)


def days_between(start: DateLike, end: DateLike) -> int:
    """Whole calendar days from `start` to `end` (negative when end is earlier)."""
    return (start_of_day(end) - start_of_day(start)).days


def weeks_between(start: DateLike, end: DateLike) -> int:
    """Whole 7-day weeks elapsed from `start` to `end`.

    Derived from the day difference rather than week-of-year numbers, so a span
    across New Year counts the same as any other span.
    """
    return days_between(start, end) // 7


def months_between(start: DateLike, end: DateLike) -> int:
    """Calendar-month difference (day of month ignored)."""
    s = start_of_day(start)
    e = start_of_day(end)
    return (e.year - s.year) * 12 + (e.month - s.month)


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def weekday_index(day: DateLike) -> int:
    """Weekday index with Sunday=1 ... Saturday=7."""
    # Python weekday: Monday=0 ... Sunday=6
    return (start_of_day(day).weekday() + 1) % 7 + 1


def schedule_days(start: DateLike, end: DateLike) -> List[date]:
    """Inclusive, ascending list of days from `start` to `end` (empty if end < start)."""
    cur = start_of_day(start)
    last = start_of_day(end)
    out: List[date] = []
    while cur <= last:
        out.append(cur)
        cur = cur + timedelta(days=1)
    return out


def visible_window(center: DateLike, span_days: int) -> Tuple[date, date]:
    """Window of `span_days` on each side of `center`."""
    span = max(0, int(span_days))
    return (add_days(center, -span), add_days(center, span))
