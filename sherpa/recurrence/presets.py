"""Repeat presets: user-facing repeat choices turned into recurrence rules.

Users pick a repeat pattern (none/daily/weekly/monthly) and an end (never, on a
date, after N times); `build_recurrence_rule` converts that pair into the stored
`RecurrenceRule`.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from sherpa.models.constants import MAX_DAY_OF_MONTH
from sherpa.models.recurrence import RecurrenceFrequency, RecurrenceRule, Weekday
from sherpa.recurrence.calendar_math import DateLike, days_in_month, start_of_day, weekday_index

_WORKWEEK = [Weekday.MONDAY, Weekday.TUESDAY, Weekday.WEDNESDAY, Weekday.THURSDAY, Weekday.FRIDAY]


class RepeatKind(str, Enum):
    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class RepeatEndKind(str, Enum):
    NEVER = "never"
    ON_DATE = "on_date"
    AFTER_OCCURRENCES = "after_occurrences"


class RepeatPattern(BaseModel):
    """How often an item repeats."""

    kind: RepeatKind = Field(RepeatKind.NONE, description="Repeat unit, or none for a one-off")
    interval: int = Field(1, description="Every N units")
    weekdays: List[Weekday] = Field(default_factory=list, description="Weekly: chosen weekdays")
    day: Optional[int] = Field(None, description="Monthly: desired day of month")

    @field_validator("interval", mode="before")
    @classmethod
    def _clamp_interval(cls, v):
        return max(1, int(v or 1))


class RepeatEnd(BaseModel):
    """When a repeating item stops."""

    kind: RepeatEndKind = Field(RepeatEndKind.NEVER)
    on_date: Optional[date] = None
    count: Optional[int] = None

    def end_date(self, start_date: DateLike) -> Optional[date]:
        if self.kind != RepeatEndKind.ON_DATE or self.on_date is None:
            return None
        return max(start_of_day(self.on_date), start_of_day(start_date))

    def occurrence_limit(self) -> Optional[int]:
        if self.kind != RepeatEndKind.AFTER_OCCURRENCES:
            return None
        return max(1, int(self.count or 1))

    def summary(self) -> str:
        if self.kind == RepeatEndKind.ON_DATE and self.on_date is not None:
            d = self.on_date
            return f"On {d:%b} {d.day}, {d.year}"
        if self.kind == RepeatEndKind.AFTER_OCCURRENCES:
            count = self.occurrence_limit()
            return f"After {count} time{'' if count == 1 else 's'}"
        return "Never"


def _sanitize_weekdays(weekdays: List[Weekday], start_date: date) -> List[int]:
    # No weekday picked: repeat on the start day's weekday.
    if not weekdays:
        return [weekday_index(start_date)]
    return sorted({int(d) for d in weekdays})


def _clamp_day(day: Optional[int], fallback: int) -> int:
    return min(max(1, int(day if day is not None else fallback)), MAX_DAY_OF_MONTH)


def first_monthly_occurrence(start_date: DateLike, desired_day: int) -> date:
    """First day on or after `start_date` that falls on `desired_day` (clamped to month length)."""
    start = start_of_day(start_date)
    day = _clamp_day(desired_day, start.day)
    same_month = start.replace(day=min(day, days_in_month(start.year, start.month)))
    if same_month >= start:
        return same_month
    year, month = (start.year + 1, 1) if start.month == 12 else (start.year, start.month + 1)
    return date(year, month, min(day, days_in_month(year, month)))


def build_recurrence_rule(pattern: RepeatPattern, end: Optional[RepeatEnd], start_date: DateLike) -> RecurrenceRule:
    """Convert a repeat pattern and end into a stored rule anchored at `start_date`."""
    start = start_of_day(start_date)
    end = end or RepeatEnd()

    if pattern.kind == RepeatKind.NONE:
        return RecurrenceRule(frequency=RecurrenceFrequency.ONCE, interval=1, start_date=start)

    common = {
        "interval": pattern.interval,
        "end_date": end.end_date(start),
        "occurrence_limit": end.occurrence_limit(),
    }
    if pattern.kind == RepeatKind.DAILY:
        return RecurrenceRule(frequency=RecurrenceFrequency.DAILY, start_date=start, **common)
    if pattern.kind == RepeatKind.WEEKLY:
        return RecurrenceRule(
            frequency=RecurrenceFrequency.WEEKLY,
            start_date=start,
            weekdays=_sanitize_weekdays(pattern.weekdays, start),
            **common,
        )
    target_day = _clamp_day(pattern.day, start.day)
    return RecurrenceRule(
        frequency=RecurrenceFrequency.MONTHLY,
        start_date=first_monthly_occurrence(start, target_day),
        day_of_month_override=target_day,
        **common,
    )


def _ordinal_suffix(value: int) -> str:
    if (value // 10) % 10 == 1:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(value % 10, "th")


def summarize(pattern: RepeatPattern) -> str:
    """Short human description of a repeat pattern."""
    n = pattern.interval
    if pattern.kind == RepeatKind.DAILY:
        return "Every day" if n == 1 else f"Every {n} days"
    if pattern.kind == RepeatKind.WEEKLY:
        days = sorted({Weekday(d) for d in pattern.weekdays}, key=int)
        if not days:
            return "Every week" if n == 1 else f"Every {n} weeks"
        if days == _WORKWEEK:
            return "Weekdays" if n == 1 else f"Weekdays every {n} weeks"
        if len(days) == 1:
            return f"Every {days[0].long_name}" if n == 1 else f"Every {n} weeks on {days[0].long_name}"
        labels = ", ".join(d.short_symbol for d in days)
        return f"Weekly on {labels}" if n == 1 else f"Every {n} weeks ({labels})"
    if pattern.kind == RepeatKind.MONTHLY:
        day = pattern.day if pattern.day is not None else 1
        suffix = _ordinal_suffix(day)
        return f"Monthly on the {day}{suffix}" if n == 1 else f"Every {n} months on the {day}{suffix}"
    return "Does not repeat"
