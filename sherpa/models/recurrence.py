"""Recurrence rule model for sherpa.

A rule is owned by a habit or task and stored as JSON on the item row. Construction
never fails on out-of-range numbers: interval, day-of-month and occurrence limit are
clamped into range, and weekday lists are cleaned up, so evaluating a stored rule
cannot raise. An end date earlier than the start date is kept as stored; such a rule
never occurs.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from sherpa.models.constants import MAX_DAY_OF_MONTH, MIN_INTERVAL


class RecurrenceFrequency(str, Enum):
    ONCE = "once"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @property
    def is_repeating(self) -> bool:
        return self != RecurrenceFrequency.ONCE


class Weekday(int, Enum):
    """Day of week using Sunday=1 ... Saturday=7 indices."""

    SUNDAY = 1
    MONDAY = 2
    TUESDAY = 3
    WEDNESDAY = 4
    THURSDAY = 5
    FRIDAY = 6
    SATURDAY = 7

    @property
    def short_symbol(self) -> str:
        return self.name[:2].title()

    @property
    def long_name(self) -> str:
        return self.name.title()


def _as_date(v):
    if isinstance(v, datetime):
        return v.date()
    return v


class RecurrenceRule(BaseModel):
    """Describes on which calendar days an item is due."""

    frequency: RecurrenceFrequency = Field(RecurrenceFrequency.DAILY, description="Repeat unit")
    interval: int = Field(1, description="Every N units (days/weeks/months); clamped to >= 1")
    start_date: date = Field(..., description="Anchor day; occurrences never precede it")
    weekdays: List[int] = Field(
        default_factory=list,
        description="Weekly only: weekday indices (Sunday=1). Empty means every day of a matching week",
    )
    day_of_month_override: Optional[int] = Field(
        None, description="Monthly only: target day of month (1-31); defaults to start_date's day"
    )
    end_date: Optional[date] = Field(None, description="Inclusive last day on which the rule may occur")
    occurrence_limit: Optional[int] = Field(
        None, description="Total instances the rule may ever produce (enforced by the materializer)"
    )

    @field_validator("interval", mode="before")
    @classmethod
    def _clamp_interval(cls, v):
        if v is None:
            return MIN_INTERVAL
        return max(MIN_INTERVAL, int(v))

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _normalize_day(cls, v):
        return _as_date(v)

    @field_validator("weekdays", mode="before")
    @classmethod
    def _clean_weekdays(cls, v):
        if not v:
            return []
        return sorted({int(d) for d in v if 1 <= int(d) <= 7})

    @field_validator("day_of_month_override", mode="before")
    @classmethod
    def _clamp_day_of_month(cls, v):
        if v is None:
            return None
        return min(max(1, int(v)), MAX_DAY_OF_MONTH)

    @field_validator("occurrence_limit", mode="before")
    @classmethod
    def _clamp_occurrence_limit(cls, v):
        if v is None:
            return None
        return max(1, int(v))

    @property
    def target_day_of_month(self) -> int:
        return self.day_of_month_override or self.start_date.day

    def occurs(self, day) -> bool:
        from sherpa.recurrence.occurrence import occurs

        return occurs(self, day)
