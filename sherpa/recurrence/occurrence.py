"""Occurrence predicate: is a recurrence rule due on a given calendar day."""

from __future__ import annotations

from sherpa.models.recurrence import RecurrenceFrequency, RecurrenceRule
from sherpa.recurrence.calendar_math import (
    DateLike,
    days_between,
    days_in_month,
    months_between,
    start_of_day,
    weekday_index,
    weeks_between,
)


def occurs(rule: RecurrenceRule, day: DateLike) -> bool:
    """Return True if `rule` yields an occurrence on `day`.

    Pure and total: days before the anchor or after the end date are simply not due.
    Occurrence limits are not considered here; they depend on how many instances
    already exist and are applied by the materializer.
    """
    day = start_of_day(day)
    if day < rule.start_date:
        return False
    if rule.end_date is not None and day > rule.end_date:
        return False

    interval = max(1, rule.interval)

    if rule.frequency == RecurrenceFrequency.ONCE:
        return day == rule.start_date

    if rule.frequency == RecurrenceFrequency.DAILY:
        return days_between(rule.start_date, day) % interval == 0

    if rule.frequency == RecurrenceFrequency.WEEKLY:
        if weeks_between(rule.start_date, day) % interval != 0:
            return False
        if rule.weekdays:
            return weekday_index(day) in rule.weekdays
        return True

    if rule.frequency == RecurrenceFrequency.MONTHLY:
        if months_between(rule.start_date, day) % interval != 0:
            return False
        # Target days past the end of a short month land on its last day.
        return day.day == min(rule.target_day_of_month, days_in_month(day.year, day.month))

    return False
