"""Data models for sherpa."""

from sherpa.models.recurrence import RecurrenceFrequency, RecurrenceRule, Weekday
from sherpa.models.item import ItemKind, ScheduleItem
from sherpa.models.instance import CompletionState, Instance

__all__ = [
    "RecurrenceFrequency",
    "RecurrenceRule",
    "Weekday",
    "ItemKind",
    "ScheduleItem",
    "CompletionState",
    "Instance",
]
