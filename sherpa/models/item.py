"""Schedulable item model (habits and tasks) for sherpa."""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from sherpa.models.recurrence import RecurrenceRule


class ItemKind(str, Enum):
    """Kind of schedulable item."""
    HABIT = "habit"
    TASK = "task"


class ScheduleItem(BaseModel):
    """A habit or task that the materializer expands into dated instances.

    Habits always carry a recurrence rule. Tasks may carry a rule, a one-shot
    due date, or neither (an unscheduled task never gets instances).
    """

    id: str = Field(..., description="Unique item identifier (UUID v4)")
    kind: ItemKind = Field(..., description="habit or task")
    title: str = Field(..., description="Display title")
    detail: Optional[str] = Field(None, description="Free-form description")
    is_archived: bool = Field(False, description="Archived items are never materialized")
    created_at: datetime = Field(..., description="Creation timestamp; fixes materialization order")
    updated_at: datetime = Field(..., description="Last update timestamp")
    due_date: Optional[date] = Field(None, description="Tasks only: one-shot due day when no rule is set")
    recurrence_rule: Optional[RecurrenceRule] = Field(None, description="Rule deciding due days")

    @field_validator("due_date", mode="before")
    @classmethod
    def _normalize_due_date(cls, v):
        if isinstance(v, datetime):
            return v.date()
        return v

    @model_validator(mode="after")
    def _habit_requires_rule(self):
        if self.kind == ItemKind.HABIT and self.recurrence_rule is None:
            raise ValueError("habits require a recurrence rule")
        return self

    @property
    def is_habit(self) -> bool:
        return self.kind == ItemKind.HABIT

    @property
    def occurrence_limit(self) -> Optional[int]:
        return self.recurrence_rule.occurrence_limit if self.recurrence_rule else None

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
