"""SQLAlchemy database models for sherpa."""

from datetime import datetime
from typing import Type, TypeVar, Union
import uuid
from sqlalchemy import Column, String, Boolean, Date, DateTime, JSON, ForeignKey, UniqueConstraint

from sherpa.database.database import Base
from sherpa.models.instance import CompletionState
from sherpa.models.item import ItemKind

T = TypeVar('T')


def enum_to_value(enum_obj: Union[str, T]) -> str:
    """Column value for an `ItemKind`/`CompletionState`.

    Models built with `use_enum_values` already hold the plain string.
    """
    if hasattr(enum_obj, 'value'):
        return enum_obj.value
    return str(enum_obj)


def value_to_enum(value: str, enum_class: Type[T], default: T) -> T:
    """Read a stored kind/status column back into its enum.

    Rows written by older builds or by hand may hold mixed-case or unknown
    values; those load as `default` (a task kind, a pending status) so one bad
    row cannot break listing or materialization.
    """
    if not value:
        return default
    try:
        return enum_class(value.lower())
    except (ValueError, AttributeError):
        return default


class ScheduleItemDB(Base):
    """Database model for a habit or task."""

    __tablename__ = "schedule_items"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    kind = Column(String, nullable=False, index=True)

    title = Column(String, nullable=False)
    detail = Column(String, nullable=True)
    is_archived = Column(Boolean, nullable=False, default=False, index=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Tasks only: one-shot due day used when there is no rule
    due_date = Column(Date, nullable=True)

    # RecurrenceRule serialized with model_dump(mode="json")
    recurrence_rule = Column(JSON, nullable=True)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from sherpa.models.item import ScheduleItem
        from sherpa.models.recurrence import RecurrenceRule

        rule = RecurrenceRule.model_validate(self.recurrence_rule) if self.recurrence_rule else None
        return ScheduleItem(
            id=self.id,
            kind=value_to_enum(self.kind, ItemKind, ItemKind.TASK),
            title=self.title,
            detail=self.detail,
            is_archived=bool(self.is_archived),
            created_at=self.created_at,
            updated_at=self.updated_at,
            due_date=self.due_date,
            recurrence_rule=rule,
        )

    @classmethod
    def from_pydantic(cls, item):
        """Create database model from Pydantic model."""
        return cls(
            id=item.id,
            kind=enum_to_value(item.kind),
            title=item.title,
            detail=item.detail,
            is_archived=item.is_archived,
            created_at=item.created_at,
            updated_at=item.updated_at,
            due_date=item.due_date,
            recurrence_rule=item.recurrence_rule.model_dump(mode="json") if item.recurrence_rule else None,
        )


class InstanceDB(Base):
    """Database model for a materialized occurrence."""

    __tablename__ = "instances"
    __table_args__ = (
        # At most one instance per item and day, whatever the writer.
        UniqueConstraint("item_id", "date", name="uq_instance_item_date"),
    )

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    item_id = Column(String, ForeignKey("schedule_items.id", ondelete="CASCADE"), nullable=False, index=True)
    item_kind = Column(String, nullable=False)

    date = Column(Date, nullable=False, index=True)
    status = Column(String, nullable=False, default=CompletionState.PENDING.value)
    note = Column(String, nullable=True)
    completed_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from sherpa.models.instance import Instance

        return Instance(
            id=self.id,
            item_id=self.item_id,
            item_kind=value_to_enum(self.item_kind, ItemKind, ItemKind.TASK),
            date=self.date,
            status=value_to_enum(self.status, CompletionState, CompletionState.PENDING),
            note=self.note,
            completed_at=self.completed_at,
            created_at=self.created_at,
        )

    @classmethod
    def from_pydantic(cls, instance):
        """Create database model from Pydantic model."""
        return cls(
            id=instance.id,
            item_id=instance.item_id,
            item_kind=enum_to_value(instance.item_kind),
            date=instance.date,
            status=enum_to_value(instance.status),
            note=instance.note,
            completed_at=instance.completed_at,
            created_at=instance.created_at,
        )
