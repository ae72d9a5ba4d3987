"""Item and instance creation factory for sherpa.

Centralizes id/timestamp defaults so the API, the materializer and tests build
models the same way.
"""

import uuid
from datetime import date, datetime
from typing import Optional

from sherpa.models.instance import CompletionState, Instance
from sherpa.models.item import ItemKind, ScheduleItem
from sherpa.models.recurrence import RecurrenceRule


def create_habit(
    title: str,
    recurrence_rule: RecurrenceRule,
    detail: Optional[str] = None,
    created_at: Optional[datetime] = None,
    is_archived: bool = False,
) -> ScheduleItem:
    """Create a habit; habits always carry a rule."""
    now = created_at or datetime.utcnow()
    return ScheduleItem(
        id=str(uuid.uuid4()),
        kind=ItemKind.HABIT,
        title=title,
        detail=detail,
        is_archived=is_archived,
        created_at=now,
        updated_at=now,
        due_date=None,
        recurrence_rule=recurrence_rule,
    )


def create_task(
    title: str,
    detail: Optional[str] = None,
    due_date: Optional[date] = None,
    recurrence_rule: Optional[RecurrenceRule] = None,
    created_at: Optional[datetime] = None,
    is_archived: bool = False,
) -> ScheduleItem:
    """Create a task with an optional rule and/or due date."""
    now = created_at or datetime.utcnow()
    return ScheduleItem(
        id=str(uuid.uuid4()),
        kind=ItemKind.TASK,
        title=title,
        detail=detail,
        is_archived=is_archived,
        created_at=now,
        updated_at=now,
        due_date=due_date,
        recurrence_rule=recurrence_rule,
    )


def create_pending_instance(item: ScheduleItem, day: date) -> Instance:
    """Create a pending instance of `item` on `day`."""
    return Instance(
        id=str(uuid.uuid4()),
        item_id=item.id,
        item_kind=item.kind,
        date=day,
        status=CompletionState.PENDING,
        note=None,
        completed_at=None,
        created_at=datetime.utcnow(),
    )
