"""Materialize habits and tasks into concrete dated instances."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Set

from sqlalchemy.orm import Session

from sherpa.database.instance_repository import InstanceRepository
from sherpa.database.item_repository import ScheduleItemRepository
from sherpa.models.instance import Instance
from sherpa.models.item import ScheduleItem
from sherpa.models.item_factory import create_pending_instance
from sherpa.recurrence.calendar_math import DateLike, schedule_days, start_of_day
from sherpa.recurrence.occurrence import occurs

logger = logging.getLogger(__name__)


def _remaining_occurrences(item: ScheduleItem, existing_count: int) -> Optional[int]:
    limit = item.occurrence_limit
    if limit is None:
        return None
    return max(0, limit - existing_count)


def _is_due(item: ScheduleItem, day) -> bool:
    if item.recurrence_rule is not None:
        return occurs(item.recurrence_rule, day)
    if item.due_date is not None:
        return item.due_date == day
    return False


def ensure_schedule(
    items: Iterable[ScheduleItem],
    existing_instances_by_item: Mapping[str, Iterable[Instance]],
    start: DateLike,
    end: DateLike,
) -> List[Instance]:
    """Return the instances missing for `items` within [start, end].

    Pure: nothing is persisted. Each (item, day) pair appears at most once across
    `existing_instances_by_item` plus the result. Existing instances count toward
    an item's occurrence limit whatever their status; the remaining budget is spent
    on the earliest due days. An end before start yields no instances.
    """
    days = schedule_days(start_of_day(start), start_of_day(end))
    if not days:
        return []

    created: List[Instance] = []
    for item in items:
        if item.is_archived:
            continue

        existing = list(existing_instances_by_item.get(item.id, ()))
        scheduled: Set = {start_of_day(i.date) for i in existing}
        remaining = _remaining_occurrences(item, len(existing))

        for day in days:
            if remaining is not None and remaining <= 0:
                break
            if day in scheduled or not _is_due(item, day):
                continue
            created.append(create_pending_instance(item, day))
            scheduled.add(day)
            if remaining is not None:
                remaining -= 1

    return created


def materialize_schedule(db: Session, start: DateLike, end: DateLike) -> int:
    """Create missing instances for all active items within [start, end] and commit once.

    Existing instances are read from the store on every call. Returns the number of
    instances created. Persistence errors are rolled back and re-raised.
    """
    start_day = start_of_day(start)
    end_day = start_of_day(end)
    if end_day < start_day:
        return 0

    item_repo = ScheduleItemRepository(db)
    instance_repo = InstanceRepository(db)

    items = item_repo.list_active()
    existing: Dict[str, List[Instance]] = instance_repo.fetch_by_items(item.id for item in items)

    new_instances = ensure_schedule(items, existing, start_day, end_day)
    created = instance_repo.add_all(new_instances)
    if created:
        logger.info(f"Materialized {created} instances for {start_day.isoformat()}..{end_day.isoformat()}")
    return created
