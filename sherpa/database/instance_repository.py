"""Repository for Instance database operations."""

import logging
from datetime import date
from typing import Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from sherpa.database.models import InstanceDB, enum_to_value
from sherpa.models.instance import CompletionState, Instance

logger = logging.getLogger(__name__)


class InstanceRepository:
    """Repository for materialized instances."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, instance_id: str) -> Optional[Instance]:
        row = self.db.query(InstanceDB).filter(InstanceDB.id == instance_id).first()
        return row.to_pydantic() if row else None

    def fetch_instances(
        self,
        item_id: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> List[Instance]:
        """Instances of one item, optionally limited to [start, end], ascending by date."""
        query = self.db.query(InstanceDB).filter(InstanceDB.item_id == item_id)
        if start is not None:
            query = query.filter(InstanceDB.date >= start)
        if end is not None:
            query = query.filter(InstanceDB.date <= end)
        return [row.to_pydantic() for row in query.order_by(InstanceDB.date.asc()).all()]

    def fetch_by_items(self, item_ids: Iterable[str]) -> Dict[str, List[Instance]]:
        """All instances for the given items, grouped by item id."""
        ids = list(item_ids)
        grouped: Dict[str, List[Instance]] = {item_id: [] for item_id in ids}
        if not ids:
            return grouped
        rows = (
            self.db.query(InstanceDB)
            .filter(InstanceDB.item_id.in_(ids))
            .order_by(InstanceDB.date.asc())
            .all()
        )
        for row in rows:
            grouped[row.item_id].append(row.to_pydantic())
        return grouped

    def list_in_range(self, start: date, end: date) -> List[Instance]:
        """Instances of every item scheduled within [start, end]."""
        rows = (
            self.db.query(InstanceDB)
            .filter(InstanceDB.date >= start, InstanceDB.date <= end)
            .order_by(InstanceDB.date.asc(), InstanceDB.created_at.asc())
            .all()
        )
        return [row.to_pydantic() for row in rows]

    def add_all(self, instances: List[Instance]) -> int:
        """Insert instances in a single transaction. No commit when the list is empty."""
        if not instances:
            return 0
        try:
            self.db.add_all([InstanceDB.from_pydantic(i) for i in instances])
            self.db.commit()
            logger.debug(f"Inserted {len(instances)} instances")
            return len(instances)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to insert {len(instances)} instances: {type(e).__name__}: {str(e)}")
            raise

    def update_status(self, instance_id: str, status: CompletionState, note: Optional[str] = None) -> Instance:
        """Move an instance to `status`; completed_at and note follow the status."""
        row = self.db.query(InstanceDB).filter(InstanceDB.id == instance_id).first()
        if not row:
            raise ValueError(f"Instance {instance_id} not found")

        updated = row.to_pydantic().with_status(status, note)
        row.status = enum_to_value(updated.status)
        row.note = updated.note
        row.completed_at = updated.completed_at

        try:
            self.db.commit()
            self.db.refresh(row)
            logger.debug(f"Updated instance {instance_id} to {row.status}")
            return row.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to update instance {instance_id}: {type(e).__name__}: {str(e)}")
            raise
