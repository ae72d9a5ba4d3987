"""Repository for habit/task database operations."""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from sherpa.database.models import ScheduleItemDB
from sherpa.models.item import ScheduleItem

logger = logging.getLogger(__name__)


class ScheduleItemRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(self, item: ScheduleItem) -> ScheduleItem:
        """Persist a new habit or task."""
        try:
            row = ScheduleItemDB.from_pydantic(item)
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
            logger.debug(f"Created {row.kind} {item.id}: {item.title[:50]}")
            return row.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create item {item.id}: {type(e).__name__}: {str(e)}")
            raise

    def get(self, item_id: str) -> Optional[ScheduleItem]:
        row = self.db.query(ScheduleItemDB).filter(ScheduleItemDB.id == item_id).first()
        return row.to_pydantic() if row else None

    def list_all(self) -> List[ScheduleItem]:
        rows = self.db.query(ScheduleItemDB).order_by(ScheduleItemDB.created_at.asc()).all()
        return [row.to_pydantic() for row in rows]

    def list_active(self) -> List[ScheduleItem]:
        """Non-archived items, oldest first (materialization order)."""
        rows = (
            self.db.query(ScheduleItemDB)
            .filter(ScheduleItemDB.is_archived.is_(False))
            .order_by(ScheduleItemDB.created_at.asc(), ScheduleItemDB.id.asc())
            .all()
        )
        return [row.to_pydantic() for row in rows]

    def archive(self, item_id: str) -> bool:
        """Archive an item; existing instances are kept. Idempotent."""
        row = self.db.query(ScheduleItemDB).filter(ScheduleItemDB.id == item_id).first()
        if row is None:
            return False
        if row.is_archived:
            return True
        row.is_archived = True
        row.updated_at = datetime.utcnow()
        try:
            self.db.commit()
            logger.debug(f"Archived item {item_id}")
            return True
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to archive item {item_id}: {type(e).__name__}: {str(e)}")
            raise
