"""Instance data model for sherpa."""

import datetime as dt
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from sherpa.models.item import ItemKind


class CompletionState(str, Enum):
    """Completion state for an instance."""
    PENDING = "pending"
    COMPLETED = "completed"
    SKIPPED = "skipped"
    SKIPPED_WITH_NOTE = "skipped_with_note"


class Instance(BaseModel):
    """One concrete scheduled occurrence of an item on a calendar day.

    (item_id, date) is unique across the store.
    """

    id: str = Field(..., description="Unique instance identifier (UUID v4)")
    item_id: str = Field(..., description="Owning habit/task id")
    item_kind: ItemKind = Field(..., description="Kind of the owning item")
    date: dt.date = Field(..., description="Scheduled calendar day")
    status: CompletionState = Field(CompletionState.PENDING, description="Completion state")
    note: Optional[str] = Field(None, description="Only kept when status is skipped_with_note")
    completed_at: Optional[datetime] = Field(None, description="Set exactly while status is completed")
    created_at: datetime = Field(..., description="Materialization timestamp")

    @property
    def is_habit(self) -> bool:
        return self.item_kind == ItemKind.HABIT

    def with_status(self, status: CompletionState, note: Optional[str] = None, now: Optional[datetime] = None) -> "Instance":
        """Return a copy moved to `status`, keeping completed_at and note consistent."""
        status = CompletionState(status)
        completed_at = None
        if status == CompletionState.COMPLETED:
            # Re-completing keeps the original completion time.
            completed_at = self.completed_at if self.status == CompletionState.COMPLETED and self.completed_at else (now or datetime.utcnow())
        return self.model_copy(
            update={
                "status": status,
                "note": note if status == CompletionState.SKIPPED_WITH_NOTE else None,
                "completed_at": completed_at,
            }
        )

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
