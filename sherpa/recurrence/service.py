"""Single-writer schedule service.

All materialization for one store goes through a `ScheduleService`, which holds a
lock around read-check-insert so overlapping calls cannot both insert the same
(item, day). The unique constraint on instances backs this up for writers outside
the service.
"""

from __future__ import annotations

import logging
import threading
from datetime import date
from typing import Callable, Optional, Tuple

from sqlalchemy.orm import Session

from sherpa.models.constants import DEFAULT_CALENDAR_SPAN_DAYS
from sherpa.recurrence.calendar_math import DateLike, start_of_day, visible_window
from sherpa.recurrence.materialize import materialize_schedule

logger = logging.getLogger(__name__)


class ScheduleService:
    """Serializes `materialize_schedule` calls made with sessions from `session_factory`."""

    def __init__(self, session_factory: Callable[[], Session], calendar_span_days: int = DEFAULT_CALENDAR_SPAN_DAYS):
        self.session_factory = session_factory
        self.calendar_span_days = calendar_span_days
        self._lock = threading.Lock()

    def ensure_schedule(self, start: DateLike, end: DateLike, db: Optional[Session] = None) -> int:
        """Materialize [start, end]. Uses `db` when given, otherwise a fresh session."""
        with self._lock:
            if db is not None:
                return materialize_schedule(db, start, end)
            session = self.session_factory()
            try:
                return materialize_schedule(session, start, end)
            finally:
                session.close()

    def ensure_visible_window(self, center: DateLike, db: Optional[Session] = None) -> Tuple[date, date, int]:
        """Materialize the calendar window around `center`; returns (start, end, created)."""
        start, end = visible_window(start_of_day(center), self.calendar_span_days)
        logger.debug(f"Ensuring visible window {start.isoformat()}..{end.isoformat()}")
        created = self.ensure_schedule(start, end, db=db)
        return start, end, created
