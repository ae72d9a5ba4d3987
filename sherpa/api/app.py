"""FastAPI web application for sherpa."""

import logging
from collections import defaultdict
from datetime import date
from typing import Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from sherpa.database.database import SessionLocal, get_calendar_span_days, get_db
from sherpa.database.instance_repository import InstanceRepository
from sherpa.database.item_repository import ScheduleItemRepository
from sherpa.engine.streaks import qualifies_for_streak
from sherpa.models.instance import CompletionState, Instance
from sherpa.models.item import ScheduleItem
from sherpa.models.item_factory import create_habit, create_task
from sherpa.models.recurrence import RecurrenceRule
from sherpa.recurrence.presets import RepeatEnd, RepeatKind, RepeatPattern, build_recurrence_rule, summarize
from sherpa.recurrence.service import ScheduleService

logger = logging.getLogger(__name__)

app = FastAPI(
    title="sherpa API",
    description="Habit and task tracker: recurrence rules and materialized daily schedules",
    version="0.1.0",
)
app.state.schedule_service = ScheduleService(SessionLocal, calendar_span_days=get_calendar_span_days())


def get_schedule_service(request: Request) -> ScheduleService:
    return request.app.state.schedule_service


# Request models
class RepeatRequest(BaseModel):
    """Repeat choice: either a preset pattern/end or an explicit rule."""
    start_date: Optional[date] = Field(None, description="Anchor day (defaults to today)")
    repeat: Optional[RepeatPattern] = Field(None, description="Repeat pattern preset")
    end: Optional[RepeatEnd] = Field(None, description="Repeat end preset")
    rule: Optional[RecurrenceRule] = Field(None, description="Explicit rule; overrides repeat/end")


class HabitCreateRequest(RepeatRequest):
    title: str = Field(..., min_length=1)
    detail: Optional[str] = None


class TaskCreateRequest(RepeatRequest):
    title: str = Field(..., min_length=1)
    detail: Optional[str] = None
    due_date: Optional[date] = Field(None, description="One-shot due day when the task does not repeat")


class EnsureScheduleRequest(BaseModel):
    start_date: date
    end_date: date


class InstanceUpdateRequest(BaseModel):
    status: CompletionState
    note: Optional[str] = None


# Response models
class ItemResponse(BaseModel):
    item: ScheduleItem
    summary: str
    created_count: int = Field(0, description="Instances materialized for the visible window")


class ItemsResponse(BaseModel):
    items: List[ScheduleItem]


class EnsureScheduleResponse(BaseModel):
    start_date: date
    end_date: date
    created_count: int


class InstancesResponse(BaseModel):
    instances: List[Instance]
    titles: Dict[str, str] = Field(default_factory=dict, description="Map of item_id to title")


class StreaksResponse(BaseModel):
    days: Dict[date, bool]


def _resolve_rule(body: RepeatRequest, default_kind: Optional[RepeatKind]) -> Optional[RecurrenceRule]:
    if body.rule is not None:
        return body.rule
    pattern = body.repeat
    if pattern is None:
        if default_kind is None:
            return None
        pattern = RepeatPattern(kind=default_kind)
    return build_recurrence_rule(pattern, body.end, body.start_date or date.today())


def _summary(body: RepeatRequest, rule: Optional[RecurrenceRule]) -> str:
    if body.rule is None and body.repeat is not None:
        return summarize(body.repeat)
    if rule is None or not rule.frequency.is_repeating:
        return "Does not repeat"
    return summarize(
        RepeatPattern(
            kind=RepeatKind(rule.frequency.value),
            interval=rule.interval,
            weekdays=rule.weekdays,
            day=rule.target_day_of_month,
        )
    )


def _materialize_for_new_item(
    item: ScheduleItem, service: ScheduleService, db: Session
) -> int:
    center = item.due_date
    if item.recurrence_rule is not None:
        center = item.recurrence_rule.start_date
    _, _, created = service.ensure_visible_window(center or date.today(), db=db)
    return created


@app.post("/habits", response_model=ItemResponse, status_code=status.HTTP_201_CREATED)
def create_habit_endpoint(
    body: HabitCreateRequest,
    db: Session = Depends(get_db),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Create a habit and materialize the window around its start."""
    rule = _resolve_rule(body, RepeatKind.NONE)
    habit = ScheduleItemRepository(db).create(create_habit(body.title, rule, detail=body.detail))
    created = _materialize_for_new_item(habit, service, db)
    return ItemResponse(item=habit, summary=_summary(body, rule), created_count=created)


@app.post("/tasks", response_model=ItemResponse, status_code=status.HTTP_201_CREATED)
def create_task_endpoint(
    body: TaskCreateRequest,
    db: Session = Depends(get_db),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Create a task (repeating, due on a day, or unscheduled)."""
    rule = _resolve_rule(body, None)
    task = ScheduleItemRepository(db).create(
        create_task(body.title, detail=body.detail, due_date=body.due_date, recurrence_rule=rule)
    )
    created = 0
    if rule is not None or task.due_date is not None:
        created = _materialize_for_new_item(task, service, db)
    return ItemResponse(item=task, summary=_summary(body, rule), created_count=created)


@app.get("/items", response_model=ItemsResponse)
def list_items(db: Session = Depends(get_db)):
    return ItemsResponse(items=ScheduleItemRepository(db).list_all())


@app.post("/items/{item_id}/archive", response_model=ScheduleItem)
def archive_item(item_id: str, db: Session = Depends(get_db)):
    """Archive an item; it stops being materialized but keeps its instances."""
    repo = ScheduleItemRepository(db)
    if not repo.archive(item_id):
        raise HTTPException(status_code=404, detail=f"Item {item_id} not found")
    return repo.get(item_id)


@app.post("/schedule/ensure", response_model=EnsureScheduleResponse)
def ensure_schedule_endpoint(
    body: EnsureScheduleRequest,
    db: Session = Depends(get_db),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Materialize missing instances for [start_date, end_date]. An inverted range is a no-op."""
    try:
        created = service.ensure_schedule(body.start_date, body.end_date, db=db)
    except Exception as e:
        logger.error(f"Failed to ensure schedule: {type(e).__name__}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to ensure schedule: {str(e)}")
    return EnsureScheduleResponse(start_date=body.start_date, end_date=body.end_date, created_count=created)


@app.get("/instances", response_model=InstancesResponse)
def list_instances(start: date, end: date, db: Session = Depends(get_db)):
    """Instances within [start, end], ascending by date."""
    instances = InstanceRepository(db).list_in_range(start, end)
    item_repo = ScheduleItemRepository(db)
    titles: Dict[str, str] = {}
    for instance in instances:
        if instance.item_id not in titles:
            item = item_repo.get(instance.item_id)
            titles[instance.item_id] = item.title if item else "Untitled"
    return InstancesResponse(instances=instances, titles=titles)


@app.patch("/instances/{instance_id}", response_model=Instance)
def update_instance(instance_id: str, body: InstanceUpdateRequest, db: Session = Depends(get_db)):
    """Set an instance's completion state."""
    try:
        return InstanceRepository(db).update_status(instance_id, body.status, body.note)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@app.get("/streaks", response_model=StreaksResponse)
def streaks(start: date, end: date, db: Session = Depends(get_db)):
    """Per-day streak qualification for days that have instances."""
    by_day: Dict[date, List[Instance]] = defaultdict(list)
    for instance in InstanceRepository(db).list_in_range(start, end):
        by_day[instance.date].append(instance)
    return StreaksResponse(days={day: qualifies_for_streak(items) for day, items in sorted(by_day.items())})
