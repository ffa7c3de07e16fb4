"""Daily record persistence (one row per calendar date)."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Sequence

from sqlalchemy import desc, func
from sqlalchemy.orm import Session

from weekday_planner.core.exceptions import NotFoundError, ValidationError
from weekday_planner.db.models.daily_record import DailyRecord
from weekday_planner.db.upsert import upsert
from weekday_planner.services.schedule_builder import EventKind, PlannerInput, ScheduleEvent
from weekday_planner.services.schedule_metrics import events_from_dicts, total_free_time
from weekday_planner.services.schedule_service import plan_evening, validate_planner_input

logger = logging.getLogger(__name__)


@dataclass
class RecordDraft:
    date: date
    planner_input: PlannerInput
    schedule: Optional[List[ScheduleEvent]] = None
    total_free_time: Optional[int] = None
    completed_tasks: List[str] = field(default_factory=list)
    notes: str = ""


def upsert_record(db: Session, draft: RecordDraft) -> DailyRecord:
    """
    Create or replace the record for ``draft.date``.

    Without a schedule the evening is planned with the configured policy. A schedule
    supplied without ``total_free_time`` has its free time derived from the events.
    """
    policy: Optional[str] = None
    schedule = draft.schedule
    free_time = draft.total_free_time
    if schedule is None:
        planned = plan_evening(draft.planner_input)
        schedule = planned.events
        policy = planned.policy
        free_time = planned.summary.total_free_time
    else:
        validate_planner_input(draft.planner_input)
    if not schedule:
        raise ValidationError("schedule must contain at least the arrival and bed markers")
    if free_time is None:
        free_time = total_free_time(schedule)

    values = {
        "date": draft.date,
        "arrival_hour": draft.planner_input.arrival_hour,
        "arrival_minute": draft.planner_input.arrival_minute,
        "has_dinner": draft.planner_input.has_dinner,
        "has_laundry": draft.planner_input.has_laundry,
        "study_minutes": draft.planner_input.study_minutes,
        "total_free_time": free_time,
        "schedule_policy": policy,
        "schedule_json": [event.to_dict() for event in schedule],
        "completed_tasks": list(dict.fromkeys(draft.completed_tasks)),
        "notes": draft.notes or "",
    }
    try:
        upsert(db, DailyRecord, values, conflict_columns=["date"], update_values={"updated_at": func.now()})
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Saved daily record for %s (free=%s, policy=%s)", draft.date, free_time, policy or "client")
    return require_record(db, draft.date)


def get_record(db: Session, record_date: date) -> Optional[DailyRecord]:
    return db.query(DailyRecord).filter(DailyRecord.date == record_date).one_or_none()


def require_record(db: Session, record_date: date) -> DailyRecord:
    record = get_record(db, record_date)
    if record is None:
        raise NotFoundError(f"No record for {record_date.isoformat()}")
    return record


def list_records(
    db: Session,
    *,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    limit: Optional[int] = None,
) -> List[DailyRecord]:
    """Records in the inclusive date range, newest first."""
    query = db.query(DailyRecord)
    if start_date:
        query = query.filter(DailyRecord.date >= start_date)
    if end_date:
        query = query.filter(DailyRecord.date <= end_date)
    query = query.order_by(desc(DailyRecord.date))
    if limit:
        query = query.limit(limit)
    return query.all()


def delete_record(db: Session, record_date: date) -> None:
    deleted = db.query(DailyRecord).filter(DailyRecord.date == record_date).delete(synchronize_session=False)
    if not deleted:
        db.rollback()
        raise NotFoundError(f"No record for {record_date.isoformat()}")
    db.commit()
    logger.info("Deleted daily record for %s", record_date)


def set_task_completion(db: Session, record_date: date, task_id: str, completed: bool) -> DailyRecord:
    """Mark one task event of the stored schedule complete or incomplete."""
    record = require_record(db, record_date)
    task_ids = _task_ids(record.schedule_json or [])
    if task_id not in task_ids:
        raise ValidationError(f"{task_id!r} is not a task in the schedule for {record_date.isoformat()}")

    current: Sequence[str] = record.completed_tasks or []
    if completed and task_id not in current:
        record.completed_tasks = [*current, task_id]
    elif not completed and task_id in current:
        record.completed_tasks = [existing for existing in current if existing != task_id]
    else:
        return record

    try:
        db.add(record)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(record)
    return record


def update_notes(db: Session, record_date: date, notes: str) -> DailyRecord:
    record = require_record(db, record_date)
    record.notes = notes.strip()
    try:
        db.add(record)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(record)
    return record


def record_events(record: DailyRecord) -> List[ScheduleEvent]:
    return events_from_dicts(record.schedule_json or [])


def _task_ids(schedule: Sequence[dict]) -> List[str]:
    return [row.get("id") for row in schedule if row.get("kind") == EventKind.TASK.value]
