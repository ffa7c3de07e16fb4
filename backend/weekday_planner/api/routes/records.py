"""Daily record (history) endpoints."""
from __future__ import annotations

from datetime import date
from time import perf_counter
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from weekday_planner.api.schemas.records import (
    DailyRecordListResponse,
    DailyRecordPayload,
    DailyRecordResponse,
    DailyRecordSaveRequest,
    DeleteResponse,
    NotesUpdateRequest,
    TaskCompletionRequest,
    TaskCompletionResponse,
)
from weekday_planner.db.deps import get_db
from weekday_planner.db.models.daily_record import DailyRecord
from weekday_planner.observability.metrics import log_metric
from weekday_planner.observability.tracing import trace
from weekday_planner.services.record_service import (
    RecordDraft,
    delete_record,
    get_record,
    list_records,
    set_task_completion,
    update_notes,
    upsert_record,
)
from weekday_planner.services.schedule_builder import ScheduleEvent

router = APIRouter()


@router.post("/records", response_model=DailyRecordResponse, tags=["records"])
def save_record(
    http_request: Request,
    payload: DailyRecordSaveRequest,
    db: Session = Depends(get_db),
) -> DailyRecordResponse:
    """Create or replace the record for ``payload.date``."""
    request_id = getattr(http_request.state, "request_id", None)
    schedule = (
        [ScheduleEvent(**event.model_dump()) for event in payload.schedule] if payload.schedule is not None else None
    )
    draft = RecordDraft(
        date=payload.date,
        planner_input=payload.to_planner_input(),
        schedule=schedule,
        total_free_time=payload.total_free_time,
        completed_tasks=payload.completed_tasks,
        notes=payload.notes,
    )

    start = perf_counter()
    with trace(
        "records.save",
        metadata={"date": payload.date.isoformat(), "client_schedule": schedule is not None},
        request_id=request_id,
    ):
        record = upsert_record(db, draft)

    latency_ms = (perf_counter() - start) * 1000
    log_metric("records.save.success", 1, metadata={"date": payload.date.isoformat()})
    log_metric("records.save.latency_ms", latency_ms)
    return DailyRecordResponse(record=serialize_record(record), request_id=request_id or "")


@router.get("/records/{record_date}", response_model=DailyRecordResponse, tags=["records"])
def read_record(
    record_date: date,
    http_request: Request,
    db: Session = Depends(get_db),
) -> DailyRecordResponse:
    request_id = getattr(http_request.state, "request_id", None)
    with trace("records.get", metadata={"date": record_date.isoformat()}, request_id=request_id):
        record = get_record(db, record_date)
    log_metric("records.get.found", 1 if record else 0)
    return DailyRecordResponse(
        record=serialize_record(record) if record else None,
        request_id=request_id or "",
    )


@router.get("/records", response_model=DailyRecordListResponse, tags=["records"])
def read_records(
    http_request: Request,
    start_date: Optional[date] = Query(default=None),
    end_date: Optional[date] = Query(default=None),
    limit: Optional[int] = Query(default=None, ge=1, le=366),
    db: Session = Depends(get_db),
) -> DailyRecordListResponse:
    """Stored records, newest first, optionally bounded by date and count."""
    request_id = getattr(http_request.state, "request_id", None)
    metadata = {
        "start_date": start_date.isoformat() if start_date else None,
        "end_date": end_date.isoformat() if end_date else None,
        "limit": limit,
    }
    with trace("records.list", metadata=metadata, request_id=request_id):
        records = list_records(db, start_date=start_date, end_date=end_date, limit=limit)
    log_metric("records.list.count", len(records))
    return DailyRecordListResponse(
        records=[serialize_record(record) for record in records],
        request_id=request_id or "",
    )


@router.delete("/records/{record_date}", response_model=DeleteResponse, tags=["records"])
def remove_record(
    record_date: date,
    http_request: Request,
    db: Session = Depends(get_db),
) -> DeleteResponse:
    request_id = getattr(http_request.state, "request_id", None)
    with trace("records.delete", metadata={"date": record_date.isoformat()}, request_id=request_id):
        delete_record(db, record_date)
    log_metric("records.delete.success", 1)
    return DeleteResponse(success=True, request_id=request_id or "")


@router.patch(
    "/records/{record_date}/tasks/{task_id}",
    response_model=TaskCompletionResponse,
    tags=["records"],
)
def update_task_completion(
    record_date: date,
    task_id: str,
    payload: TaskCompletionRequest,
    http_request: Request,
    db: Session = Depends(get_db),
) -> TaskCompletionResponse:
    """Mark a task of the saved schedule complete or incomplete."""
    request_id = getattr(http_request.state, "request_id", None)
    with trace(
        "records.task_completion",
        metadata={"date": record_date.isoformat(), "task_id": task_id, "completed": payload.completed},
        request_id=request_id,
    ):
        record = set_task_completion(db, record_date, task_id, payload.completed)
    log_metric("records.task_completion.success", 1, metadata={"task_id": task_id})
    return TaskCompletionResponse(
        date=record.date,
        task_id=task_id,
        completed=task_id in (record.completed_tasks or []),
        completed_tasks=list(record.completed_tasks or []),
        request_id=request_id or "",
    )


@router.patch("/records/{record_date}/notes", response_model=DailyRecordResponse, tags=["records"])
def update_record_notes(
    record_date: date,
    payload: NotesUpdateRequest,
    http_request: Request,
    db: Session = Depends(get_db),
) -> DailyRecordResponse:
    request_id = getattr(http_request.state, "request_id", None)
    with trace(
        "records.notes",
        metadata={"date": record_date.isoformat(), "note_length": len(payload.notes)},
        request_id=request_id,
    ):
        record = update_notes(db, record_date, payload.notes)
    return DailyRecordResponse(record=serialize_record(record), request_id=request_id or "")


def serialize_record(record: DailyRecord) -> DailyRecordPayload:
    return DailyRecordPayload(
        id=record.id,
        date=record.date,
        arrival_hour=record.arrival_hour,
        arrival_minute=record.arrival_minute,
        has_dinner=bool(record.has_dinner),
        has_laundry=bool(record.has_laundry),
        study_minutes=record.study_minutes,
        total_free_time=record.total_free_time,
        is_overtime=record.total_free_time < 0,
        schedule_policy=record.schedule_policy,
        schedule=record.schedule_json or [],
        completed_tasks=list(record.completed_tasks or []),
        notes=record.notes or "",
        created_at=record.created_at,
        updated_at=record.updated_at,
    )
