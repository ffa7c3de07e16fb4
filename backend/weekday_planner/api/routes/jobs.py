"""Operational endpoints for the reminder dispatcher."""
from __future__ import annotations

from time import perf_counter

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from weekday_planner.api.deps import get_clock
from weekday_planner.api.schemas.jobs import JobRunRequest, JobRunResponse
from weekday_planner.core.config import settings
from weekday_planner.core.exceptions import ValidationError
from weekday_planner.db.deps import get_db
from weekday_planner.observability.metrics import log_metric
from weekday_planner.observability.tracing import trace
from weekday_planner.services.dispatch import run_dispatch_sweep
from weekday_planner.services.timeclock import Clock, parse_hhmm

router = APIRouter()


@router.get("/jobs", tags=["jobs"])
def get_jobs_config(request: Request) -> dict:
    request_id = getattr(request.state, "request_id", None)
    with trace("jobs.config", metadata={"request_id": request_id}, request_id=request_id):
        data = {
            "scheduler_enabled": settings.scheduler_enabled,
            "notifications_enabled": settings.notifications_enabled,
            "schedule": {
                "timezone": settings.scheduler_timezone or "local",
                "dispatch": "every minute",
                "fired_retention_hours": settings.fired_retention_hours,
            },
        }
    return {**data, "request_id": request_id or ""}


@router.post("/jobs/run-now", response_model=JobRunResponse, tags=["jobs"])
def run_job_now(
    request: Request,
    payload: JobRunRequest,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> JobRunResponse:
    if not settings.debug:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Run-now only allowed in debug mode")

    request_id = getattr(request.state, "request_id", None)
    now = clock()
    if payload.at:
        try:
            hour, minute = divmod(parse_hhmm(payload.at), 60)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
        now = now.replace(hour=hour, minute=minute, second=0, microsecond=0)

    metadata = {"job": payload.job, "at": now.strftime("%H:%M"), "request_id": request_id}
    start = perf_counter()
    with trace("jobs.run_now", metadata=metadata, request_id=request_id):
        result = run_dispatch_sweep(db, now=now)

    latency_ms = (perf_counter() - start) * 1000
    log_metric("jobs.run_now.success", 1, metadata={"job": payload.job})
    log_metric("jobs.run_now.latency_ms", latency_ms, metadata={"job": payload.job})

    return JobRunResponse(
        job=payload.job,
        checked_time=result.checked_time,
        matched=result.matched,
        sent=result.sent,
        failed=result.failed,
        subscriptions_removed=result.subscriptions_removed,
        purged=result.purged,
        skipped=result.skipped,
        request_id=request_id or "",
    )
