"""History analytics route."""
from __future__ import annotations

from time import perf_counter
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from weekday_planner.api.deps import get_clock
from weekday_planner.api.schemas.analytics import AnalyticsResponse
from weekday_planner.core.config import settings
from weekday_planner.db.deps import get_db
from weekday_planner.observability.metrics import log_metric
from weekday_planner.observability.tracing import trace
from weekday_planner.services.analytics_service import get_analytics
from weekday_planner.services.timeclock import Clock

router = APIRouter()


@router.get("/analytics", response_model=AnalyticsResponse, tags=["analytics"])
def read_analytics(
    request: Request,
    days: Optional[int] = Query(default=None, ge=1, le=366),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> AnalyticsResponse:
    """Averages, rates and trends over the records of the trailing ``days`` days."""
    request_id = getattr(request.state, "request_id", None)
    window = days or settings.analytics_default_days
    today = clock().date()

    start = perf_counter()
    with trace("analytics.summary", metadata={"days": window}, request_id=request_id):
        analytics = get_analytics(db, today=today, days=window)

    latency_ms = (perf_counter() - start) * 1000
    log_metric("analytics.summary.records", analytics.total_days, metadata={"days": window})
    log_metric("analytics.summary.latency_ms", latency_ms)
    return AnalyticsResponse(days=window, analytics=analytics, request_id=request_id or "")
