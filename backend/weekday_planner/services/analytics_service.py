"""Aggregation helpers for the analytics endpoint."""
from __future__ import annotations

import math
from collections import Counter
from datetime import date, timedelta
from typing import Dict, Iterable, List, Sequence

from sqlalchemy.orm import Session

from weekday_planner.api.schemas.analytics import (
    AnalyticsPayload,
    DailyFreeTimePoint,
    DailyStudyTimePoint,
    WeeklyTrendPoint,
)
from weekday_planner.db.models.daily_record import DailyRecord
from weekday_planner.services.record_service import list_records
from weekday_planner.services.timeclock import to_clock

WEEK_CHUNK = 7
DEFAULT_ARRIVAL_MINUTES = 19 * 60


def _round(value: float) -> int:
    # Half up, like the web client's Math.round; Python's round() is half-to-even.
    return int(math.floor(value + 0.5))


def _mean(values: Sequence[int]) -> int:
    return _round(sum(values) / len(values)) if values else 0


def _percent(count: int, total: int) -> int:
    return _round(count / total * 100) if total else 0


def _completed_labels(record: DailyRecord) -> List[str]:
    labels = {row.get("id"): row.get("label") for row in record.schedule_json or []}
    return [labels.get(task_id) or task_id for task_id in record.completed_tasks or []]


def _weekly_trend(records: Sequence[DailyRecord]) -> List[WeeklyTrendPoint]:
    # Fixed chunks of seven records, not calendar weeks.
    trend: List[WeeklyTrendPoint] = []
    for offset in range(0, len(records), WEEK_CHUNK):
        chunk = records[offset : offset + WEEK_CHUNK]
        trend.append(
            WeeklyTrendPoint(
                start_date=chunk[0].date,
                avg_free_time=_mean([record.total_free_time for record in chunk]),
                avg_study_time=_mean([record.study_minutes for record in chunk]),
            )
        )
    return trend


def summarize_records(records: Iterable[DailyRecord]) -> AnalyticsPayload:
    ordered = sorted(records, key=lambda record: record.date)
    total = len(ordered)

    arrivals = [record.arrival_hour * 60 + record.arrival_minute for record in ordered]
    avg_arrival = _mean(arrivals) if arrivals else DEFAULT_ARRIVAL_MINUTES

    completion_counts: Dict[str, int] = dict(
        Counter(label for record in ordered for label in _completed_labels(record))
    )

    return AnalyticsPayload(
        total_days=total,
        avg_free_time=_mean([record.total_free_time for record in ordered]),
        avg_study_time=_mean([record.study_minutes for record in ordered]),
        avg_arrival_time=to_clock(avg_arrival),
        dinner_rate=_percent(sum(1 for record in ordered if record.has_dinner), total),
        laundry_rate=_percent(sum(1 for record in ordered if record.has_laundry), total),
        task_completion_stats=completion_counts,
        weekly_trend=_weekly_trend(ordered),
        daily_free_time=[
            DailyFreeTimePoint(date=record.date, free_time=record.total_free_time) for record in ordered
        ],
        daily_study_time=[
            DailyStudyTimePoint(date=record.date, study_time=record.study_minutes) for record in ordered
        ],
    )


def get_analytics(db: Session, *, today: date, days: int) -> AnalyticsPayload:
    """Aggregate records dated within the trailing ``days`` window ending ``today``."""
    start = today - timedelta(days=days)
    return summarize_records(list_records(db, start_date=start))
