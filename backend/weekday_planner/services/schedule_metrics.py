"""Derived metrics over a built schedule."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence

from weekday_planner.services.schedule_builder import BED_TIME, EventKind, ScheduleEvent

STUDY_EVENT_IDS = frozenset({"study", "study1", "study2"})


@dataclass(frozen=True)
class ScheduleSummary:
    total_free_time: int
    study_minutes: int
    overrun_minutes: int

    @property
    def is_overtime(self) -> bool:
        return self.total_free_time < 0


def total_free_time(events: Sequence[ScheduleEvent]) -> int:
    """
    Free minutes between arrival and bedtime.

    Computed as the arrival-to-bed span minus every task's duration, so a timeline
    that runs past 23:00 reports a signed deficit instead of just omitting the
    trailing free block. When nothing overruns this equals the sum of free events.
    """
    arrival = _arrival_minute(events)
    busy = sum(event.duration_minute for event in events if event.kind == EventKind.TASK)
    return (BED_TIME - arrival) - busy


def study_minutes(events: Iterable[ScheduleEvent]) -> int:
    return sum(event.duration_minute for event in events if event.id in STUDY_EVENT_IDS)


def overrun_minutes(events: Sequence[ScheduleEvent]) -> int:
    last_end = max((event.end_minute for event in events if event.id != "bed"), default=BED_TIME)
    return max(last_end - BED_TIME, 0)


def summarize_schedule(events: Sequence[ScheduleEvent]) -> ScheduleSummary:
    return ScheduleSummary(
        total_free_time=total_free_time(events),
        study_minutes=study_minutes(events),
        overrun_minutes=overrun_minutes(events),
    )


def events_from_dicts(rows: Iterable[dict]) -> List[ScheduleEvent]:
    """Rehydrate events stored as JSON (the shape produced by ``ScheduleEvent.to_dict``)."""
    return [
        ScheduleEvent(
            id=str(row["id"]),
            start_minute=int(row["start_minute"]),
            duration_minute=int(row["duration_minute"]),
            label=str(row["label"]),
            kind=EventKind(row["kind"]),
        )
        for row in rows
    ]


def _arrival_minute(events: Sequence[ScheduleEvent]) -> int:
    for event in events:
        if event.id == "arrival":
            return event.start_minute
    if not events:
        raise ValueError("Schedule has no events")
    return events[0].start_minute
