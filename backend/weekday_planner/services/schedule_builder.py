"""Evening timeline builder.

Maps a ``PlannerInput`` to an ordered list of ``ScheduleEvent``. Two slot-filling
policies share the same fixed anchors (arrival, 23:00 bedtime) and task durations:

* ``split_study`` fills the window after bath/laundry with study first and spills the
  remainder into the gap before dinner; study that fits nowhere is dropped.
* ``fixed_bath`` eats dinner on arrival, waits for a 21:00 bath and places one study
  block after it, even when that runs past bedtime.

Builders are pure: no clock, no I/O, same input gives the same list.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Dict, List, Union

from weekday_planner.services.timeclock import minutes_of_day

BED_TIME = 23 * 60
DINNER_EARLIEST = 18 * 60 + 30
BATH_IDEAL = 21 * 60
DINNER_MINUTES = 60
BATH_MINUTES = 60
LAUNDRY_MINUTES = 30

LABEL_ARRIVAL = "帰宅"
LABEL_DINNER = "夕食（調理・食事）"
LABEL_BATH = "お風呂"
LABEL_LAUNDRY = "洗濯"
LABEL_STUDY = "英語学習"
LABEL_FREE = "自由時間"
LABEL_BED = "就寝"
SESSION_MARKS = ("①", "②")


class EventKind(str, Enum):
    MARKER = "marker"
    TASK = "task"
    FREE = "free"


@dataclass(frozen=True)
class PlannerInput:
    arrival_hour: int
    arrival_minute: int
    has_dinner: bool
    has_laundry: bool
    study_minutes: int

    @property
    def arrival(self) -> int:
        return minutes_of_day(self.arrival_hour, self.arrival_minute)


@dataclass(frozen=True)
class ScheduleEvent:
    id: str
    start_minute: int
    duration_minute: int
    label: str
    kind: EventKind

    @property
    def end_minute(self) -> int:
        return self.start_minute + self.duration_minute

    def to_dict(self) -> dict:
        data = asdict(self)
        data["kind"] = self.kind.value
        return data


class SchedulePolicy:
    """Strategy interface for placing the evening's tasks."""

    name = ""

    def build(self, planner_input: PlannerInput) -> List[ScheduleEvent]:
        raise NotImplementedError


class _Timeline:
    """Append-only event list with a running cursor."""

    def __init__(self, start: int):
        self.cursor = start
        self.events: List[ScheduleEvent] = [
            ScheduleEvent("arrival", start, 0, LABEL_ARRIVAL, EventKind.MARKER)
        ]

    def add(self, event_id: str, duration: int, label: str, kind: EventKind) -> None:
        if duration <= 0:
            return
        self.events.append(ScheduleEvent(event_id, self.cursor, duration, label, kind))
        self.cursor += duration

    def close(self) -> List[ScheduleEvent]:
        self.events.append(ScheduleEvent("bed", BED_TIME, 0, LABEL_BED, EventKind.MARKER))
        return self.events


class SplitStudyPolicy(SchedulePolicy):
    name = "split_study"

    def build(self, planner_input: PlannerInput) -> List[ScheduleEvent]:
        arrival = planner_input.arrival
        laundry = LAUNDRY_MINUTES if planner_input.has_laundry else 0
        dinner_start = max(arrival, DINNER_EARLIEST) if planner_input.has_dinner else arrival
        dinner_end = dinner_start + DINNER_MINUTES if planner_input.has_dinner else arrival
        chores_end = dinner_end + BATH_MINUTES + laundry

        # Negative windows contribute no capacity.
        before = max(dinner_start - arrival, 0)
        after = max(BED_TIME - chores_end, 0)

        remaining = max(planner_input.study_minutes, 0)
        study_after = min(remaining, after)
        remaining -= study_after
        study_before = min(remaining, before)

        paired = study_before > 0 and study_after > 0
        first_label, second_label = (
            (LABEL_STUDY + SESSION_MARKS[0], LABEL_STUDY + SESSION_MARKS[1]) if paired else (LABEL_STUDY, LABEL_STUDY)
        )

        timeline = _Timeline(arrival)
        timeline.add("study1", study_before, first_label, EventKind.TASK)
        timeline.add("free1", before - study_before, LABEL_FREE, EventKind.FREE)
        if planner_input.has_dinner:
            timeline.add("dinner", DINNER_MINUTES, LABEL_DINNER, EventKind.TASK)
        timeline.add("bath", BATH_MINUTES, LABEL_BATH, EventKind.TASK)
        timeline.add("laundry", laundry, LABEL_LAUNDRY, EventKind.TASK)
        timeline.add("study2", study_after, second_label, EventKind.TASK)
        timeline.add("free2", after - study_after, LABEL_FREE, EventKind.FREE)
        return timeline.close()


class FixedBathPolicy(SchedulePolicy):
    name = "fixed_bath"

    def build(self, planner_input: PlannerInput) -> List[ScheduleEvent]:
        timeline = _Timeline(planner_input.arrival)
        if planner_input.has_dinner:
            timeline.add("dinner", DINNER_MINUTES, LABEL_DINNER, EventKind.TASK)
        timeline.add("free1", BATH_IDEAL - timeline.cursor, LABEL_FREE, EventKind.FREE)
        timeline.add("bath", BATH_MINUTES, LABEL_BATH, EventKind.TASK)
        if planner_input.has_laundry:
            timeline.add("laundry", LAUNDRY_MINUTES, LABEL_LAUNDRY, EventKind.TASK)
        timeline.add("study", planner_input.study_minutes, LABEL_STUDY, EventKind.TASK)
        timeline.add("free2", BED_TIME - timeline.cursor, LABEL_FREE, EventKind.FREE)
        return timeline.close()


POLICIES: Dict[str, SchedulePolicy] = {
    SplitStudyPolicy.name: SplitStudyPolicy(),
    FixedBathPolicy.name: FixedBathPolicy(),
}

DEFAULT_POLICY = SplitStudyPolicy.name


def get_policy(policy: Union[str, SchedulePolicy, None] = None) -> SchedulePolicy:
    if isinstance(policy, SchedulePolicy):
        return policy
    name = policy or DEFAULT_POLICY
    try:
        return POLICIES[name]
    except KeyError:
        raise ValueError(f"Unknown schedule policy: {name}") from None


def build_schedule(
    planner_input: PlannerInput,
    policy: Union[str, SchedulePolicy, None] = None,
) -> List[ScheduleEvent]:
    """Build the evening timeline for ``planner_input`` with the named policy."""
    return get_policy(policy).build(planner_input)
