from __future__ import annotations

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from weekday_planner.api.deps import get_clock
from weekday_planner.main import app


@pytest.fixture()
def client():
    app.dependency_overrides[get_clock] = lambda: (lambda: datetime(2026, 10, 19, 18, 57, tzinfo=timezone.utc))
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_preview_returns_events_and_summary(client):
    resp = client.post(
        "/schedule/preview",
        json={"arrival_hour": 19, "arrival_minute": 0, "has_dinner": True, "has_laundry": False, "study_minutes": 45},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["policy"] == "split_study"
    assert [event["id"] for event in data["events"]] == ["arrival", "dinner", "bath", "study2", "free2", "bed"]
    free = data["events"][4]
    assert free["start"] == "21:45"
    assert free["end"] == "23:00"
    assert free["kind"] == "free"
    assert data["total_free_time"] == 75
    assert data["is_overtime"] is False
    assert data["study_minutes_scheduled"] == 45
    assert data["request_id"]


def test_preview_flags_overtime(client):
    resp = client.post(
        "/schedule/preview",
        json={"arrival_hour": 22, "arrival_minute": 30, "has_dinner": True, "has_laundry": True, "study_minutes": 60},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["total_free_time"] == -120
    assert data["is_overtime"] is True
    assert data["overrun_minutes"] == 120


def test_preview_with_fixed_bath_policy(client):
    resp = client.post(
        "/schedule/preview",
        json={
            "arrival_hour": 19,
            "arrival_minute": 0,
            "has_dinner": True,
            "has_laundry": True,
            "study_minutes": 45,
            "policy": "fixed_bath",
        },
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["policy"] == "fixed_bath"
    bath = next(event for event in data["events"] if event["id"] == "bath")
    assert bath["start"] == "21:00"


@pytest.mark.parametrize(
    "payload",
    [
        {"arrival_hour": 19, "arrival_minute": 5, "study_minutes": 45},
        {"arrival_hour": 19, "arrival_minute": 0, "study_minutes": 15},
        {"arrival_hour": 19, "arrival_minute": 0, "study_minutes": 42},
        {"arrival_hour": 25, "arrival_minute": 0, "study_minutes": 45},
        {"arrival_minute": 0, "study_minutes": 45},
        {"arrival_hour": 19, "arrival_minute": 0, "study_minutes": 45, "policy": "weekend"},
    ],
)
def test_preview_rejects_invalid_input(client, payload):
    resp = client.post("/schedule/preview", json=payload)
    assert resp.status_code == 400
    assert resp.json()["detail"]


def test_current_arrival_rounds_to_step(client):
    resp = client.get("/schedule/current-arrival")
    assert resp.status_code == 200
    data = resp.json()
    assert (data["arrival_hour"], data["arrival_minute"]) == (18, 50)
    assert data["clock"] == "18:50"
