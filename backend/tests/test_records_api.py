from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from weekday_planner.db.deps import get_db
from weekday_planner.db.models.daily_record import DailyRecord
from weekday_planner.main import app


@pytest.fixture()
def client():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )

    @event.listens_for(engine, "connect")
    def set_fk(conn, record):  # pragma: no cover
        cursor = conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    DailyRecord.__table__.create(bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client, TestingSessionLocal
    app.dependency_overrides.clear()


def _payload(record_date: str = "2026-10-19", **overrides) -> dict:
    payload = {
        "date": record_date,
        "arrival_hour": 19,
        "arrival_minute": 0,
        "has_dinner": True,
        "has_laundry": False,
        "study_minutes": 45,
    }
    payload.update(overrides)
    return payload


def test_save_builds_schedule_and_reads_back(client):
    test_client, _ = client
    resp = test_client.post("/records", json=_payload(notes="good day"))
    assert resp.status_code == 200
    record = resp.json()["record"]
    assert record["total_free_time"] == 75
    assert record["is_overtime"] is False
    assert record["schedule_policy"] == "split_study"
    assert [event["id"] for event in record["schedule"]][0] == "arrival"

    fetched = test_client.get("/records/2026-10-19").json()["record"]
    assert fetched["id"] == record["id"]
    assert fetched["notes"] == "good day"
    assert fetched["schedule"] == record["schedule"]


def test_save_same_date_replaces_record(client):
    test_client, session_factory = client
    first = test_client.post("/records", json=_payload()).json()["record"]
    second = test_client.post(
        "/records",
        json=_payload(arrival_hour=20, has_laundry=True, completed_tasks=["dinner", "dinner"]),
    ).json()["record"]

    assert second["id"] == first["id"]
    assert second["arrival_hour"] == 20
    assert second["completed_tasks"] == ["dinner"]

    session = session_factory()
    try:
        assert session.query(DailyRecord).count() == 1
    finally:
        session.close()


def test_save_with_client_schedule_derives_free_time(client):
    test_client, _ = client
    schedule = [
        {"id": "arrival", "start_minute": 1200, "duration_minute": 0, "label": "帰宅", "kind": "marker"},
        {"id": "bath", "start_minute": 1200, "duration_minute": 60, "label": "お風呂", "kind": "task"},
        {"id": "study2", "start_minute": 1260, "duration_minute": 30, "label": "英語学習", "kind": "task"},
        {"id": "free2", "start_minute": 1290, "duration_minute": 90, "label": "自由時間", "kind": "free"},
        {"id": "bed", "start_minute": 1380, "duration_minute": 0, "label": "就寝", "kind": "marker"},
    ]
    resp = test_client.post(
        "/records",
        json=_payload(arrival_hour=20, has_dinner=False, study_minutes=30, schedule=schedule),
    )
    assert resp.status_code == 200
    record = resp.json()["record"]
    assert record["total_free_time"] == 90
    assert record["schedule_policy"] is None
    assert len(record["schedule"]) == 5


def test_save_keeps_client_free_time(client):
    test_client, _ = client
    schedule = [
        {"id": "arrival", "start_minute": 1140, "duration_minute": 0, "label": "帰宅", "kind": "marker"},
        {"id": "bed", "start_minute": 1380, "duration_minute": 0, "label": "就寝", "kind": "marker"},
    ]
    resp = test_client.post("/records", json=_payload(schedule=schedule, total_free_time=-15))
    assert resp.status_code == 200
    assert resp.json()["record"]["total_free_time"] == -15
    assert resp.json()["record"]["is_overtime"] is True


@pytest.mark.parametrize(
    "overrides",
    [
        {"arrival_minute": 7},
        {"study_minutes": 10},
        {"date": "2026-13-01"},
        {"schedule": []},
    ],
)
def test_save_rejects_invalid_payload(client, overrides):
    test_client, _ = client
    resp = test_client.post("/records", json=_payload(**overrides))
    assert resp.status_code == 400


def test_missing_record_reads_as_null(client):
    test_client, _ = client
    resp = test_client.get("/records/2026-01-01")
    assert resp.status_code == 200
    assert resp.json()["record"] is None


def test_list_records_newest_first_with_range_and_limit(client):
    test_client, _ = client
    for day in ("2026-10-14", "2026-10-15", "2026-10-16", "2026-10-17"):
        assert test_client.post("/records", json=_payload(day)).status_code == 200

    dates = [record["date"] for record in test_client.get("/records").json()["records"]]
    assert dates == ["2026-10-17", "2026-10-16", "2026-10-15", "2026-10-14"]

    ranged = test_client.get(
        "/records", params={"start_date": "2026-10-15", "end_date": "2026-10-16"}
    ).json()["records"]
    assert [record["date"] for record in ranged] == ["2026-10-16", "2026-10-15"]

    limited = test_client.get("/records", params={"limit": 1}).json()["records"]
    assert [record["date"] for record in limited] == ["2026-10-17"]


def test_delete_record(client):
    test_client, _ = client
    test_client.post("/records", json=_payload())

    resp = test_client.delete("/records/2026-10-19")
    assert resp.status_code == 200
    assert resp.json()["success"] is True
    assert test_client.get("/records/2026-10-19").json()["record"] is None

    missing = test_client.delete("/records/2026-10-19")
    assert missing.status_code == 404


def test_toggle_task_completion(client):
    test_client, _ = client
    test_client.post("/records", json=_payload())

    done = test_client.patch("/records/2026-10-19/tasks/bath", json={"completed": True})
    assert done.status_code == 200
    assert done.json()["completed"] is True
    assert done.json()["completed_tasks"] == ["bath"]

    again = test_client.patch("/records/2026-10-19/tasks/bath", json={"completed": True})
    assert again.json()["completed_tasks"] == ["bath"]

    undone = test_client.patch("/records/2026-10-19/tasks/bath", json={"completed": False})
    assert undone.json()["completed"] is False
    assert undone.json()["completed_tasks"] == []


def test_toggle_rejects_markers_and_unknown_records(client):
    test_client, _ = client
    test_client.post("/records", json=_payload())

    marker = test_client.patch("/records/2026-10-19/tasks/bed", json={"completed": True})
    assert marker.status_code == 400

    missing = test_client.patch("/records/2026-01-01/tasks/bath", json={"completed": True})
    assert missing.status_code == 404


def test_update_notes(client):
    test_client, _ = client
    test_client.post("/records", json=_payload())

    resp = test_client.patch("/records/2026-10-19/notes", json={"notes": "  tired  "})
    assert resp.status_code == 200
    assert resp.json()["record"]["notes"] == "tired"

    missing = test_client.patch("/records/2026-01-01/notes", json={"notes": "x"})
    assert missing.status_code == 404
