from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from py_vapid.utils import b64urldecode
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from weekday_planner.core.config import settings
from weekday_planner.db.deps import get_db
from weekday_planner.db.models.push_subscription import PushSubscription
from weekday_planner.db.models.scheduled_notification import ScheduledNotification
from weekday_planner.db.models.vapid_key import VapidKey
from weekday_planner.main import app
from weekday_planner.services.vapid_keys import get_vapid_keys

ENDPOINT = "https://push.example.test/send/abc"


@pytest.fixture()
def client(monkeypatch):
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
    PushSubscription.__table__.create(bind=engine)
    ScheduledNotification.__table__.create(bind=engine)
    VapidKey.__table__.create(bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    monkeypatch.setattr(settings, "notifications_enabled", True)
    monkeypatch.setattr(settings, "notifications_provider", "noop")
    monkeypatch.setattr(settings, "vapid_public_key", None)
    monkeypatch.setattr(settings, "vapid_private_key", None)
    with TestClient(app) as test_client:
        yield test_client, TestingSessionLocal
    app.dependency_overrides.clear()


def _subscribe(test_client, endpoint: str = ENDPOINT, auth: str = "auth-secret"):
    return test_client.post(
        "/notifications/subscribe",
        json={"subscription": {"endpoint": endpoint, "keys": {"p256dh": "p256dh-key", "auth": auth}}},
    )


def _schedule(test_client, event_id: str = "bath", scheduled_time: str = "21:00", endpoint: str = ENDPOINT):
    return test_client.post(
        "/notifications/schedule",
        json={
            "subscription_endpoint": endpoint,
            "event_id": event_id,
            "event_label": "お風呂",
            "scheduled_time": scheduled_time,
        },
    )


def test_notifications_config(client):
    test_client, _ = client
    resp = test_client.get("/notifications/config")
    assert resp.status_code == 200
    data = resp.json()
    assert data["enabled"] is True
    assert data["provider"] == "noop"
    assert data["request_id"]


def test_public_key_is_generated_once(client):
    test_client, session_factory = client
    first = test_client.get("/notifications/vapid-public-key")
    second = test_client.get("/notifications/vapid-public-key")

    assert first.status_code == 200
    key = first.json()["public_key"]
    assert key == second.json()["public_key"]
    # Uncompressed P-256 point.
    assert len(b64urldecode(key)) == 65

    session = session_factory()
    try:
        assert session.query(VapidKey).count() == 1
    finally:
        session.close()


def test_configured_keys_take_precedence(client, monkeypatch):
    _, session_factory = client
    monkeypatch.setattr(settings, "vapid_public_key", "configured-public")
    monkeypatch.setattr(settings, "vapid_private_key", "configured-private")
    session = session_factory()
    try:
        keys = get_vapid_keys(session)
        assert keys.public_key == "configured-public"
        assert session.query(VapidKey).count() == 0
    finally:
        session.close()


def test_subscribe_upserts_by_endpoint(client):
    test_client, session_factory = client
    first = _subscribe(test_client)
    second = _subscribe(test_client, auth="rotated")

    assert first.status_code == 200
    assert first.json()["subscription_id"] == second.json()["subscription_id"]

    session = session_factory()
    try:
        subscriptions = session.query(PushSubscription).all()
        assert len(subscriptions) == 1
        assert subscriptions[0].keys_auth == "rotated"
    finally:
        session.close()


def test_subscribe_rejects_missing_keys(client):
    test_client, _ = client
    resp = test_client.post("/notifications/subscribe", json={"subscription": {"endpoint": ENDPOINT}})
    assert resp.status_code == 400


def test_schedule_and_list_reminders(client):
    test_client, _ = client
    _subscribe(test_client)

    assert _schedule(test_client, "study2", "21:00").status_code == 200
    assert _schedule(test_client, "bath", "20:00").status_code == 200

    resp = test_client.get("/notifications/scheduled", params={"endpoint": ENDPOINT})
    assert resp.status_code == 200
    reminders = resp.json()["notifications"]
    assert [reminder["event_id"] for reminder in reminders] == ["bath", "study2"]
    assert reminders[0]["scheduled_time"] == "20:00"


def test_rescheduling_event_replaces_binding(client):
    test_client, session_factory = client
    _subscribe(test_client)
    first = _schedule(test_client, "bath", "20:00").json()
    second = _schedule(test_client, "bath", "21:30").json()

    assert first["notification_id"] == second["notification_id"]
    session = session_factory()
    try:
        bindings = session.query(ScheduledNotification).all()
        assert len(bindings) == 1
        assert bindings[0].scheduled_time == "21:30"
    finally:
        session.close()


def test_schedule_validates_time_and_subscription(client):
    test_client, _ = client
    _subscribe(test_client)

    assert _schedule(test_client, scheduled_time="25:00").status_code == 400
    assert _schedule(test_client, scheduled_time="9:00").status_code == 400
    assert _schedule(test_client, endpoint="https://push.example.test/unknown").status_code == 404


def test_cancel_reminder(client):
    test_client, _ = client
    _subscribe(test_client)
    _schedule(test_client, "bath", "21:00")

    resp = test_client.post("/notifications/cancel", json={"subscription_endpoint": ENDPOINT, "event_id": "bath"})
    assert resp.status_code == 200
    listed = test_client.get("/notifications/scheduled", params={"endpoint": ENDPOINT}).json()
    assert listed["notifications"] == []

    unknown = test_client.post(
        "/notifications/cancel",
        json={"subscription_endpoint": "https://push.example.test/unknown", "event_id": "bath"},
    )
    assert unknown.status_code == 404


def test_unsubscribe_removes_bindings_and_is_idempotent(client):
    test_client, session_factory = client
    _subscribe(test_client)
    _schedule(test_client, "bath", "21:00")

    first = test_client.post("/notifications/unsubscribe", json={"endpoint": ENDPOINT})
    assert first.status_code == 200
    assert first.json()["removed"] is True

    second = test_client.post("/notifications/unsubscribe", json={"endpoint": ENDPOINT})
    assert second.status_code == 200
    assert second.json()["removed"] is False

    session = session_factory()
    try:
        assert session.query(ScheduledNotification).count() == 0
    finally:
        session.close()


def test_scheduled_for_unknown_endpoint_is_empty(client):
    test_client, _ = client
    resp = test_client.get("/notifications/scheduled", params={"endpoint": "https://push.example.test/none"})
    assert resp.status_code == 200
    assert resp.json()["notifications"] == []
