"""Regression tests for application route registration."""
from fastapi.routing import APIRoute

from weekday_planner.main import app


def _routes(path: str, method: str):
    return [
        route
        for route in app.routes
        if isinstance(route, APIRoute) and route.path == path and method in route.methods
    ]


def test_records_routes_registered_once() -> None:
    """The item route must not shadow or duplicate the collection route."""
    assert len(_routes("/records", "GET")) == 1
    assert len(_routes("/records/{record_date}", "GET")) == 1


def test_every_planner_surface_is_mounted() -> None:
    expected = [
        ("/schedule/preview", "POST"),
        ("/schedule/current-arrival", "GET"),
        ("/records", "POST"),
        ("/records/{record_date}", "DELETE"),
        ("/records/{record_date}/tasks/{task_id}", "PATCH"),
        ("/records/{record_date}/notes", "PATCH"),
        ("/analytics", "GET"),
        ("/notifications/vapid-public-key", "GET"),
        ("/notifications/subscribe", "POST"),
        ("/notifications/unsubscribe", "POST"),
        ("/notifications/schedule", "POST"),
        ("/notifications/cancel", "POST"),
        ("/notifications/scheduled", "GET"),
        ("/jobs/run-now", "POST"),
    ]
    for path, method in expected:
        assert len(_routes(path, method)) == 1, f"{method} {path}"
