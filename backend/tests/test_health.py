from fastapi.testclient import TestClient


def _get_client() -> TestClient:
    from weekday_planner.main import app

    return TestClient(app)


def test_health_endpoint_returns_ok() -> None:
    client = _get_client()
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_request_id_generated_and_returned() -> None:
    client = _get_client()
    response = client.get("/health")

    assert response.headers.get("X-Request-Id")


def test_request_id_echoed_from_header() -> None:
    client = _get_client()
    req_id = "test-request-id-123"
    response = client.get("/health", headers={"X-Request-Id": req_id})

    assert response.headers.get("X-Request-Id") == req_id


def test_validation_errors_are_bad_requests() -> None:
    client = _get_client()
    response = client.post("/schedule/preview", json={"arrival_hour": "soon"}, headers={"X-Request-Id": "bad-1"})

    assert response.status_code == 400
    body = response.json()
    assert body["detail"] == "Invalid request"
    assert body["request_id"] == "bad-1"
    assert body["errors"]
