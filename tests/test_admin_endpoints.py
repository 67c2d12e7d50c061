"""Tests for admin cost endpoints."""

from fastapi.testclient import TestClient

from session_costs.api.app import create_app
from tests.conftest import make_photographer, make_school, make_session

HEADERS = {"X-Admin-Token": "admin-token"}


def _seed(container, **session_overrides) -> None:
    service = container.cost_service
    service.photographer_repository.add(make_photographer())
    service.school_repository.add(make_school())
    service.session_repository.add(make_session(**session_overrides))


def test_backfill_endpoint_runs_dry_run(container) -> None:
    _seed(container)
    client = TestClient(create_app(container))

    response = client.post(
        "/admin/backfill",
        json={
            "organization_id": "org-1",
            "start_date": "2024-03-01",
            "end_date": "2024-03-31",
        },
        headers=HEADERS,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["dry_run"] is True
    assert data["updated"] == 1
    assert container.cost_service.session_repository.recorded == []


def test_backfill_endpoint_requires_organization(container) -> None:
    client = TestClient(create_app(container))

    response = client.post("/admin/backfill", json={}, headers=HEADERS)

    assert response.status_code == 422


def test_backfill_endpoint_requires_token(container) -> None:
    client = TestClient(create_app(container))

    response = client.post("/admin/backfill", json={"organization_id": "org-1"})

    assert response.status_code == 401


def test_recalculate_endpoint_returns_cost(container) -> None:
    _seed(container)
    client = TestClient(create_app(container))

    response = client.post("/admin/sessions/session-1/recalculate", headers=HEADERS)

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["session_id"] == "session-1"
    assert data["cost_data"]["total_cost"] == 86.9
    assert data["cost_data"]["hours"] == 4


def test_recalculate_endpoint_unknown_session(container) -> None:
    client = TestClient(create_app(container))

    response = client.post("/admin/sessions/missing/recalculate", headers=HEADERS)

    assert response.status_code == 404


def test_recalculate_endpoint_missing_fields(container) -> None:
    _seed(container, start_time="")
    client = TestClient(create_app(container))

    response = client.post("/admin/sessions/session-1/recalculate", headers=HEADERS)

    assert response.status_code == 400


def test_recalculate_endpoint_time_off(container) -> None:
    _seed(container, is_time_off=True)
    client = TestClient(create_app(container))

    response = client.post("/admin/sessions/session-1/recalculate", headers=HEADERS)

    assert response.status_code == 200
    assert response.json() == {
        "success": False,
        "message": "Cannot calculate cost for time-off session",
    }
