import pytest
from fastapi.testclient import TestClient

from reqtrace import main
from reqtrace.services import requirement_service


@pytest.fixture
def failing_list(monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("database on fire")

    monkeypatch.setattr(requirement_service, "list_requirements", boom)


def test_unexpected_error_is_generic_500(client, world, act_as, failing_list):
    act_as(world.lead)
    safe_client = TestClient(main.app, raise_server_exceptions=False)

    response = safe_client.get("/api/requirements/project/1")

    assert response.status_code == 500
    assert response.json() == {"message": "Internal server error"}


def test_unexpected_error_detail_when_exposed(client, world, act_as, failing_list, monkeypatch):
    monkeypatch.setattr(main.settings, "expose_internal_errors", True)
    act_as(world.lead)
    safe_client = TestClient(main.app, raise_server_exceptions=False)

    response = safe_client.get("/api/requirements/project/1")

    assert response.status_code == 500
    assert response.json() == {"message": "database on fire"}


def test_known_errors_use_message_body(client, world, act_as):
    act_as(world.lead)

    missing = client.get("/api/requirements/999")
    invalid = client.post("/api/requirements", json={"project_id": 1, "title": "x", "priority": "URGENT"})
    no_route = client.get("/api/nothing-here")

    assert missing.status_code == 404 and missing.json() == {"message": "Requirement not found"}
    assert invalid.status_code == 400 and "priority" in invalid.json()["message"]
    assert no_route.status_code == 404 and "message" in no_route.json()
