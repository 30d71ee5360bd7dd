"""Unit tests for registration queue routes."""

from datetime import UTC, datetime
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.testclient import TestClient

from coursehub.api.dependencies import get_catalog, get_queue
from coursehub.api.models import APIResponse
from coursehub.api.routes import registration
from coursehub.catalog import CourseCatalog, CourseNotFoundError
from coursehub.gateway import RegistrationResult
from coursehub.registration import (
    InMemoryIntentStore,
    IntentNotFoundError,
    InvalidIntentError,
    RegistrationQueue,
)

HEADERS = {"X-User-Id": "user-1"}
NOW = datetime(2026, 4, 1, 12, 0, tzinfo=UTC)

ENQUEUE_BODY = {
    "schedule_id": "schedule-1",
    "sections": [
        {"course_code": "CS1", "section_id": "cs1-a"},
        {"course_code": "MATH1", "section_id": "math1-b"},
    ],
    "registration_date": "2026-04-01T08:00:00-04:00",
}


@pytest.fixture
def gateway() -> MagicMock:
    mock = MagicMock()
    mock.is_connected.return_value = True
    mock.register.return_value = RegistrationResult(success=True, message="ok")
    return mock


@pytest.fixture
def queue(gateway: MagicMock) -> RegistrationQueue:
    return RegistrationQueue(InMemoryIntentStore(), gateway, clock=lambda: NOW)


@pytest.fixture
def app(small_catalog: CourseCatalog, queue: RegistrationQueue):
    """Create a test FastAPI app with mocked dependencies."""
    app = FastAPI()

    def override_get_catalog():
        yield small_catalog

    def override_get_queue():
        yield queue

    app.dependency_overrides[get_catalog] = override_get_catalog
    app.dependency_overrides[get_queue] = override_get_queue

    @app.exception_handler(IntentNotFoundError)
    async def intent_not_found_handler(request: Request, exc: IntentNotFoundError):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=APIResponse[None](
                data=None, error="Registration intent not found"
            ).model_dump(),
        )

    @app.exception_handler(CourseNotFoundError)
    async def course_not_found_handler(request: Request, exc: CourseNotFoundError):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=APIResponse[None](data=None, error=str(exc)).model_dump(),
        )

    @app.exception_handler(InvalidIntentError)
    async def invalid_intent_handler(request: Request, exc: InvalidIntentError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=APIResponse[None](data=None, error=str(exc)).model_dump(),
        )

    app.include_router(registration.router, prefix="/api/v1")

    return app


@pytest.fixture
def client(app: FastAPI):
    """Create a test client."""
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client


def _enqueue(client: TestClient, headers: dict[str, str] = HEADERS) -> dict:
    response = client.post("/api/v1/registration/queue", json=ENQUEUE_BODY, headers=headers)
    assert response.status_code == 201
    return response.json()["data"]


@pytest.mark.unit
class TestEnqueue:
    """Tests for POST /registration/queue."""

    def test_enqueue(self, client: TestClient) -> None:
        """201 with a pending intent; the target is stored in UTC."""
        intent = _enqueue(client)

        assert intent["status"] == "pending"
        assert intent["attempts"] == 0
        assert intent["user_id"] == "user-1"
        assert intent["schedule_id"] == "schedule-1"
        assert [s["section_id"] for s in intent["sections"]] == ["cs1-a", "math1-b"]
        assert intent["sections"][1]["course_name"] == "Calculus I"
        assert datetime.fromisoformat(intent["target_instant"]) == NOW

    def test_unknown_section(self, client: TestClient) -> None:
        body = {**ENQUEUE_BODY, "sections": [{"course_code": "CS1", "section_id": "cs1-z"}]}

        response = client.post("/api/v1/registration/queue", json=body, headers=HEADERS)

        assert response.status_code == 400
        assert "cs1-z" in response.json()["error"]

    def test_unknown_course(self, client: TestClient) -> None:
        body = {**ENQUEUE_BODY, "sections": [{"course_code": "BIO9", "section_id": "x"}]}

        response = client.post("/api/v1/registration/queue", json=body, headers=HEADERS)

        assert response.status_code == 404

    @pytest.mark.parametrize(
        "override",
        [
            {"sections": []},
            {"schedule_id": " "},
            {"registration_date": "2026-04-01T08:00:00"},
        ],
        ids=["no-sections", "blank-schedule", "naive-date"],
    )
    def test_invalid_intent(self, client: TestClient, override: dict) -> None:
        response = client.post(
            "/api/v1/registration/queue", json={**ENQUEUE_BODY, **override}, headers=HEADERS
        )

        assert response.status_code == 400
        assert response.json()["data"] is None

    def test_missing_user(self, client: TestClient) -> None:
        response = client.post("/api/v1/registration/queue", json=ENQUEUE_BODY)

        assert response.status_code == 401


@pytest.mark.unit
class TestQueueRoutes:
    """Tests for listing, reading, removing and sweeping intents."""

    def test_list_only_own_intents(self, client: TestClient) -> None:
        mine = _enqueue(client)
        _enqueue(client, headers={"X-User-Id": "user-2"})

        response = client.get("/api/v1/registration/queue", headers=HEADERS)

        assert response.status_code == 200
        assert [i["id"] for i in response.json()["data"]] == [mine["id"]]

    def test_get_intent(self, client: TestClient) -> None:
        intent = _enqueue(client)

        response = client.get(f"/api/v1/registration/queue/{intent['id']}", headers=HEADERS)

        assert response.status_code == 200
        assert response.json()["data"]["id"] == intent["id"]

    def test_get_other_users_intent(self, client: TestClient) -> None:
        intent = _enqueue(client)

        response = client.get(
            f"/api/v1/registration/queue/{intent['id']}", headers={"X-User-Id": "user-2"}
        )

        assert response.status_code == 404
        assert response.json()["error"] == "Registration intent not found"

    def test_get_unknown(self, client: TestClient) -> None:
        response = client.get("/api/v1/registration/queue/intent-nope", headers=HEADERS)

        assert response.status_code == 404

    def test_remove(self, client: TestClient, queue: RegistrationQueue) -> None:
        intent = _enqueue(client)

        response = client.delete(f"/api/v1/registration/queue/{intent['id']}", headers=HEADERS)

        assert response.status_code == 204
        assert queue.list_all() == []

    def test_remove_other_users_intent(self, client: TestClient, queue: RegistrationQueue) -> None:
        intent = _enqueue(client)

        response = client.delete(
            f"/api/v1/registration/queue/{intent['id']}", headers={"X-User-Id": "user-2"}
        )

        assert response.status_code == 404
        assert len(queue.list_all()) == 1

    def test_tick(self, client: TestClient, gateway: MagicMock) -> None:
        intent = _enqueue(client)

        response = client.post("/api/v1/registration/queue/tick", headers=HEADERS)

        assert response.status_code == 200
        assert response.json()["data"] == {
            "promoted": 1,
            "attempted": 1,
            "succeeded": 1,
            "retried": 0,
            "failed": 0,
            "skipped": 0,
            "errors": 0,
        }
        stored = client.get(f"/api/v1/registration/queue/{intent['id']}", headers=HEADERS)
        assert stored.json()["data"]["status"] == "success"
        gateway.register.assert_called_once()
