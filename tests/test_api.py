"""HTTP layer tests with the service dependency replaced by a recording fake."""
import asyncio

import httpx
import pytest
from fastapi.testclient import TestClient

from container_priority.api.deps import get_container_task_service
from container_priority.main import app
from container_priority.services.callback_client import RcsCallbackError


class RecordingService:
    def __init__(self, fail_with=None):
        self.created = []
        self.left = []
        self.fail_with = fail_with

    async def create(self, container_tasks, container_task_type=None):
        if self.fail_with is not None:
            raise self.fail_with
        self.created.append((container_tasks, container_task_type))

    async def leave(self, container_operation, container_tasks):
        self.left.append((container_operation, container_tasks))


TASK = {
    "task_code": "T-1",
    "container_code": "A",
    "container_face": "F",
    "container_task_type": "OUTBOUND",
    "business_task_type": "PICKING",
    "destinations": ["1"],
    "relations": [{"customer_task_id": 7}],
}


@pytest.fixture
def service():
    return RecordingService()


@pytest.fixture
def client(service):
    app.dependency_overrides[get_container_task_service] = lambda: service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_created_event_is_accepted(client, service):
    response = client.post(
        "/api/v1/container-tasks/created",
        json={"container_task_type": "OUTBOUND", "container_tasks": [TASK], "warehouse_area_id": 1},
    )

    assert response.status_code == 202
    assert response.json() == {"status": "ACCEPTED", "task_count": 1}
    tasks, task_type = service.created[0]
    assert tasks[0].task_code == "T-1"
    assert tasks[0].customer_task_ids == [7]
    assert task_type.value == "OUTBOUND"


def test_created_event_needs_tasks(client, service):
    response = client.post("/api/v1/container-tasks/created", json={"container_tasks": []})
    assert response.status_code == 422
    assert service.created == []


def test_leave_event_is_accepted(client, service):
    response = client.post(
        "/api/v1/container-tasks/leave",
        json={
            "container_operation": {
                "work_station_id": 1,
                "container_operation_details": [{"container_code": "A", "location_code": "L-1"}],
            },
            "container_tasks": [TASK],
        },
    )

    assert response.status_code == 202
    operation, tasks = service.left[0]
    assert operation.work_station_id == 1
    assert [t.task_code for t in tasks] == ["T-1"]


def test_rcs_failure_maps_to_bad_gateway(client):
    app.dependency_overrides[get_container_task_service] = lambda: RecordingService(
        fail_with=RcsCallbackError(500, "rcs down", "CONTAINER_TASK_CREATE")
    )

    response = client.post("/api/v1/container-tasks/created", json={"container_tasks": [TASK]})

    assert response.status_code == 502
    body = response.json()
    assert body["type"] == "RcsCallbackError"
    assert body["rcs_status_code"] == 500
    assert body["api_type"] == "CONTAINER_TASK_CREATE"


class SlowService:
    """Holds each pass open briefly and records how many ran at once."""

    def __init__(self):
        self.running = 0
        self.max_running = 0

    async def create(self, container_tasks, container_task_type=None):
        self.running += 1
        self.max_running = max(self.max_running, self.running)
        await asyncio.sleep(0.05)
        self.running -= 1


async def _post_concurrently(area_ids):
    service = SlowService()
    app.dependency_overrides[get_container_task_service] = lambda: service
    try:
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            responses = await asyncio.gather(*[
                client.post(
                    "/api/v1/container-tasks/created",
                    json={"container_tasks": [TASK], "warehouse_area_id": area_id},
                )
                for area_id in area_ids
            ])
    finally:
        app.dependency_overrides.clear()
    assert all(r.status_code == 202 for r in responses)
    return service.max_running


async def test_passes_for_one_area_run_one_at_a_time():
    assert await _post_concurrently([901, 901, 901]) == 1


async def test_passes_for_different_areas_overlap():
    assert await _post_concurrently([902, 903]) == 2
