"""
Container Task Event Endpoints.

Entry points the platform calls on container task events:
- Container tasks created
- Container left a workstation

Passes for the same warehouse area are serialized; different areas run
concurrently.
"""
import asyncio
import logging
from collections import defaultdict
from typing import Dict, Optional

from fastapi import APIRouter, status

from container_priority.api.deps import ContainerTaskServiceDep
from container_priority.schemas.container_task import (
    ContainerLeaveEvent,
    ContainerTaskCreateEvent,
    PassAccepted,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Container Tasks"])

_area_locks: Dict[Optional[int], asyncio.Lock] = defaultdict(asyncio.Lock)


def area_lock(warehouse_area_id: Optional[int]) -> asyncio.Lock:
    return _area_locks[warehouse_area_id]


@router.post(
    "/created",
    response_model=PassAccepted,
    status_code=status.HTTP_202_ACCEPTED,
)
async def container_tasks_created(
    event: ContainerTaskCreateEvent,
    service: ContainerTaskServiceDep,
):
    """Re-rank after a batch of container tasks was created."""
    async with area_lock(event.warehouse_area_id):
        await service.create(event.container_tasks, event.container_task_type)
    return PassAccepted(task_count=len(event.container_tasks))


@router.post(
    "/leave",
    response_model=PassAccepted,
    status_code=status.HTTP_202_ACCEPTED,
)
async def container_leave(
    event: ContainerLeaveEvent,
    service: ContainerTaskServiceDep,
):
    """Report a container leaving a workstation and re-rank the remaining tasks."""
    async with area_lock(event.warehouse_area_id):
        await service.leave(event.container_operation, event.container_tasks)
    return PassAccepted(task_count=len(event.container_tasks))
