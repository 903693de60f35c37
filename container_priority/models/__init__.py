# Database models
from container_priority.models.container_task import (
    ContainerTask,
    ContainerTaskRelation,
    ContainerTaskType,
    BusinessTaskType,
    ContainerTaskStatus,
    RelationStatus,
    PICKING_CONTAINER_TASK_TYPES,
)
from container_priority.models.operation_task import OperationTask, OperationTaskStatus
from container_priority.models.outbound import PickingOrder, PickingOrderStatus, OutboundWave
from container_priority.models.station import (
    WorkStation,
    WorkStationStatus,
    WorkStationOperationType,
    PutWall,
    PutWallSlot,
    PutWallSlotStatus,
    Location,
)

__all__ = [
    "ContainerTask",
    "ContainerTaskRelation",
    "ContainerTaskType",
    "BusinessTaskType",
    "ContainerTaskStatus",
    "RelationStatus",
    "PICKING_CONTAINER_TASK_TYPES",
    "OperationTask",
    "OperationTaskStatus",
    "PickingOrder",
    "PickingOrderStatus",
    "OutboundWave",
    "WorkStation",
    "WorkStationStatus",
    "WorkStationOperationType",
    "PutWall",
    "PutWallSlot",
    "PutWallSlotStatus",
    "Location",
]
