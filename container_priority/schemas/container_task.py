"""
Pydantic schemas for container task re-prioritization.

Snapshot DTOs read from the collaborator stores, the priority update written
back, and the event payloads exchanged with the RCS.
"""
from typing import Optional, List, Any
from enum import Enum

from pydantic import BaseModel, Field, ConfigDict

from container_priority.models.container_task import (
    ContainerTaskType,
    BusinessTaskType,
    ContainerTaskStatus,
    RelationStatus,
)
from container_priority.models.operation_task import OperationTaskStatus
from container_priority.models.outbound import PickingOrderStatus
from container_priority.models.station import (
    WorkStationStatus,
    WorkStationOperationType,
    PutWallSlotStatus,
)


# ============================================================================
# ENUMS
# ============================================================================

class CallbackApiType(str, Enum):
    CONTAINER_TASK_CREATE = "CONTAINER_TASK_CREATE"
    CONTAINER_TASK_UPDATE = "CONTAINER_TASK_UPDATE"
    CONTAINER_LEAVE = "CONTAINER_LEAVE"


class CapacityMode(str, Enum):
    IDLE = "IDLE"
    BUSY = "BUSY"


# ============================================================================
# SNAPSHOT SCHEMAS
# ============================================================================

class Position(BaseModel):
    """Grid position in warehouse map units."""
    x: int
    y: int


class ContainerTaskRelationDTO(BaseModel):
    """Link between a container task and an upstream customer task."""
    customer_task_id: int
    relation_status: RelationStatus = RelationStatus.NEW

    model_config = ConfigDict(from_attributes=True)


class ContainerTaskDTO(BaseModel):
    """In-flight container task as seen by the engine."""
    id: Optional[int] = None
    task_code: str
    container_code: str
    container_face: Optional[str] = None
    container_task_type: ContainerTaskType
    business_task_type: BusinessTaskType
    task_status: ContainerTaskStatus = ContainerTaskStatus.NEW
    task_priority: Optional[int] = None
    destinations: List[str] = Field(default_factory=list)
    relations: List[ContainerTaskRelationDTO] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)

    @property
    def first_destination(self) -> Optional[str]:
        return self.destinations[0] if self.destinations else None

    @property
    def customer_task_ids(self) -> List[int]:
        return [r.customer_task_id for r in self.relations]


class OperationTaskDTO(BaseModel):
    id: int
    order_id: int
    detail_id: int
    source_container_code: str
    assigned_work_station_id: Optional[int] = None
    assigned_slot_code: Optional[str] = None
    task_status: OperationTaskStatus = OperationTaskStatus.NEW
    priority: int = 0

    model_config = ConfigDict(from_attributes=True)


class PickingOrderDTO(BaseModel):
    id: int
    order_no: Optional[str] = None
    wave_no: str
    warehouse_code: str
    warehouse_area_id: Optional[int] = None
    status: PickingOrderStatus = PickingOrderStatus.NEW

    model_config = ConfigDict(from_attributes=True)


class OutboundWaveDTO(BaseModel):
    wave_no: str
    priority: int = 0

    model_config = ConfigDict(from_attributes=True)


class WorkStationDTO(BaseModel):
    id: int
    station_code: str
    status: WorkStationStatus = WorkStationStatus.ONLINE
    operation_type: Optional[WorkStationOperationType] = None
    position: Optional[Position] = None
    warehouse_area_id: Optional[int] = None


class LocationDTO(BaseModel):
    shelf_code: str
    location_code: Optional[str] = None
    warehouse_code: Optional[str] = None
    position: Optional[Position] = None


class PutWallSlotDTO(BaseModel):
    slot_code: str
    work_station_id: int
    enable: bool = True
    put_wall_enable: bool = True
    status: PutWallSlotStatus = PutWallSlotStatus.IDLE


# ============================================================================
# WRITE-BACK AND EVENT SCHEMAS
# ============================================================================

class PriorityUpdate(BaseModel):
    """New priority for one container task."""
    task_code: str
    task_priority: int


class CallbackMessage(BaseModel):
    """Envelope posted to the RCS callback channel."""
    biz_type: Optional[str] = None
    data: Any = None


class ContainerOperationDetail(BaseModel):
    task_code: Optional[str] = None
    container_code: str
    container_face: Optional[str] = None
    location_code: Optional[str] = None
    operation_type: Optional[str] = None


class ContainerOperation(BaseModel):
    """Container physically leaving a workstation."""
    work_station_id: Optional[int] = None
    container_operation_details: List[ContainerOperationDetail] = Field(default_factory=list)


class ContainerTaskCreateEvent(BaseModel):
    """Batch of freshly created container tasks."""
    container_task_type: Optional[ContainerTaskType] = None
    container_tasks: List[ContainerTaskDTO] = Field(..., min_length=1)
    warehouse_area_id: Optional[int] = Field(
        None,
        description="Passes for the same area are serialized"
    )


class ContainerLeaveEvent(BaseModel):
    """Container left a workstation; its tasks are finished."""
    container_operation: ContainerOperation
    container_tasks: List[ContainerTaskDTO] = Field(default_factory=list)
    warehouse_area_id: Optional[int] = None


class PassAccepted(BaseModel):
    status: str = "ACCEPTED"
    task_count: int
