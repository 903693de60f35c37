"""Shared fixtures: an in-memory warehouse standing in for every collaborator store."""
from typing import Iterable, List, Optional, Sequence

import pytest

from container_priority.models.container_task import (
    BusinessTaskType,
    ContainerTaskStatus,
    ContainerTaskType,
    RelationStatus,
)
from container_priority.models.operation_task import OperationTaskStatus
from container_priority.models.outbound import PickingOrderStatus
from container_priority.models.station import (
    PutWallSlotStatus,
    WorkStationOperationType,
    WorkStationStatus,
)
from container_priority.schemas.container_task import (
    ContainerTaskDTO,
    ContainerTaskRelationDTO,
    LocationDTO,
    OperationTaskDTO,
    OutboundWaveDTO,
    PickingOrderDTO,
    Position,
    PutWallSlotDTO,
    WorkStationDTO,
)
from container_priority.services.snapshot_loader import RankingSnapshot
from container_priority.services.stores import (
    CallbackChannel,
    ContainerTaskStore,
    LocationStore,
    OperationTaskStore,
    PickingOrderStore,
    PutWallStore,
    WarehouseStores,
    WaveStore,
    WorkStationStore,
)


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------

def make_task(
    task_code: str,
    container_code: str,
    destinations: Sequence[str] = ("1",),
    customer_task_ids: Sequence[int] = (),
    priority: Optional[int] = None,
    status: ContainerTaskStatus = ContainerTaskStatus.NEW,
    task_type: ContainerTaskType = ContainerTaskType.OUTBOUND,
    business_type: BusinessTaskType = BusinessTaskType.PICKING,
    relation_status: RelationStatus = RelationStatus.NEW,
) -> ContainerTaskDTO:
    return ContainerTaskDTO(
        task_code=task_code,
        container_code=container_code,
        container_face="F",
        container_task_type=task_type,
        business_task_type=business_type,
        task_status=status,
        task_priority=priority,
        destinations=list(destinations),
        relations=[
            ContainerTaskRelationDTO(customer_task_id=i, relation_status=relation_status)
            for i in customer_task_ids
        ],
    )


def make_op(
    op_id: int,
    order_id: int,
    detail_id: int,
    container_code: str,
    work_station_id: Optional[int] = 1,
    priority: int = 0,
    status: OperationTaskStatus = OperationTaskStatus.NEW,
) -> OperationTaskDTO:
    return OperationTaskDTO(
        id=op_id,
        order_id=order_id,
        detail_id=detail_id,
        source_container_code=container_code,
        assigned_work_station_id=work_station_id,
        task_status=status,
        priority=priority,
    )


def make_order(order_id: int, wave_no: str = "W-1", area_id: int = 1, status=PickingOrderStatus.ASSIGNED):
    return PickingOrderDTO(
        id=order_id,
        order_no=f"PO-{order_id}",
        wave_no=wave_no,
        warehouse_code="WH1",
        warehouse_area_id=area_id,
        status=status,
    )


def make_station(station_id: int = 1, x: Optional[int] = 0, y: Optional[int] = 0, area_id: int = 1,
                 status=WorkStationStatus.ONLINE, operation_type=WorkStationOperationType.PICKING):
    return WorkStationDTO(
        id=station_id,
        station_code=f"WS-{station_id}",
        status=status,
        operation_type=operation_type,
        position=Position(x=x, y=y) if x is not None and y is not None else None,
        warehouse_area_id=area_id,
    )


def make_location(shelf_code: str, x: int, y: int) -> LocationDTO:
    return LocationDTO(shelf_code=shelf_code, location_code=f"L-{shelf_code}",
                       warehouse_code="WH1", position=Position(x=x, y=y))


def make_slot(slot_code: str, work_station_id: int = 1, status=PutWallSlotStatus.IDLE,
              enable: bool = True, put_wall_enable: bool = True) -> PutWallSlotDTO:
    return PutWallSlotDTO(slot_code=slot_code, work_station_id=work_station_id, enable=enable,
                          put_wall_enable=put_wall_enable, status=status)


def make_snapshot(batch, in_flight=None, operation_tasks=(), orders=None, waves=(), locations=(),
                  stations=None) -> RankingSnapshot:
    operation_tasks = list(operation_tasks)
    if orders is None:
        orders = [make_order(i) for i in sorted({op.order_id for op in operation_tasks})]
    return RankingSnapshot(
        batch=list(batch),
        in_flight_tasks=list(in_flight if in_flight is not None else batch),
        operation_tasks=operation_tasks,
        picking_orders=list(orders),
        waves=list(waves) or [OutboundWaveDTO(wave_no="W-1", priority=0)],
        locations=list(locations),
        work_stations=list(stations) if stations is not None else [make_station()],
    )


# ---------------------------------------------------------------------------
# In-memory collaborators
# ---------------------------------------------------------------------------

class FakeWarehouse(
    ContainerTaskStore,
    OperationTaskStore,
    PickingOrderStore,
    WaveStore,
    LocationStore,
    WorkStationStore,
    PutWallStore,
):
    """Every store backed by plain lists; records writes."""

    def __init__(self, tasks=(), operation_tasks=(), orders=(), waves=(), locations=(),
                 stations=(), slots=(), pending_orders=()):
        self.tasks: List[ContainerTaskDTO] = list(tasks)
        self.operation_tasks = list(operation_tasks)
        self.orders = list(orders)
        self.waves = list(waves)
        self.locations = list(locations)
        self.stations = list(stations)
        self.slots = list(slots)
        self.pending_orders = list(pending_orders)
        self.saved_updates: List[list] = []
        self.active_queries = 0

    def stores(self) -> WarehouseStores:
        return WarehouseStores(
            container_tasks=self,
            operation_tasks=self,
            picking_orders=self,
            waves=self,
            locations=self,
            work_stations=self,
            put_walls=self,
        )

    async def query_active_container_tasks(self, business_task_types, excluded_task_types):
        self.active_queries += 1
        business = set(business_task_types)
        excluded = set(excluded_task_types)
        return [
            t for t in self.tasks
            if t.task_status in ContainerTaskStatus.processing_states()
            and t.business_task_type in business
            and t.container_task_type not in excluded
        ]

    async def update_priorities(self, updates):
        self.saved_updates.append(list(updates))
        by_code = {u.task_code: u.task_priority for u in updates}
        self.tasks = [
            t.model_copy(update={"task_priority": by_code[t.task_code]}) if t.task_code in by_code else t
            for t in self.tasks
        ]

    async def query_tasks(self, ids: Iterable[int]):
        wanted = set(ids)
        return [op for op in self.operation_tasks if op.id in wanted]

    async def find_orders_by_ids(self, ids):
        wanted = set(ids)
        return [o for o in self.orders if o.id in wanted]

    async def find_unassigned_orders(self, warehouse_area_ids):
        if warehouse_area_ids is None:
            return list(self.pending_orders)
        wanted = set(warehouse_area_ids)
        return [o for o in self.pending_orders if o.warehouse_area_id in wanted]

    async def find_waves_by_numbers(self, wave_nos):
        wanted = set(wave_nos)
        return [w for w in self.waves if w.wave_no in wanted]

    async def get_positions_by_shelf_codes(self, shelf_codes, warehouse_code):
        wanted = set(shelf_codes)
        return [loc for loc in self.locations if loc.shelf_code in wanted]

    async def query_online_work_stations(self):
        return [ws for ws in self.stations if ws.status == WorkStationStatus.ONLINE]

    async def query_work_stations_by_ids(self, ids):
        wanted = set(ids)
        return [ws for ws in self.stations if ws.id in wanted]

    async def find_idle_slots(self, work_station_ids):
        wanted = set(work_station_ids)
        return [s for s in self.slots if s.work_station_id in wanted]

    @property
    def priorities(self):
        return {t.task_code: t.task_priority for t in self.tasks}


class RecordingChannel(CallbackChannel):
    """Callback channel that remembers every message."""

    def __init__(self, fail_with: Optional[Exception] = None):
        self.calls = []
        self.fail_with = fail_with

    async def callback(self, api_type, biz_type, data):
        if self.fail_with is not None:
            raise self.fail_with
        self.calls.append((api_type, biz_type, data))

    @property
    def task_codes(self):
        return [item["task_code"] for _, _, data in self.calls if isinstance(data, list) for item in data]


@pytest.fixture
def channel():
    return RecordingChannel()
