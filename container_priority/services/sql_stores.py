"""SQLAlchemy implementations of the collaborator stores."""
import logging
from typing import Iterable, List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from container_priority.models.container_task import (
    BusinessTaskType,
    ContainerTask,
    ContainerTaskStatus,
    ContainerTaskType,
)
from container_priority.models.operation_task import OperationTask
from container_priority.models.outbound import OutboundWave, PickingOrder, PickingOrderStatus
from container_priority.models.station import (
    Location,
    PutWall,
    PutWallSlot,
    WorkStation,
    WorkStationStatus,
)
from container_priority.schemas.container_task import (
    ContainerTaskDTO,
    LocationDTO,
    OperationTaskDTO,
    OutboundWaveDTO,
    PickingOrderDTO,
    Position,
    PriorityUpdate,
    PutWallSlotDTO,
    WorkStationDTO,
)
from container_priority.services.stores import (
    ContainerTaskStore,
    LocationStore,
    OperationTaskStore,
    PickingOrderStore,
    PutWallStore,
    WarehouseStores,
    WaveStore,
    WorkStationStore,
)

logger = logging.getLogger(__name__)


def _position(x: Optional[int], y: Optional[int]) -> Optional[Position]:
    if x is None or y is None:
        return None
    return Position(x=x, y=y)


def _values(items: Iterable) -> List[str]:
    return [getattr(item, "value", item) for item in items]


def _work_station_dto(ws: WorkStation) -> WorkStationDTO:
    return WorkStationDTO(
        id=ws.id,
        station_code=ws.station_code,
        status=ws.status,
        operation_type=ws.operation_type,
        position=_position(ws.position_x, ws.position_y),
        warehouse_area_id=ws.warehouse_area_id,
    )


class SqlContainerTaskStore(ContainerTaskStore):

    def __init__(self, db: AsyncSession):
        self.db = db

    async def query_active_container_tasks(
        self,
        business_task_types: Iterable[BusinessTaskType],
        excluded_task_types: Iterable[ContainerTaskType],
    ) -> List[ContainerTaskDTO]:
        stmt = (
            select(ContainerTask)
            .options(selectinload(ContainerTask.relations))
            .where(
                ContainerTask.task_status.in_(_values(ContainerTaskStatus.processing_states())),
                ContainerTask.business_task_type.in_(_values(business_task_types)),
                ContainerTask.container_task_type.not_in(_values(excluded_task_types)),
            )
            .order_by(ContainerTask.id)
        )
        result = await self.db.execute(stmt)
        return [ContainerTaskDTO.model_validate(task) for task in result.scalars().all()]

    async def update_priorities(self, updates: List[PriorityUpdate]) -> None:
        for item in updates:
            await self.db.execute(
                update(ContainerTask)
                .where(ContainerTask.task_code == item.task_code)
                .values(task_priority=item.task_priority)
            )
        await self.db.commit()
        logger.debug(f"Saved priorities of {len(updates)} container tasks")


class SqlOperationTaskStore(OperationTaskStore):

    def __init__(self, db: AsyncSession):
        self.db = db

    async def query_tasks(self, ids: Iterable[int]) -> List[OperationTaskDTO]:
        stmt = select(OperationTask).where(OperationTask.id.in_(list(ids))).order_by(OperationTask.id)
        result = await self.db.execute(stmt)
        return [OperationTaskDTO.model_validate(op) for op in result.scalars().all()]


class SqlPickingOrderStore(PickingOrderStore):

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_orders_by_ids(self, ids: Iterable[int]) -> List[PickingOrderDTO]:
        stmt = select(PickingOrder).where(PickingOrder.id.in_(list(ids))).order_by(PickingOrder.id)
        result = await self.db.execute(stmt)
        return [PickingOrderDTO.model_validate(order) for order in result.scalars().all()]

    async def find_unassigned_orders(
        self,
        warehouse_area_ids: Optional[Iterable[int]],
    ) -> List[PickingOrderDTO]:
        stmt = select(PickingOrder).where(PickingOrder.status == PickingOrderStatus.NEW.value)
        if warehouse_area_ids is not None:
            stmt = stmt.where(PickingOrder.warehouse_area_id.in_(list(warehouse_area_ids)))
        result = await self.db.execute(stmt)
        return [PickingOrderDTO.model_validate(order) for order in result.scalars().all()]


class SqlWaveStore(WaveStore):

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_waves_by_numbers(self, wave_nos: Iterable[str]) -> List[OutboundWaveDTO]:
        stmt = select(OutboundWave).where(OutboundWave.wave_no.in_(list(wave_nos)))
        result = await self.db.execute(stmt)
        return [OutboundWaveDTO.model_validate(wave) for wave in result.scalars().all()]


class SqlLocationStore(LocationStore):

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_positions_by_shelf_codes(
        self,
        shelf_codes: Iterable[str],
        warehouse_code: Optional[str],
    ) -> List[LocationDTO]:
        stmt = select(Location).where(Location.shelf_code.in_(list(shelf_codes)))
        if warehouse_code:
            stmt = stmt.where(Location.warehouse_code == warehouse_code)
        result = await self.db.execute(stmt)
        return [
            LocationDTO(
                shelf_code=loc.shelf_code,
                location_code=loc.location_code,
                warehouse_code=loc.warehouse_code,
                position=_position(loc.position_x, loc.position_y),
            )
            for loc in result.scalars().all()
        ]


class SqlWorkStationStore(WorkStationStore):

    def __init__(self, db: AsyncSession):
        self.db = db

    async def query_online_work_stations(self) -> List[WorkStationDTO]:
        stmt = select(WorkStation).where(WorkStation.status == WorkStationStatus.ONLINE.value)
        result = await self.db.execute(stmt)
        return [_work_station_dto(ws) for ws in result.scalars().all()]

    async def query_work_stations_by_ids(self, ids: Iterable[int]) -> List[WorkStationDTO]:
        stmt = select(WorkStation).where(WorkStation.id.in_(list(ids)))
        result = await self.db.execute(stmt)
        return [_work_station_dto(ws) for ws in result.scalars().all()]


class SqlPutWallStore(PutWallStore):

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_idle_slots(self, work_station_ids: Iterable[int]) -> List[PutWallSlotDTO]:
        stmt = (
            select(PutWallSlot, PutWall)
            .join(PutWall, PutWallSlot.put_wall_id == PutWall.id)
            .where(PutWall.work_station_id.in_(list(work_station_ids)))
        )
        result = await self.db.execute(stmt)
        return [
            PutWallSlotDTO(
                slot_code=slot.slot_code,
                work_station_id=put_wall.work_station_id,
                enable=slot.enable,
                put_wall_enable=put_wall.enable,
                status=slot.status,
            )
            for slot, put_wall in result.all()
        ]


def sql_stores(db: AsyncSession) -> WarehouseStores:
    """All stores bound to one session."""
    return WarehouseStores(
        container_tasks=SqlContainerTaskStore(db),
        operation_tasks=SqlOperationTaskStore(db),
        picking_orders=SqlPickingOrderStore(db),
        waves=SqlWaveStore(db),
        locations=SqlLocationStore(db),
        work_stations=SqlWorkStationStore(db),
        put_walls=SqlPutWallStore(db),
    )
