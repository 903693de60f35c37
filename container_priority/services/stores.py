"""
Collaborator interfaces consumed by the re-prioritization engine.

The engine owns none of these entities. Each store is an async boundary to
the surrounding platform; services/sql_stores.py provides the SQLAlchemy
implementations and tests plug in in-memory fakes.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional

from container_priority.models.container_task import BusinessTaskType, ContainerTaskType
from container_priority.schemas.container_task import (
    CallbackApiType,
    ContainerTaskDTO,
    LocationDTO,
    OperationTaskDTO,
    OutboundWaveDTO,
    PickingOrderDTO,
    PriorityUpdate,
    PutWallSlotDTO,
    WorkStationDTO,
)


class ContainerTaskStore(ABC):

    @abstractmethod
    async def query_active_container_tasks(
        self,
        business_task_types: Iterable[BusinessTaskType],
        excluded_task_types: Iterable[ContainerTaskType],
    ) -> List[ContainerTaskDTO]:
        """Container tasks in NEW or PROCESSING status of the given business types."""

    @abstractmethod
    async def update_priorities(self, updates: List[PriorityUpdate]) -> None:
        """Persist new priorities by task code."""


class OperationTaskStore(ABC):

    @abstractmethod
    async def query_tasks(self, ids: Iterable[int]) -> List[OperationTaskDTO]:
        """Operation tasks by id, in any status."""


class PickingOrderStore(ABC):

    @abstractmethod
    async def find_orders_by_ids(self, ids: Iterable[int]) -> List[PickingOrderDTO]:
        ...

    @abstractmethod
    async def find_unassigned_orders(
        self,
        warehouse_area_ids: Optional[Iterable[int]],
    ) -> List[PickingOrderDTO]:
        """Picking orders still in NEW status, i.e. waiting for a staging slot. None means every area."""


class WaveStore(ABC):

    @abstractmethod
    async def find_waves_by_numbers(self, wave_nos: Iterable[str]) -> List[OutboundWaveDTO]:
        ...


class LocationStore(ABC):

    @abstractmethod
    async def get_positions_by_shelf_codes(
        self,
        shelf_codes: Iterable[str],
        warehouse_code: Optional[str],
    ) -> List[LocationDTO]:
        ...


class WorkStationStore(ABC):

    @abstractmethod
    async def query_online_work_stations(self) -> List[WorkStationDTO]:
        ...

    @abstractmethod
    async def query_work_stations_by_ids(self, ids: Iterable[int]) -> List[WorkStationDTO]:
        ...


class PutWallStore(ABC):

    @abstractmethod
    async def find_idle_slots(self, work_station_ids: Iterable[int]) -> List[PutWallSlotDTO]:
        """Slots of the given stations; callers still check enable and status flags."""


class CallbackChannel(ABC):

    @abstractmethod
    async def callback(self, api_type: CallbackApiType, biz_type: Optional[str], data: Any) -> None:
        """Fire-and-forget notification towards the RCS."""


@dataclass
class WarehouseStores:
    """Bundle of the stores one pass reads from and writes to."""
    container_tasks: ContainerTaskStore
    operation_tasks: OperationTaskStore
    picking_orders: PickingOrderStore
    waves: WaveStore
    locations: LocationStore
    work_stations: WorkStationStore
    put_walls: PutWallStore
