"""Loads the read-only snapshot one ranking pass works on."""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from container_priority.models.container_task import (
    BusinessTaskType,
    ContainerTaskType,
    PICKING_CONTAINER_TASK_TYPES,
)
from container_priority.models.operation_task import OperationTaskStatus
from container_priority.schemas.container_task import (
    ContainerTaskDTO,
    LocationDTO,
    OperationTaskDTO,
    OutboundWaveDTO,
    PickingOrderDTO,
    WorkStationDTO,
)
from container_priority.services.stores import WarehouseStores

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RankingSnapshot:
    """Everything a pass needs, read once and never mutated."""
    batch: List[ContainerTaskDTO]
    in_flight_tasks: List[ContainerTaskDTO]
    operation_tasks: List[OperationTaskDTO]
    picking_orders: List[PickingOrderDTO]
    waves: List[OutboundWaveDTO]
    locations: List[LocationDTO] = field(default_factory=list)
    work_stations: List[WorkStationDTO] = field(default_factory=list)

    @property
    def destinations(self) -> set:
        return batch_destinations(self.batch)


def batch_destinations(batch: Sequence[ContainerTaskDTO]) -> set:
    return {d for task in batch for d in task.destinations}


def _station_ids(destinations) -> List[int]:
    # Destinations are workstation ids serialized as strings
    return sorted(int(d) for d in destinations if str(d).isdigit())


class SnapshotLoader:
    """
    Pulls in-flight container tasks and the reference data around them.

    Returns None when there is nothing left to rank; callers treat that as a
    normal early stop, not an error.
    """

    def __init__(self, stores: WarehouseStores, default_warehouse_code: Optional[str] = None):
        self.stores = stores
        self.default_warehouse_code = default_warehouse_code

    async def load(self, batch: Sequence[ContainerTaskDTO]) -> Optional[RankingSnapshot]:
        destinations = batch_destinations(batch)

        in_flight = await self.stores.container_tasks.query_active_container_tasks(
            [BusinessTaskType.PICKING], [ContainerTaskType.TRANSFER]
        )
        # GO_AHEAD face turns keep whatever priority they were created with
        in_flight = [t for t in in_flight if t.container_task_type in PICKING_CONTAINER_TASK_TYPES]
        if not in_flight:
            logger.info("All container tasks are completed")
            return None

        destination_tasks = [
            t for t in in_flight if any(d in destinations for d in t.destinations)
        ]
        operation_task_ids = sorted({
            r.customer_task_id for t in destination_tasks for r in t.relations
        })
        if not operation_task_ids:
            logger.info("All operation tasks are completed")
            return None

        operation_tasks = [
            op for op in await self.stores.operation_tasks.query_tasks(operation_task_ids)
            if OperationTaskStatus.is_non_complete(op.task_status)
        ]
        if not operation_tasks:
            logger.info("All operation tasks are completed")
            return None

        order_ids = sorted({op.order_id for op in operation_tasks})
        picking_orders = await self.stores.picking_orders.find_orders_by_ids(order_ids)
        if not picking_orders:
            logger.info(f"No picking orders found for {len(order_ids)} operation task orders")
            return None

        wave_nos = sorted({order.wave_no for order in picking_orders})
        waves = await self.stores.waves.find_waves_by_numbers(wave_nos)

        warehouse_code = picking_orders[0].warehouse_code or self.default_warehouse_code
        container_codes = sorted({t.container_code for t in destination_tasks})
        locations = await self.stores.locations.get_positions_by_shelf_codes(container_codes, warehouse_code)
        # Tasks are ranked at their first destination, which may lie outside the batch
        station_destinations = destinations | {
            t.first_destination for t in destination_tasks if t.first_destination is not None
        }
        work_stations = await self.stores.work_stations.query_work_stations_by_ids(
            _station_ids(station_destinations)
        )

        logger.debug(
            f"Snapshot loaded: {len(in_flight)} in-flight tasks, {len(operation_tasks)} operation tasks, "
            f"{len(picking_orders)} orders, {len(waves)} waves, {len(locations)} locations"
        )

        return RankingSnapshot(
            batch=list(batch),
            in_flight_tasks=in_flight,
            operation_tasks=operation_tasks,
            picking_orders=picking_orders,
            waves=waves,
            locations=locations,
            work_stations=work_stations,
        )
