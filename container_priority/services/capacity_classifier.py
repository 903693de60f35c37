"""Busy / idle classification of the picking area."""
import logging
from typing import List, Sequence

from container_priority.models.station import (
    PutWallSlotStatus,
    WorkStationOperationType,
    WorkStationStatus,
)
from container_priority.schemas.container_task import (
    CapacityMode,
    PickingOrderDTO,
    PutWallSlotDTO,
    WorkStationDTO,
)
from container_priority.services.stores import WarehouseStores

logger = logging.getLogger(__name__)


def working_stations(work_stations: Sequence[WorkStationDTO]) -> List[WorkStationDTO]:
    """Online stations currently doing picking."""
    return [
        ws for ws in work_stations
        if ws.status == WorkStationStatus.ONLINE
        and ws.operation_type == WorkStationOperationType.PICKING
    ]


def classify(
    work_stations: Sequence[WorkStationDTO],
    staging_slots: Sequence[PutWallSlotDTO],
    pending_orders: Sequence[PickingOrderDTO],
) -> CapacityMode:
    """
    IDLE when every order still waiting for a slot can get one right now.

    Counts enabled, idle slots on enabled put walls of working stations and
    compares them with the unassigned picking orders.
    """
    station_ids = {ws.id for ws in working_stations(work_stations)}
    idle_slots = [
        slot for slot in staging_slots
        if slot.put_wall_enable
        and slot.enable
        and slot.work_station_id in station_ids
        and slot.status == PutWallSlotStatus.IDLE
    ]

    mode = CapacityMode.IDLE if len(idle_slots) >= len(pending_orders) else CapacityMode.BUSY
    logger.debug(
        f"Capacity {mode.value}: {len(idle_slots)} idle slots for "
        f"{len(pending_orders)} unassigned picking orders"
    )
    return mode


class CapacityClassifier:
    """Loads both sides of the capacity comparison and classifies them."""

    def __init__(self, stores: WarehouseStores):
        self.stores = stores

    async def current_mode(self) -> CapacityMode:
        stations = working_stations(await self.stores.work_stations.query_online_work_stations())
        station_ids = [ws.id for ws in stations]
        area_ids = sorted({ws.warehouse_area_id for ws in stations if ws.warehouse_area_id is not None})

        slots = await self.stores.put_walls.find_idle_slots(station_ids) if station_ids else []
        # No working station means no area to narrow by; every waiting order counts
        pending_orders = await self.stores.picking_orders.find_unassigned_orders(area_ids or None)

        return classify(stations, slots, pending_orders)
