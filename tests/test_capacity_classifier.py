"""Tests for the busy / idle capacity classification."""
from conftest import FakeWarehouse, make_order, make_slot, make_station
from container_priority.models.station import (
    PutWallSlotStatus,
    WorkStationOperationType,
    WorkStationStatus,
)
from container_priority.schemas.container_task import CapacityMode
from container_priority.services.capacity_classifier import (
    CapacityClassifier,
    classify,
    working_stations,
)


def _orders(count):
    return [make_order(100 + i) for i in range(count)]


class TestClassify:

    def test_as_many_slots_as_orders_is_idle(self):
        slots = [make_slot(f"S{i}") for i in range(3)]
        assert classify([make_station()], slots, _orders(3)) == CapacityMode.IDLE

    def test_one_slot_short_is_busy(self):
        slots = [make_slot(f"S{i}") for i in range(2)]
        assert classify([make_station()], slots, _orders(3)) == CapacityMode.BUSY

    def test_nothing_pending_and_nothing_free_is_idle(self):
        assert classify([], [], []) == CapacityMode.IDLE

    def test_unusable_slots_are_not_counted(self):
        slots = [
            make_slot("OK"),
            make_slot("DISABLED", enable=False),
            make_slot("WALL-OFF", put_wall_enable=False),
            make_slot("BOUND", status=PutWallSlotStatus.BOUND),
            make_slot("OTHER-STATION", work_station_id=2),
        ]
        assert classify([make_station(1)], slots, _orders(1)) == CapacityMode.IDLE
        assert classify([make_station(1)], slots, _orders(2)) == CapacityMode.BUSY

    def test_slots_of_non_working_stations_are_not_counted(self):
        stations = [
            make_station(1, status=WorkStationStatus.OFFLINE),
            make_station(2, operation_type=WorkStationOperationType.PUT_AWAY),
        ]
        slots = [make_slot("A", work_station_id=1), make_slot("B", work_station_id=2)]
        assert working_stations(stations) == []
        assert classify(stations, slots, _orders(1)) == CapacityMode.BUSY


class TestCapacityClassifier:

    async def test_current_mode_from_stores(self):
        warehouse = FakeWarehouse(
            stations=[make_station(1), make_station(2, status=WorkStationStatus.OFFLINE)],
            slots=[make_slot("A", 1), make_slot("B", 1), make_slot("C", 2)],
            pending_orders=_orders(2),
        )
        assert await CapacityClassifier(warehouse.stores()).current_mode() == CapacityMode.IDLE

        warehouse.pending_orders = _orders(3)
        assert await CapacityClassifier(warehouse.stores()).current_mode() == CapacityMode.BUSY

    async def test_no_online_station_with_pending_orders_is_busy(self):
        warehouse = FakeWarehouse(slots=[make_slot("A", 1)], pending_orders=_orders(1))
        assert await CapacityClassifier(warehouse.stores()).current_mode() == CapacityMode.BUSY

    async def test_orders_of_other_areas_do_not_count(self):
        warehouse = FakeWarehouse(
            stations=[make_station(1, area_id=1)],
            slots=[make_slot("A", 1)],
            pending_orders=[make_order(100, area_id=1), make_order(101, area_id=2)],
        )
        assert await CapacityClassifier(warehouse.stores()).current_mode() == CapacityMode.IDLE
