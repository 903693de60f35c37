"""Tests for announcing ranked container tasks and persisting their priorities."""
import pytest

from conftest import FakeWarehouse, RecordingChannel, make_task
from container_priority.models.container_task import ContainerTaskType
from container_priority.schemas.container_task import CallbackApiType
from container_priority.services.callback_client import RcsCallbackError
from container_priority.services.change_detector import ChangeSet
from container_priority.services.notifier import Notifier, biz_type_name


def test_biz_type_name():
    assert biz_type_name(ContainerTaskType.OUTBOUND) == "OUTBOUND"
    assert biz_type_name(None) is None


async def test_create_when_task_serves_new_customer_task(channel):
    notifier = Notifier(channel, FakeWarehouse())
    await notifier.announce(make_task("T-1", "A", customer_task_ids=[7, 8]), ContainerTaskType.OUTBOUND, [8])

    api_type, biz_type, data = channel.calls[0]
    assert api_type == CallbackApiType.CONTAINER_TASK_CREATE
    assert biz_type == "OUTBOUND"
    assert data[0]["task_code"] == "T-1"
    assert data[0]["container_code"] == "A"


async def test_update_for_existing_task(channel):
    notifier = Notifier(channel, FakeWarehouse())
    await notifier.announce(make_task("T-1", "A", customer_task_ids=[7]), ContainerTaskType.OUTBOUND, [8])
    assert channel.calls[0][0] == CallbackApiType.CONTAINER_TASK_UPDATE


async def test_notify_sends_in_priority_order_and_saves_once(channel):
    warehouse = FakeWarehouse(tasks=[make_task("T-1", "A"), make_task("T-2", "B")])
    change_set = ChangeSet(changed=[
        make_task("T-1", "A", priority=998),
        make_task("T-2", "B", priority=999),
    ])

    await Notifier(channel, warehouse).notify(change_set, ContainerTaskType.OUTBOUND, [])

    assert channel.task_codes == ["T-2", "T-1"]
    assert len(warehouse.saved_updates) == 1
    assert warehouse.priorities == {"T-1": 998, "T-2": 999}


async def test_notify_without_changes_writes_nothing(channel):
    warehouse = FakeWarehouse()
    await Notifier(channel, warehouse).notify(ChangeSet(), ContainerTaskType.OUTBOUND, [])
    assert channel.calls == []
    assert warehouse.saved_updates == []


async def test_callback_failure_propagates_before_saving():
    warehouse = FakeWarehouse()
    channel = RecordingChannel(fail_with=RcsCallbackError(500, "boom", "CONTAINER_TASK_UPDATE"))
    change_set = ChangeSet(changed=[make_task("T-1", "A", priority=999)])

    with pytest.raises(RcsCallbackError):
        await Notifier(channel, warehouse).notify(change_set, ContainerTaskType.OUTBOUND, [])
    assert warehouse.saved_updates == []
