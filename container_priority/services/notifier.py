"""Announces re-ranked container tasks to the RCS and stores their priorities."""
import logging
from typing import Iterable, Optional

from container_priority.models.container_task import ContainerTaskType
from container_priority.schemas.container_task import CallbackApiType, ContainerTaskDTO
from container_priority.services.change_detector import ChangeSet
from container_priority.services.stores import CallbackChannel, ContainerTaskStore

logger = logging.getLogger(__name__)


def biz_type_name(container_task_type: Optional[ContainerTaskType]) -> Optional[str]:
    return container_task_type.value if container_task_type is not None else None


class Notifier:
    """Last, side-effecting step of a pass."""

    def __init__(self, callback_channel: CallbackChannel, container_task_store: ContainerTaskStore):
        self.callback_channel = callback_channel
        self.container_task_store = container_task_store

    async def announce(
        self,
        task: ContainerTaskDTO,
        container_task_type: Optional[ContainerTaskType],
        new_customer_task_ids: Iterable[int],
    ) -> None:
        """CREATE when the task serves a just-created customer task, UPDATE otherwise."""
        new_ids = set(new_customer_task_ids)
        if any(customer_task_id in new_ids for customer_task_id in task.customer_task_ids):
            api_type = CallbackApiType.CONTAINER_TASK_CREATE
        else:
            api_type = CallbackApiType.CONTAINER_TASK_UPDATE

        await self.callback_channel.callback(
            api_type,
            biz_type_name(container_task_type),
            [task.model_dump(mode="json")],
        )

    async def notify(
        self,
        change_set: ChangeSet,
        container_task_type: Optional[ContainerTaskType],
        new_customer_task_ids: Iterable[int],
    ) -> None:
        new_ids = set(new_customer_task_ids)
        notifiable = change_set.notifiable
        for task in notifiable:
            await self.announce(task, container_task_type, new_ids)

        if change_set.changed:
            await self.container_task_store.update_priorities(change_set.updates)

        logger.info(
            f"Priority changed for {len(change_set)} container tasks, "
            f"{len(notifiable)} sent to RCS"
        )
