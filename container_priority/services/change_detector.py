"""Decides which re-ranked container tasks have to be persisted and announced."""
from dataclasses import dataclass, field
from typing import Iterable, List

from container_priority.models.container_task import ContainerTaskStatus
from container_priority.schemas.container_task import ContainerTaskDTO, PriorityUpdate
from container_priority.services.ranking_engine import PriorityAssignment


@dataclass
class ChangeSet:
    """Tasks whose priority must be written back, carrying the new value."""
    changed: List[ContainerTaskDTO] = field(default_factory=list)

    @property
    def notifiable(self) -> List[ContainerTaskDTO]:
        """
        NEW tasks, highest priority first.

        PROCESSING tasks are already being executed by the RCS, so a new
        priority has no effect there.
        """
        pending = [t for t in self.changed if t.task_status == ContainerTaskStatus.NEW]
        return sorted(pending, key=lambda t: t.task_priority or 0, reverse=True)

    @property
    def updates(self) -> List[PriorityUpdate]:
        return [
            PriorityUpdate(task_code=t.task_code, task_priority=t.task_priority)
            for t in self.changed
        ]

    def __len__(self) -> int:
        return len(self.changed)


def diff(assignments: Iterable[PriorityAssignment], new_task_codes: Iterable[str]) -> ChangeSet:
    """
    Tasks whose new priority differs from the stored one, plus every task of
    the incoming batch so new tasks are always announced.
    """
    new_codes = set(new_task_codes)
    changed = []
    for assignment in assignments:
        task = assignment.task
        if task.task_priority != assignment.priority or task.task_code in new_codes:
            changed.append(task.model_copy(update={"task_priority": assignment.priority}))
    return ChangeSet(changed=changed)
