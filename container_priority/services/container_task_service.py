"""
Container Task Service.

Entry point for the platform's container task events:
- create(): a batch of container tasks was generated
- leave(): a shelf left a workstation and its tasks are done

Both re-rank the in-flight picking container tasks of the affected
workstations: Capacity Classifier -> Snapshot Loader -> Ranking Engine ->
Change Detector -> Notifier.
"""
import logging
import time
from typing import Dict, List, Optional, Sequence

from container_priority.models.container_task import (
    BusinessTaskType,
    ContainerTaskType,
    PICKING_CONTAINER_TASK_TYPES,
)
from container_priority.schemas.container_task import (
    CallbackApiType,
    ContainerOperation,
    ContainerOperationDetail,
    ContainerTaskDTO,
)
from container_priority.services.capacity_classifier import CapacityClassifier
from container_priority.services.change_detector import diff
from container_priority.services.notifier import Notifier
from container_priority.services.ranking_engine import (
    Failed,
    RankingEngine,
    RankingOutcome,
    strategy_for,
)
from container_priority.services.snapshot_loader import SnapshotLoader
from container_priority.services.stores import CallbackChannel, WarehouseStores

logger = logging.getLogger(__name__)


class ContainerTaskService:
    """
    Re-prioritizes container tasks on create and leave events.

    static_container_codes are pinned shelves; they are only left out of the
    ranking while the picking area is busy.
    """

    def __init__(
        self,
        stores: WarehouseStores,
        callback_channel: CallbackChannel,
        static_container_codes: Sequence[str] = (),
        default_warehouse_code: Optional[str] = None,
        ranking_engine: Optional[RankingEngine] = None,
    ):
        self.stores = stores
        self.callback_channel = callback_channel
        self.static_container_codes = frozenset(static_container_codes)
        self.classifier = CapacityClassifier(stores)
        self.loader = SnapshotLoader(stores, default_warehouse_code)
        self.engine = ranking_engine or RankingEngine()
        self.notifier = Notifier(callback_channel, stores.container_tasks)

    # ========================================================================
    # EVENTS
    # ========================================================================

    async def create(
        self,
        container_tasks: Sequence[ContainerTaskDTO],
        container_task_type: Optional[ContainerTaskType] = None,
    ) -> Optional[RankingOutcome]:
        """
        Handle freshly created container tasks.

        Non-picking batches and TRANSFER tasks are announced right away. The
        picking tasks are ranked; if ranking fails they are announced unranked
        so the RCS never misses a batch.
        """
        tasks = list(container_tasks)
        if not tasks:
            logger.info("Empty container task batch, nothing to create")
            return None

        business_task_type = tasks[0].business_task_type
        new_customer_task_ids = [r.customer_task_id for task in tasks for r in task.relations]

        if business_task_type != BusinessTaskType.PICKING:
            for task in tasks:
                await self.notifier.announce(task, container_task_type, new_customer_task_ids)
            return None

        for task in tasks:
            if task.container_task_type == ContainerTaskType.TRANSFER:
                await self.notifier.announce(task, container_task_type, new_customer_task_ids)

        robot_tasks = [t for t in tasks if t.container_task_type in PICKING_CONTAINER_TASK_TYPES]
        if not robot_tasks:
            return None

        outcome = await self.resort(robot_tasks, container_task_type, new_customer_task_ids)
        if isinstance(outcome, Failed):
            logger.error(
                f"Resort robot container tasks failed ({outcome.reason}), "
                f"sending {len(robot_tasks)} tasks unranked"
            )
            for task in robot_tasks:
                await self.notifier.announce(task, container_task_type, new_customer_task_ids)
        return outcome

    async def leave(
        self,
        container_operation: ContainerOperation,
        container_tasks: Sequence[ContainerTaskDTO],
    ) -> Optional[RankingOutcome]:
        """Report the shelf leaving for all of its tasks, then re-rank what is left."""
        tasks = list(container_tasks)
        if not tasks:
            return None

        first = tasks[0]
        incoming = container_operation.container_operation_details
        source = incoming[0] if incoming else None
        details = [
            ContainerOperationDetail(
                task_code=task.task_code,
                container_code=task.container_code,
                container_face=task.container_face,
                location_code=source.location_code if source else None,
                operation_type=source.operation_type if source else None,
            )
            for task in tasks
        ]
        operation = container_operation.model_copy(update={"container_operation_details": details})
        await self.callback_channel.callback(
            CallbackApiType.CONTAINER_LEAVE,
            first.business_task_type.value,
            operation.model_dump(mode="json"),
        )

        # Shelves leaving non-picking stations do not change picking order
        if first.business_task_type != BusinessTaskType.PICKING:
            return None

        outcome = await self.resort(tasks, first.container_task_type, [])
        if isinstance(outcome, Failed):
            logger.error(f"Resort container tasks failed: {outcome.reason}")
        return outcome

    # ========================================================================
    # RANKING PASS
    # ========================================================================

    async def resort(
        self,
        batch: Sequence[ContainerTaskDTO],
        container_task_type: Optional[ContainerTaskType],
        new_customer_task_ids: List[int],
    ) -> Optional[RankingOutcome]:
        """
        One complete ranking pass for the workstations the batch touches.

        Returns None when there was nothing to rank. Store and callback
        failures propagate.
        """
        timings: Dict[str, float] = {}
        started = time.perf_counter()

        mode = await self.classifier.current_mode()
        snapshot = await self.loader.load(batch)
        timings["prepare data"] = time.perf_counter() - started
        if snapshot is None:
            return None

        mark = time.perf_counter()
        strategy = strategy_for(mode, snapshot.in_flight_tasks)
        outcome = self.engine.rank(snapshot, strategy, self.static_container_codes)
        timings["rank"] = time.perf_counter() - mark
        if isinstance(outcome, Failed):
            return outcome

        mark = time.perf_counter()
        change_set = diff(outcome.assignments, [task.task_code for task in batch])
        await self.notifier.notify(change_set, container_task_type, new_customer_task_ids)
        timings["notify and save"] = time.perf_counter() - mark

        logger.debug(
            f"Resort pass ({mode.value}) total {time.perf_counter() - started:.3f}s: "
            + ", ".join(f"{phase} {seconds:.3f}s" for phase, seconds in timings.items())
        )
        return outcome
