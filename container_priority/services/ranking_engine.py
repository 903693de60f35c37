"""
Container Task Ranking Engine.

Orders the in-flight picking container tasks of every workstation touched by
a batch and assigns them dense integer priorities:
- Tasks whose orders carry an upstream priority (wave or operation task) keep it
- The rest are sorted per workstation by a multi-key comparator
- Assigned priorities count down from 999, one step per shelf

The busy / idle regimes differ only in the tie-break strategy.
"""
import logging
import sys
from abc import ABC
from collections import defaultdict
from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import Dict, Iterable, List, Optional, Set, Union

from container_priority.models.container_task import (
    BusinessTaskType,
    RelationStatus,
    PICKING_CONTAINER_TASK_TYPES,
)
from container_priority.models.operation_task import OperationTaskStatus
from container_priority.schemas.container_task import (
    CapacityMode,
    ContainerTaskDTO,
    OperationTaskDTO,
    Position,
)
from container_priority.services.snapshot_loader import RankingSnapshot

logger = logging.getLogger(__name__)

MAX_ASSIGNED_PRIORITY = 999
MIN_ASSIGNED_PRIORITY = 1
# Reserved for the last shelf of a workstation sequence to bound tail-wave latency
TAIL_PRIORITY = 997
UNKNOWN_DISTANCE = sys.maxsize


# ============================================================================
# TIE-BREAK STRATEGIES
# ============================================================================

class TieBreakStrategy(ABC):
    """
    Regime-specific part of the comparator.

    Supplies the destination fan-out of a shelf and whether pinned (static)
    shelves are kept out of the ranking.
    """
    mode: CapacityMode
    excludes_static_containers: bool = False

    def __init__(self, in_flight_tasks: Iterable[ContainerTaskDTO]):
        self._destinations: Dict[str, Set[str]] = defaultdict(set)
        for task in in_flight_tasks:
            if self.counts_towards_fan_out(task):
                self._destinations[task.container_code].update(task.destinations)

    def counts_towards_fan_out(self, task: ContainerTaskDTO) -> bool:
        return True

    def fan_out(self, container_code: str) -> int:
        """Distinct workstations still waiting for this shelf."""
        return len(self._destinations.get(container_code, ()))


class IdleTieBreak(TieBreakStrategy):
    """Idle area: fan-out over every in-flight task of the shelf."""
    mode = CapacityMode.IDLE


class BusyTieBreak(TieBreakStrategy):
    """Busy area: fan-out over tasks with live relations; static shelves stay put."""
    mode = CapacityMode.BUSY
    excludes_static_containers = True

    def counts_towards_fan_out(self, task: ContainerTaskDTO) -> bool:
        return any(r.relation_status in RelationStatus.processing_states() for r in task.relations)


def strategy_for(mode: CapacityMode, in_flight_tasks: Iterable[ContainerTaskDTO]) -> TieBreakStrategy:
    if mode == CapacityMode.IDLE:
        return IdleTieBreak(in_flight_tasks)
    return BusyTieBreak(in_flight_tasks)


# ============================================================================
# RESULT TYPES
# ============================================================================

@dataclass(frozen=True)
class PriorityAssignment:
    """Freshly derived priority for one container task."""
    task: ContainerTaskDTO
    priority: int
    work_station_id: Optional[str] = None
    upstream: bool = False


@dataclass
class Ranked:
    mode: CapacityMode
    assignments: List[PriorityAssignment] = field(default_factory=list)


@dataclass
class Failed:
    reason: str
    error: Optional[BaseException] = None


RankingOutcome = Union[Ranked, Failed]


# ============================================================================
# COMPARATOR
# ============================================================================

@dataclass(frozen=True)
class ContainerScore:
    """Comparator inputs for one shelf at one workstation."""
    container_code: str
    complete_orders: int
    complete_lines: int
    fan_out: int
    distance: int


def compare_containers(a: ContainerScore, b: ContainerScore) -> int:
    """Negative when a should be served before b."""
    if a.container_code == b.container_code:
        return 0

    # Shelves that finish whole orders free put wall slots first
    if a.complete_orders != b.complete_orders:
        logger.debug(
            f"{a.container_code} complete orders {a.complete_orders} vs "
            f"{b.container_code} complete orders {b.complete_orders}"
        )
        return -1 if a.complete_orders > b.complete_orders else 1

    if a.complete_lines != b.complete_lines:
        logger.debug(
            f"{a.container_code} order lines {a.complete_lines} vs "
            f"{b.container_code} order lines {b.complete_lines}"
        )
        return -1 if a.complete_lines > b.complete_lines else 1

    if a.fan_out != b.fan_out:
        logger.debug(
            f"{a.container_code} destinations {a.fan_out} vs "
            f"{b.container_code} destinations {b.fan_out}"
        )
        return -1 if a.fan_out < b.fan_out else 1

    if a.distance != b.distance:
        logger.debug(
            f"{a.container_code} distance {a.distance} vs "
            f"{b.container_code} distance {b.distance}"
        )
        return -1 if a.distance < b.distance else 1

    return 0


def manhattan_distance(a: Optional[Position], b: Optional[Position]) -> int:
    if a is None or b is None:
        return UNKNOWN_DISTANCE
    return abs(a.x - b.x) + abs(a.y - b.y)


def assign_priorities(group_count: int, promote_tail: bool = False) -> List[int]:
    """
    Priorities for consecutive shelf groups, best group first.

    Counts down from 999 and skips 997 unless the group is the last one.
    With promote_tail, a last group that would land below 997 gets 997.
    """
    priorities = []
    counter = MAX_ASSIGNED_PRIORITY + 1
    last = group_count - 1
    for index in range(group_count):
        counter -= 1
        if counter == TAIL_PRIORITY and index != last:
            counter -= 1
        priority = max(counter, MIN_ASSIGNED_PRIORITY)
        if promote_tail and index == last and priority < TAIL_PRIORITY:
            priority = TAIL_PRIORITY
        priorities.append(priority)
    return priorities


# ============================================================================
# ENGINE
# ============================================================================

class RankingEngine:
    """Ranks one snapshot; never raises, returns Ranked or Failed."""

    def __init__(self, promote_tail: bool = False):
        self.promote_tail = promote_tail

    def rank(
        self,
        snapshot: RankingSnapshot,
        strategy: TieBreakStrategy,
        static_container_codes: Iterable[str] = (),
    ) -> RankingOutcome:
        try:
            return Ranked(
                mode=strategy.mode,
                assignments=self._rank(snapshot, strategy, frozenset(static_container_codes)),
            )
        except Exception as e:
            logger.exception(
                f"Ranking {len(snapshot.batch)} container tasks in {strategy.mode.value} mode failed"
            )
            return Failed(reason=f"{type(e).__name__}: {e}", error=e)

    def scope(
        self,
        snapshot: RankingSnapshot,
        strategy: TieBreakStrategy,
        static_container_codes: frozenset = frozenset(),
    ) -> List[ContainerTaskDTO]:
        """In-flight tasks this pass re-ranks."""
        destinations = snapshot.destinations
        incomplete_ids = {
            op.id for op in snapshot.operation_tasks
            if OperationTaskStatus.is_non_complete(op.task_status)
        }
        scoped = []
        for task in snapshot.in_flight_tasks:
            if task.container_task_type not in PICKING_CONTAINER_TASK_TYPES:
                continue
            if task.business_task_type != BusinessTaskType.PICKING:
                continue
            if not any(d in destinations for d in task.destinations):
                continue
            # Shelves whose every pick line is done are on their way out
            if not any(r.customer_task_id in incomplete_ids for r in task.relations):
                continue
            if strategy.excludes_static_containers and task.container_code in static_container_codes:
                continue
            scoped.append(task)
        return scoped

    def upstream_priorities(
        self,
        tasks: Iterable[ContainerTaskDTO],
        snapshot: RankingSnapshot,
    ) -> Dict[str, int]:
        """Max of wave and operation-task priority over each shelf's live relations."""
        operation_tasks = {op.id: op for op in snapshot.operation_tasks}
        orders = {order.id: order for order in snapshot.picking_orders}
        waves = {wave.wave_no: wave for wave in snapshot.waves}

        priorities: Dict[str, int] = {}
        for task in tasks:
            for relation in task.relations:
                if relation.relation_status not in RelationStatus.processing_states():
                    continue
                op = operation_tasks.get(relation.customer_task_id)
                if op is None:
                    continue
                order = orders.get(op.order_id)
                wave = waves.get(order.wave_no) if order else None
                value = max(wave.priority if wave else 0, op.priority or 0)
                current = priorities.get(task.container_code)
                priorities[task.container_code] = value if current is None else max(current, value)
        return priorities

    def _rank(
        self,
        snapshot: RankingSnapshot,
        strategy: TieBreakStrategy,
        static_container_codes: frozenset,
    ) -> List[PriorityAssignment]:
        scoped = self.scope(snapshot, strategy, static_container_codes)
        upstream = self.upstream_priorities(scoped, snapshot)

        tasks_by_station: Dict[str, List[ContainerTaskDTO]] = defaultdict(list)
        for task in scoped:
            tasks_by_station[task.first_destination].append(task)

        operations_by_station: Dict[str, List[OperationTaskDTO]] = defaultdict(list)
        for op in snapshot.operation_tasks:
            if op.assigned_work_station_id is not None:
                operations_by_station[str(op.assigned_work_station_id)].append(op)

        stations = {str(ws.id): ws for ws in snapshot.work_stations}
        locations = {loc.shelf_code: loc for loc in snapshot.locations}

        assignments: List[PriorityAssignment] = []
        for station_id, station_tasks in tasks_by_station.items():
            unranked: List[ContainerTaskDTO] = []
            for task in station_tasks:
                value = upstream.get(task.container_code)
                if value:
                    assignments.append(PriorityAssignment(task, value, station_id, upstream=True))
                else:
                    unranked.append(task)

            if not unranked:
                continue

            station = stations.get(station_id)
            station_position = station.position if station else None
            assignments.extend(self._rank_station(
                station_id,
                unranked,
                operations_by_station.get(station_id, []),
                strategy,
                lambda code: manhattan_distance(
                    locations[code].position if code in locations else None,
                    station_position,
                ),
            ))

        logger.debug(
            f"Ranked {len(assignments)} of {len(scoped)} scoped tasks "
            f"across {len(tasks_by_station)} workstations in {strategy.mode.value} mode"
        )
        return assignments

    def _rank_station(
        self,
        station_id: str,
        tasks: List[ContainerTaskDTO],
        operation_tasks: List[OperationTaskDTO],
        strategy: TieBreakStrategy,
        distance_of,
    ) -> List[PriorityAssignment]:
        container_orders: Dict[str, Set[int]] = defaultdict(set)
        order_containers: Dict[int, Set[str]] = defaultdict(set)
        container_lines: Dict[str, Set[int]] = defaultdict(set)
        for op in operation_tasks:
            container_orders[op.source_container_code].add(op.order_id)
            order_containers[op.order_id].add(op.source_container_code)
            container_lines[op.source_container_code].add(op.detail_id)

        groups: Dict[str, List[ContainerTaskDTO]] = {}
        for task in tasks:
            groups.setdefault(task.container_code, []).append(task)

        scores = []
        for code in groups:
            complete_orders = sum(
                1 for order_id in container_orders.get(code, ())
                if order_containers[order_id] == {code}
            )
            scores.append(ContainerScore(
                container_code=code,
                complete_orders=complete_orders,
                complete_lines=len(container_lines.get(code, ())),
                fan_out=strategy.fan_out(code),
                distance=distance_of(code),
            ))

        scores.sort(key=cmp_to_key(compare_containers))
        priorities = assign_priorities(len(scores), self.promote_tail)

        assignments = []
        for score, priority in zip(scores, priorities):
            for task in groups[score.container_code]:
                assignments.append(PriorityAssignment(task, priority, station_id))
        return assignments
