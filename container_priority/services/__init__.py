# Services module
from container_priority.services.container_task_service import ContainerTaskService
from container_priority.services.capacity_classifier import CapacityClassifier, classify
from container_priority.services.snapshot_loader import SnapshotLoader, RankingSnapshot
from container_priority.services.ranking_engine import (
    RankingEngine,
    Ranked,
    Failed,
    BusyTieBreak,
    IdleTieBreak,
    strategy_for,
)
from container_priority.services.change_detector import ChangeSet, diff
from container_priority.services.notifier import Notifier

__all__ = [
    "ContainerTaskService",
    "CapacityClassifier",
    "classify",
    "SnapshotLoader",
    "RankingSnapshot",
    "RankingEngine",
    "Ranked",
    "Failed",
    "BusyTieBreak",
    "IdleTieBreak",
    "strategy_for",
    "ChangeSet",
    "diff",
    "Notifier",
]
