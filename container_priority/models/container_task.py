"""
Container Task Models - robotic (RCS) shelf and tote transport tasks.

This module maps the container-transport tasks the engine re-prioritizes:
- ContainerTask: one RCS instruction moving a container towards its destinations
- ContainerTaskRelation: link from a container task to an upstream business task
"""
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from sqlalchemy import String, DateTime, ForeignKey, Integer, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from container_priority.database import Base
from container_priority.db_types import JSONType


# ============================================================================
# ENUMS
# ============================================================================

class ContainerTaskType(str, Enum):
    """How the container is moved."""
    TRANSFER = "TRANSFER"               # Pure relocation, never ranked
    PICKING = "PICKING"                 # Serves picking at a workstation
    OUTBOUND = "OUTBOUND"               # Serves outbound picking at a workstation
    GO_AHEAD = "GO_AHEAD"               # Face turn at the station, never ranked


class BusinessTaskType(str, Enum):
    """Business process that requested the move."""
    PICKING = "PICKING"
    INBOUND = "INBOUND"
    REPLENISH = "REPLENISH"
    STOCKTAKE = "STOCKTAKE"
    RELOCATION = "RELOCATION"


class ContainerTaskStatus(str, Enum):
    """Container task lifecycle status."""
    NEW = "NEW"                         # Known to the RCS, not started
    PROCESSING = "PROCESSING"           # RCS already executing
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    @classmethod
    def processing_states(cls) -> List["ContainerTaskStatus"]:
        return [cls.NEW, cls.PROCESSING]


class RelationStatus(str, Enum):
    """Lifecycle of a container task / business task link."""
    NEW = "NEW"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    @classmethod
    def processing_states(cls) -> List["RelationStatus"]:
        return [cls.NEW, cls.PROCESSING]


PICKING_CONTAINER_TASK_TYPES = (ContainerTaskType.PICKING, ContainerTaskType.OUTBOUND)


# ============================================================================
# MODELS
# ============================================================================

class ContainerTask(Base):
    """
    Robotic container transport task.

    Rows are created by the task-generation pipeline; this service only
    rewrites task_priority.
    """
    __tablename__ = "container_tasks"
    __table_args__ = (
        Index('ix_container_tasks_status_type', 'task_status', 'container_task_type'),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    task_code: Mapped[str] = mapped_column(
        String(64),
        unique=True,
        nullable=False,
        index=True,
        comment="Stable task identity shared with the RCS"
    )
    container_code: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        index=True,
        comment="Shelf / tote code"
    )
    container_face: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    container_task_type: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="TRANSFER, PICKING, OUTBOUND, GO_AHEAD"
    )
    business_task_type: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="PICKING, INBOUND, REPLENISH, STOCKTAKE, RELOCATION"
    )
    task_status: Mapped[str] = mapped_column(
        String(50),
        default="NEW",
        nullable=False,
        comment="NEW, PROCESSING, COMPLETED, CANCELLED"
    )
    task_priority: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        comment="Higher runs sooner; NULL or 0 means unranked"
    )
    destinations: Mapped[List[str]] = mapped_column(
        JSONType,
        default=list,
        nullable=False,
        comment="Ordered workstation ids, as strings"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False
    )

    relations: Mapped[List["ContainerTaskRelation"]] = relationship(
        "ContainerTaskRelation",
        back_populates="container_task",
        cascade="all, delete-orphan",
        order_by="ContainerTaskRelation.id",
    )

    def __repr__(self) -> str:
        return f"<ContainerTask(task_code='{self.task_code}', container='{self.container_code}')>"


class ContainerTaskRelation(Base):
    """Link from a container task to one upstream customer (operation) task."""
    __tablename__ = "container_task_relations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    container_task_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("container_tasks.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    customer_task_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    relation_status: Mapped[str] = mapped_column(
        String(50),
        default="NEW",
        nullable=False,
        comment="NEW, PROCESSING, COMPLETED, CANCELLED"
    )

    container_task: Mapped["ContainerTask"] = relationship(
        "ContainerTask",
        back_populates="relations"
    )
