"""Operation task model: one pick line executed at a workstation."""
from enum import Enum
from typing import Optional

from sqlalchemy import String, Integer, Index
from sqlalchemy.orm import Mapped, mapped_column

from container_priority.database import Base


class OperationTaskStatus(str, Enum):
    """Operation task status enumeration."""
    NEW = "NEW"                   # Assigned to a station, not picked
    PROCESSING = "PROCESSING"     # Picking at the station
    COMPLETED = "COMPLETED"       # Line picked
    CANCELLED = "CANCELLED"

    @classmethod
    def is_non_complete(cls, status) -> bool:
        return status in (cls.NEW, cls.PROCESSING)


class OperationTask(Base):
    """
    Pick line executed at a workstation slot.

    The source container is the shelf that has to be brought to the station
    for this line.
    """
    __tablename__ = "operation_tasks"
    __table_args__ = (
        Index('ix_operation_tasks_station_status', 'assigned_work_station_id', 'task_status'),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    detail_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Picking order line"
    )
    source_container_code: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    assigned_work_station_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    assigned_slot_code: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    task_status: Mapped[str] = mapped_column(
        String(50),
        default="NEW",
        nullable=False,
        comment="NEW, PROCESSING, COMPLETED, CANCELLED"
    )
    priority: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
        comment="Inherited from the picking order"
    )
