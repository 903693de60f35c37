"""
Station Models - picking workstations, put walls and shelf locations.

- WorkStation: physical picking station with a grid position
- PutWall / PutWallSlot: staging slots holding orders in progress at a station
- Location: grid position of a shelf in the storage area
"""
from enum import Enum
from typing import List, Optional

from sqlalchemy import String, Boolean, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from container_priority.database import Base


# ============================================================================
# ENUMS
# ============================================================================

class WorkStationStatus(str, Enum):
    """Workstation operating status."""
    ONLINE = "ONLINE"
    OFFLINE = "OFFLINE"
    PAUSED = "PAUSED"


class WorkStationOperationType(str, Enum):
    """Work currently performed at the station."""
    PICKING = "PICKING"
    PUT_AWAY = "PUT_AWAY"
    STOCKTAKE = "STOCKTAKE"


class PutWallSlotStatus(str, Enum):
    """Put wall slot status."""
    IDLE = "IDLE"                       # Free for a new picking order
    WAITING_BINDING = "WAITING_BINDING"
    BOUND = "BOUND"                     # Holding an order in progress
    DISPATCH = "DISPATCH"               # Order done, waiting for packing


# ============================================================================
# MODELS
# ============================================================================

class WorkStation(Base):
    """Picking workstation serviced by container tasks."""
    __tablename__ = "work_stations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    station_code: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    status: Mapped[str] = mapped_column(
        String(50),
        default="OFFLINE",
        nullable=False,
        comment="ONLINE, OFFLINE, PAUSED"
    )
    operation_type: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
        comment="PICKING, PUT_AWAY, STOCKTAKE"
    )
    position_x: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    position_y: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    warehouse_area_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)

    put_walls: Mapped[List["PutWall"]] = relationship(
        "PutWall",
        back_populates="work_station",
    )


class PutWall(Base):
    """Rack of staging slots attached to a workstation."""
    __tablename__ = "put_walls"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    put_wall_code: Mapped[str] = mapped_column(String(64), nullable=False)
    work_station_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("work_stations.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    enable: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    work_station: Mapped["WorkStation"] = relationship("WorkStation", back_populates="put_walls")
    put_wall_slots: Mapped[List["PutWallSlot"]] = relationship(
        "PutWallSlot",
        back_populates="put_wall",
        cascade="all, delete-orphan",
    )


class PutWallSlot(Base):
    """Single staging slot of a put wall."""
    __tablename__ = "put_wall_slots"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    put_wall_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("put_walls.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    slot_code: Mapped[str] = mapped_column(String(64), nullable=False)
    enable: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    status: Mapped[str] = mapped_column(
        String(50),
        default="IDLE",
        nullable=False,
        comment="IDLE, WAITING_BINDING, BOUND, DISPATCH"
    )

    put_wall: Mapped["PutWall"] = relationship("PutWall", back_populates="put_wall_slots")


class Location(Base):
    """Storage location of a shelf."""
    __tablename__ = "locations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    location_code: Mapped[str] = mapped_column(String(64), nullable=False)
    shelf_code: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)
    warehouse_code: Mapped[str] = mapped_column(String(64), nullable=False)
    position_x: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    position_y: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
