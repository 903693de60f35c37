"""Outbound models: picking orders and the waves that release them."""
from enum import Enum
from typing import Optional

from sqlalchemy import String, Integer
from sqlalchemy.orm import Mapped, mapped_column

from container_priority.database import Base


class PickingOrderStatus(str, Enum):
    """Picking order status enumeration."""
    NEW = "NEW"                   # Not yet bound to a put wall slot
    ASSIGNED = "ASSIGNED"         # Bound to a slot
    PICKING = "PICKING"
    PICKED = "PICKED"
    CANCELLED = "CANCELLED"


class PickingOrder(Base):
    """Group of pick lines released together as part of a wave."""
    __tablename__ = "picking_orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_no: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    wave_no: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    warehouse_code: Mapped[str] = mapped_column(String(64), nullable=False)
    warehouse_area_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    status: Mapped[str] = mapped_column(
        String(50),
        default="NEW",
        nullable=False,
        index=True,
        comment="NEW, ASSIGNED, PICKING, PICKED, CANCELLED"
    )


class OutboundWave(Base):
    """Wave built upstream; carries the wave-level priority."""
    __tablename__ = "outbound_waves"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    wave_no: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    priority: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
        comment="0 means no upstream priority"
    )
