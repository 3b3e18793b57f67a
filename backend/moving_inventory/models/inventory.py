"""Inventory, room and room item models."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from moving_inventory.db.base import Base, TimestampMixin


class InventoryStatus(str, Enum):
    """Lifecycle status of an inventory."""

    DRAFT = "draft"
    IN_PROGRESS = "in_progress"
    SUBMITTED = "submitted"
    LOCKED = "locked"


class RoomType(str, Enum):
    """Closed set of room types a customer can add."""

    LIVING_ROOM = "living_room"
    MASTER_BEDROOM = "master_bedroom"
    BEDROOM = "bedroom"
    KITCHEN = "kitchen"
    DINING_ROOM = "dining_room"
    BATHROOM = "bathroom"
    GARAGE = "garage"
    OFFICE = "office"
    BASEMENT = "basement"
    ATTIC = "attic"
    STORAGE = "storage"
    OUTDOOR = "outdoor"
    OTHER = "other"


class Inventory(TimestampMixin, Base):
    """One customer move. The token is the only customer-facing identity."""

    __tablename__ = "inventories"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    token: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)

    customer_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    customer_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    customer_phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    move_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    from_address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    to_address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    status: Mapped[InventoryStatus] = mapped_column(
        SQLEnum(InventoryStatus), default=InventoryStatus.DRAFT, nullable=False, index=True
    )
    # Kept in step with status: is_locked is True iff status == LOCKED
    is_locked: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    locked_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    total_items: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_cu_ft: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"), nullable=False)
    total_weight: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"), nullable=False)

    ghl_contact_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    ghl_submitted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    ghl_webhook_payload: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    internal_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)  # admin only
    submitted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # Relationships
    rooms: Mapped[List["Room"]] = relationship(
        "Room",
        back_populates="inventory",
        cascade="all, delete-orphan",
        order_by="Room.sort_order",
    )


class Room(TimestampMixin, Base):
    """A room within an inventory."""

    __tablename__ = "rooms"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    inventory_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("inventories.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type: Mapped[RoomType] = mapped_column(SQLEnum(RoomType), nullable=False)
    custom_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_complete: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Relationships
    inventory: Mapped["Inventory"] = relationship("Inventory", back_populates="rooms")
    items: Mapped[List["RoomItem"]] = relationship(
        "RoomItem",
        back_populates="room",
        cascade="all, delete-orphan",
        order_by="RoomItem.created_at",
    )

    @property
    def display_name(self) -> str:
        """Custom name if set, else the room type with spaces."""
        return self.custom_name or self.type.value.replace("_", " ")


class RoomItem(TimestampMixin, Base):
    """A line item in a room.

    ``inventory_id`` duplicates ``room.inventory_id`` so totals can be
    recomputed without joining through rooms.
    """

    __tablename__ = "room_items"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    room_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False, index=True
    )
    inventory_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("inventories.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Item reference
    item_library_id: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    # Quantity & measurements
    quantity: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    cu_ft_per_item: Mapped[Decimal] = mapped_column(Numeric(8, 2), default=Decimal("0"), nullable=False)
    weight_per_item: Mapped[Decimal] = mapped_column(Numeric(8, 2), default=Decimal("0"), nullable=False)
    total_cu_ft: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"), nullable=False)
    total_weight: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"), nullable=False)

    # Flags
    is_specialty_item: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    requires_disassembly: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_fragile: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_high_value: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    images: Mapped[List[str]] = mapped_column(JSON, default=list, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Relationships
    room: Mapped["Room"] = relationship("Room", back_populates="items")
