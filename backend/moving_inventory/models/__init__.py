"""SQLAlchemy models."""

from moving_inventory.models.inventory import (
    Inventory,
    InventoryStatus,
    Room,
    RoomItem,
    RoomType,
)
from moving_inventory.models.item_library import ItemLibraryEntry
from moving_inventory.models.audit import AuditLogEntry

__all__ = [
    "Inventory",
    "InventoryStatus",
    "Room",
    "RoomItem",
    "RoomType",
    "ItemLibraryEntry",
    "AuditLogEntry",
]
