"""Room service - room lifecycle within an inventory.

Rooms are appended with ``sort_order`` equal to the number of rooms that
already exist; there is no gap filling on delete.

``update`` deliberately has no lock guard while ``create`` and ``delete`` do,
so room completion can still be toggled on a locked inventory.
"""

import logging
import uuid
from typing import List, Optional, Union

from sqlalchemy.orm import Session, selectinload

from moving_inventory.core.exceptions import (
    InventoryLockedError,
    InventoryNotFoundError,
    RoomNotFoundError,
)
from moving_inventory.db.base import utcnow
from moving_inventory.db.session import transaction
from moving_inventory.models.inventory import Inventory, Room, RoomType
from moving_inventory.schemas.audit import Actor, AuditAction, RoomPayload
from moving_inventory.schemas.inventory import RoomUpdate
from moving_inventory.services.audit_service import ClientInfo
from moving_inventory.services.inventory_service import InventoryService

logger = logging.getLogger(__name__)


class RoomService:
    """Create, update, delete and list rooms."""

    def __init__(self, db: Session, client: Optional[ClientInfo] = None):
        self.db = db
        self.inventories = InventoryService(db, client)

    def ensure_not_locked(self, inventory_id: uuid.UUID) -> Inventory:
        """Guard called before every room and item mutation.

        Raises:
            InventoryNotFoundError: The inventory does not exist.
            InventoryLockedError: The inventory is locked.
        """
        inventory = self.db.get(Inventory, inventory_id)
        if inventory is None:
            raise InventoryNotFoundError()
        if inventory.is_locked:
            raise InventoryLockedError()
        return inventory

    def get(self, room_id: uuid.UUID, inventory_id: Optional[uuid.UUID] = None) -> Room:
        """Room by id, optionally scoped to an inventory."""
        room = self.db.get(Room, room_id)
        if room is None or (inventory_id is not None and room.inventory_id != inventory_id):
            raise RoomNotFoundError()
        return room

    def create(
        self,
        inventory_id: uuid.UUID,
        room_type: Union[RoomType, str],
        custom_name: Optional[str] = None,
        actor: Actor = Actor.CUSTOMER,
    ) -> Room:
        """Append a room to the inventory."""
        room_type = RoomType(room_type)
        with transaction(self.db):
            self.ensure_not_locked(inventory_id)
            existing = self.db.query(Room).filter(Room.inventory_id == inventory_id).count()

            room = Room(
                inventory_id=inventory_id,
                type=room_type,
                custom_name=custom_name,
                sort_order=existing,
            )
            self.db.add(room)
            self.db.flush()

            self.inventories.log_action(
                inventory_id,
                AuditAction.ROOM_CREATED,
                actor,
                RoomPayload(room_name=room.display_name, type=room_type.value),
            )

        logger.info("Room %s (%s) added to inventory %s", room.id, room_type.value, inventory_id)
        return room

    def update(
        self,
        room_id: uuid.UUID,
        data: RoomUpdate,
        inventory_id: Optional[uuid.UUID] = None,
    ) -> Room:
        """Overwrite the supplied fields only. No lock guard, no audit entry."""
        with transaction(self.db):
            room = self.get(room_id, inventory_id)
            for field, value in data.model_dump(exclude_unset=True).items():
                setattr(room, field, value)
            room.updated_at = utcnow()
            self.db.flush()
        return room

    def delete(
        self,
        room_id: uuid.UUID,
        inventory_id: Optional[uuid.UUID] = None,
        actor: Actor = Actor.CUSTOMER,
    ) -> None:
        """Delete the room and its items, then resync the inventory totals."""
        with transaction(self.db):
            room = self.get(room_id, inventory_id)
            owner_id = room.inventory_id
            self.ensure_not_locked(owner_id)

            room_name = room.display_name
            room_type = room.type.value
            for item in list(room.items):
                self.db.delete(item)
            self.db.flush()
            self.db.delete(room)
            self.db.flush()

            self.inventories.recalculate_totals(owner_id)
            self.inventories.log_action(
                owner_id,
                AuditAction.ROOM_DELETED,
                actor,
                RoomPayload(room_name=room_name, type=room_type),
            )

        logger.info("Room %s deleted from inventory %s", room_id, owner_id)

    def list_for_inventory(self, inventory_id: uuid.UUID) -> List[Room]:
        """Rooms by sort order, each with its items."""
        return (
            self.db.query(Room)
            .options(selectinload(Room.items))
            .filter(Room.inventory_id == inventory_id)
            .order_by(Room.sort_order.asc(), Room.created_at.asc())
            .all()
        )
