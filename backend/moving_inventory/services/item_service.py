"""Room item service and item library lookups.

Rules:
- A room holds at most one row per library item; adding the same library
  item again updates that row's quantity instead of inserting.
- A quantity of zero or less removes the item.
- Every change to quantity or rows resynchronises the inventory totals.
"""

import logging
import uuid
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from moving_inventory.core.exceptions import ItemNotFoundError
from moving_inventory.db.base import utcnow
from moving_inventory.db.session import transaction
from moving_inventory.models.inventory import RoomItem
from moving_inventory.models.item_library import ItemLibraryEntry
from moving_inventory.schemas.audit import (
    Actor,
    AuditAction,
    FieldChange,
    ItemCreatedPayload,
    ItemDeletedPayload,
    ItemUpdatedPayload,
)
from moving_inventory.schemas.inventory import RoomItemUpsert
from moving_inventory.services.audit_service import ClientInfo
from moving_inventory.services.room_service import RoomService
from moving_inventory.services.totals_service import quantize

logger = logging.getLogger(__name__)

LIBRARY_SEARCH_LIMIT = 200


class ItemService:
    """Room item mutations plus read-only item library search."""

    def __init__(self, db: Session, client: Optional[ClientInfo] = None):
        self.db = db
        self.rooms = RoomService(db, client)
        self.inventories = self.rooms.inventories

    def get(self, item_id: uuid.UUID, inventory_id: Optional[uuid.UUID] = None) -> RoomItem:
        """Item by id, optionally scoped to an inventory."""
        item = self.db.get(RoomItem, item_id)
        if item is None or (inventory_id is not None and item.inventory_id != inventory_id):
            raise ItemNotFoundError()
        return item

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def upsert(
        self,
        inventory_id: uuid.UUID,
        room_id: uuid.UUID,
        data: RoomItemUpsert,
        actor: Actor = Actor.CUSTOMER,
    ) -> RoomItem:
        """Insert an item, or update the room's existing row for the same library item."""
        cu_ft_per_item = data.cu_ft_per_item or Decimal("0")
        weight_per_item = data.weight_per_item or Decimal("0")
        # rounded once, after multiplying the unrounded rate
        total_cu_ft = quantize(cu_ft_per_item * data.quantity)
        total_weight = quantize(weight_per_item * data.quantity)

        with transaction(self.db):
            self.rooms.ensure_not_locked(inventory_id)
            room = self.rooms.get(room_id, inventory_id)

            existing = None
            if data.item_library_id:
                existing = (
                    self.db.query(RoomItem)
                    .filter(
                        RoomItem.room_id == room.id,
                        RoomItem.item_library_id == data.item_library_id,
                    )
                    .first()
                )

            if existing is not None:
                old_quantity = existing.quantity
                existing.quantity = data.quantity
                existing.cu_ft_per_item = quantize(cu_ft_per_item)
                existing.weight_per_item = quantize(weight_per_item)
                existing.total_cu_ft = total_cu_ft
                existing.total_weight = total_weight
                if data.notes is not None:
                    existing.notes = data.notes
                if data.images is not None:
                    existing.images = list(data.images)
                existing.updated_at = utcnow()
                self.db.flush()

                self.inventories.recalculate_totals(inventory_id)
                self.inventories.log_action(
                    inventory_id,
                    AuditAction.ITEM_UPDATED,
                    actor,
                    ItemUpdatedPayload(
                        item_name=existing.name,
                        room_name=room.display_name,
                        quantity=data.quantity,
                        changes={"quantity": FieldChange(old=old_quantity, new=data.quantity)},
                    ),
                )
                item = existing
            else:
                item = RoomItem(
                    room_id=room.id,
                    inventory_id=inventory_id,
                    item_library_id=data.item_library_id,
                    name=data.name,
                    category=data.category,
                    quantity=data.quantity,
                    cu_ft_per_item=quantize(cu_ft_per_item),
                    weight_per_item=quantize(weight_per_item),
                    total_cu_ft=total_cu_ft,
                    total_weight=total_weight,
                    is_specialty_item=data.is_specialty_item,
                    requires_disassembly=data.requires_disassembly,
                    is_fragile=data.is_fragile,
                    is_high_value=data.is_high_value,
                    images=list(data.images or []),
                    notes=data.notes,
                )
                self.db.add(item)
                self.db.flush()

                self.inventories.recalculate_totals(inventory_id)
                self.inventories.log_action(
                    inventory_id,
                    AuditAction.ITEM_CREATED,
                    actor,
                    ItemCreatedPayload(
                        item_name=item.name,
                        room_name=room.display_name,
                        category=item.category,
                        quantity=item.quantity,
                        has_photos=bool(item.images),
                    ),
                )

        return item

    def update_quantity(
        self,
        item_id: uuid.UUID,
        quantity: int,
        inventory_id: Optional[uuid.UUID] = None,
        actor: Actor = Actor.CUSTOMER,
    ) -> Optional[RoomItem]:
        """Set a new quantity from the stored per-unit rates.

        Returns None when ``quantity <= 0`` removed the item.
        """
        with transaction(self.db):
            item = self.get(item_id, inventory_id)
            self.rooms.ensure_not_locked(item.inventory_id)

            if quantity <= 0:
                self._delete(item, actor)
                return None

            old_quantity = item.quantity
            item.quantity = quantity
            item.total_cu_ft = quantize(Decimal(item.cu_ft_per_item or 0) * quantity)
            item.total_weight = quantize(Decimal(item.weight_per_item or 0) * quantity)
            item.updated_at = utcnow()
            self.db.flush()

            self.inventories.recalculate_totals(item.inventory_id)
            if old_quantity != quantity:
                self.inventories.log_action(
                    item.inventory_id,
                    AuditAction.ITEM_UPDATED,
                    actor,
                    ItemUpdatedPayload(
                        item_name=item.name,
                        room_name=item.room.display_name,
                        quantity=quantity,
                        changes={"quantity": FieldChange(old=old_quantity, new=quantity)},
                    ),
                )

        return item

    def update_images(
        self,
        item_id: uuid.UUID,
        images: List[str],
        inventory_id: Optional[uuid.UUID] = None,
        actor: Actor = Actor.CUSTOMER,
    ) -> RoomItem:
        """Replace the photo list. Volumes and weights are untouched."""
        with transaction(self.db):
            item = self.get(item_id, inventory_id)
            self.rooms.ensure_not_locked(item.inventory_id)

            old_count = len(item.images or [])
            item.images = list(images)
            item.updated_at = utcnow()
            self.db.flush()

            if old_count != len(images):
                self.inventories.log_action(
                    item.inventory_id,
                    AuditAction.ITEM_UPDATED,
                    actor,
                    ItemUpdatedPayload(
                        item_name=item.name,
                        room_name=item.room.display_name,
                        changes={"photos": FieldChange(old=old_count, new=len(images))},
                    ),
                )

        return item

    def delete(
        self,
        item_id: uuid.UUID,
        inventory_id: Optional[uuid.UUID] = None,
        actor: Actor = Actor.CUSTOMER,
    ) -> None:
        """Remove an item and resync the inventory totals."""
        with transaction(self.db):
            item = self.get(item_id, inventory_id)
            self.rooms.ensure_not_locked(item.inventory_id)
            self._delete(item, actor)

    def _delete(self, item: RoomItem, actor: Actor) -> None:
        item_id = item.id
        inventory_id = item.inventory_id
        item_name = item.name
        room_name = item.room.display_name

        self.db.delete(item)
        self.db.flush()
        self.inventories.recalculate_totals(inventory_id)
        self.inventories.log_action(
            inventory_id,
            AuditAction.ITEM_DELETED,
            actor,
            ItemDeletedPayload(item_name=item_name, room_name=room_name),
        )
        logger.info("Item %s removed from inventory %s", item_id, inventory_id)

    # ------------------------------------------------------------------
    # Item library
    # ------------------------------------------------------------------
    def search_library(
        self,
        query: Optional[str] = None,
        category: Optional[str] = None,
        room_type: Optional[str] = None,
    ) -> List[ItemLibraryEntry]:
        """Active catalogue entries matching the search, in catalogue order."""
        q = self.db.query(ItemLibraryEntry).filter(ItemLibraryEntry.is_active.is_(True))
        if query:
            pattern = f"%{query}%"
            q = q.filter(
                or_(
                    ItemLibraryEntry.name.ilike(pattern),
                    ItemLibraryEntry.category.ilike(pattern),
                    ItemLibraryEntry.search_keywords.ilike(pattern),
                )
            )
        if category:
            q = q.filter(ItemLibraryEntry.category == category)

        entries = q.order_by(ItemLibraryEntry.sort_order.asc()).limit(LIBRARY_SEARCH_LIMIT).all()

        # room_types is a JSON list; filtered in Python
        if room_type:
            entries = [e for e in entries if room_type in (e.room_types or [])]
        return entries

    def get_categories(self) -> List[str]:
        """Distinct categories of active entries, alphabetical."""
        rows = (
            self.db.query(ItemLibraryEntry.category)
            .filter(
                ItemLibraryEntry.is_active.is_(True),
                ItemLibraryEntry.category.isnot(None),
            )
            .distinct()
            .order_by(ItemLibraryEntry.category.asc())
            .all()
        )
        return [r[0] for r in rows]
