"""Inventory lifecycle service.

Owns the inventory status state machine::

    draft --(customer edit)--> in_progress --(submit)--> submitted --(admin lock)--> locked

Submitting does not freeze editing; only locking does. Locking is terminal.
Room and item services go through ``recalculate_totals`` and ``log_action``
here so every audit write shares one code path.

Token-based callers resolve the token once with ``find_by_token`` and pass
``inventory.id`` to every other method.
"""

import logging
import secrets
import string
import uuid
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional, Union

from sqlalchemy.orm import Session, selectinload

from moving_inventory.core.config import settings
from moving_inventory.core.exceptions import (
    InventoryConflictError,
    InventoryLockedError,
    InventoryNotFoundError,
)
from moving_inventory.db.base import utcnow
from moving_inventory.db.session import transaction
from moving_inventory.models.audit import AuditLogEntry
from moving_inventory.models.inventory import Inventory, InventoryStatus, Room
from moving_inventory.schemas.audit import (
    Actor,
    AuditAction,
    FieldChange,
    InventorySubmittedPayload,
    InventoryUpdatedPayload,
)
from moving_inventory.schemas.inventory import InventoryCreate, InventoryUpdate
from moving_inventory.services.audit_service import AuditService, ClientInfo, PayloadInput
from moving_inventory.services.totals_service import Totals, TotalsService

logger = logging.getLogger(__name__)

TOKEN_ALPHABET = string.ascii_lowercase + string.digits

# Model attribute -> key used in the audit "changes" map
TRACKED_FIELDS = {
    "customer_name": "customerName",
    "customer_email": "customerEmail",
    "customer_phone": "customerPhone",
    "move_date": "moveDate",
    "from_address": "fromAddress",
    "to_address": "toAddress",
    "notes": "notes",
}


def generate_token(length: Optional[int] = None) -> str:
    """Unguessable lowercase-alphanumeric access token."""
    length = length or settings.token_length
    return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(length))


def normalize_move_date(value: Optional[Union[datetime, date]]) -> Optional[datetime]:
    """Keep only the calendar date, stored as midnight UTC."""
    if value is None:
        return None
    day = value.date() if isinstance(value, datetime) else value
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def _calendar_day(value: Optional[datetime]) -> Optional[str]:
    return value.date().isoformat() if value else None


class InventoryService:
    """Create, read, update, submit and lock inventories."""

    def __init__(self, db: Session, client: Optional[ClientInfo] = None):
        self.db = db
        self.audit = AuditService(db, client)
        self.totals = TotalsService(db)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def _with_rooms(self):
        return self.db.query(Inventory).options(
            selectinload(Inventory.rooms).selectinload(Room.items)
        )

    def find_by_token(self, token: str) -> Inventory:
        """Inventory with rooms (by sort order) and their items.

        Raises:
            InventoryNotFoundError: No inventory has this token.
        """
        inventory = self._with_rooms().filter(Inventory.token == token).first()
        if inventory is None:
            raise InventoryNotFoundError()
        return inventory

    def get(self, inventory_id: uuid.UUID) -> Inventory:
        """Inventory by internal id, with rooms and items."""
        inventory = self._with_rooms().filter(Inventory.id == inventory_id).first()
        if inventory is None:
            raise InventoryNotFoundError()
        return inventory

    def find_all(
        self,
        status: Optional[InventoryStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Inventory]:
        """Admin listing, newest first."""
        query = self.db.query(Inventory)
        if status is not None:
            query = query.filter(Inventory.status == status)
        return query.order_by(Inventory.created_at.desc()).offset(offset).limit(limit).all()

    def get_summary(self, inventory_id: uuid.UUID) -> Dict[str, Any]:
        """Inventory with per-room aggregates and the specialty items.

        Per-room figures are computed here on read; they are not stored.
        """
        inventory = self.get(inventory_id)

        room_summaries = []
        specialty_items = []
        for room in inventory.rooms:
            room_summaries.append({
                "id": room.id,
                "type": room.type,
                "name": room.custom_name or room.type.value,
                "item_count": sum(item.quantity for item in room.items),
                "cu_ft": sum((Decimal(item.total_cu_ft or 0) for item in room.items), Decimal("0")),
                "weight": sum((Decimal(item.total_weight or 0) for item in room.items), Decimal("0")),
                "items": room.items,
            })
            specialty_items.extend(item for item in room.items if item.is_specialty_item)

        return {
            "inventory": inventory,
            "room_summaries": room_summaries,
            "specialty_items": specialty_items,
            "totals": {
                "items": inventory.total_items,
                "cu_ft": inventory.total_cu_ft,
                "weight": inventory.total_weight,
            },
        }

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def create(self, data: InventoryCreate) -> Inventory:
        """Start a new draft inventory and return it with its token.

        A token collision fails on the unique constraint; there is no retry.
        """
        with transaction(self.db):
            inventory = Inventory(
                token=generate_token(),
                customer_name=data.customer_name,
                customer_email=data.customer_email,
                customer_phone=data.customer_phone,
                move_date=normalize_move_date(data.move_date),
                from_address=data.from_address,
                to_address=data.to_address,
                notes=data.notes,
                status=InventoryStatus.DRAFT,
                is_locked=False,
                expires_at=utcnow() + timedelta(days=settings.inventory_expiry_days),
            )
            self.db.add(inventory)
            self.db.flush()
            self.log_action(inventory.id, AuditAction.INVENTORY_CREATED, Actor.CUSTOMER)

        logger.info("Created inventory %s", inventory.id)
        return inventory

    def update(self, inventory_id: uuid.UUID, data: InventoryUpdate) -> Inventory:
        """Apply the supplied customer fields and record what changed.

        Only fields present in ``data`` are applied. The move date is compared
        by calendar day. Any edit moves the inventory to in_progress, including
        a submitted one; customers may keep editing until it is locked.

        Raises:
            InventoryLockedError: The inventory is locked.
        """
        with transaction(self.db):
            inventory = self.get(inventory_id)
            if inventory.is_locked:
                raise InventoryLockedError("This inventory has been locked and cannot be modified")

            changes: Dict[str, FieldChange] = {}
            for field, value in data.model_dump(exclude_unset=True).items():
                key = TRACKED_FIELDS[field]
                current = getattr(inventory, field)
                if field == "move_date":
                    value = normalize_move_date(value)
                    if _calendar_day(current) != _calendar_day(value):
                        changes[key] = FieldChange(old=_calendar_day(current), new=_calendar_day(value))
                elif value != current:
                    changes[key] = FieldChange(old=current, new=value)
                setattr(inventory, field, value)

            inventory.status = InventoryStatus.IN_PROGRESS
            inventory.updated_at = utcnow()
            self.db.flush()

            if changes:
                self.log_action(
                    inventory.id,
                    AuditAction.INVENTORY_UPDATED,
                    Actor.CUSTOMER,
                    InventoryUpdatedPayload(changes=changes),
                )

        return inventory

    def submit(self, inventory_id: uuid.UUID) -> Inventory:
        """Recompute totals, mark submitted and record the submission snapshot.

        Raises:
            InventoryConflictError: The inventory is already locked.
        """
        with transaction(self.db):
            inventory = self.get(inventory_id)
            if inventory.is_locked:
                raise InventoryConflictError("Inventory already submitted")

            totals = self.recalculate_totals(inventory.id)
            now = utcnow()
            inventory.status = InventoryStatus.SUBMITTED
            inventory.submitted_at = now
            inventory.updated_at = now
            self.db.flush()

            self.log_action(
                inventory.id,
                AuditAction.INVENTORY_SUBMITTED,
                Actor.CUSTOMER,
                InventorySubmittedPayload(
                    customer_name=inventory.customer_name,
                    move_date=_calendar_day(inventory.move_date),
                    from_address=inventory.from_address,
                    to_address=inventory.to_address,
                    total_items=totals.total_items,
                    total_cu_ft=f"{totals.total_cu_ft:.1f}",
                    total_weight=f"{totals.total_weight:.0f}",
                ),
            )

        logger.info("Inventory %s submitted with %s items", inventory.id, totals.total_items)
        return inventory

    def lock(self, inventory_id: uuid.UUID, actor: Actor = Actor.ADMIN) -> Inventory:
        """Lock the inventory for good. Locking twice is a no-op."""
        with transaction(self.db):
            inventory = self.get(inventory_id)
            if inventory.is_locked:
                return inventory

            now = utcnow()
            inventory.is_locked = True
            inventory.locked_at = now
            inventory.status = InventoryStatus.LOCKED
            inventory.updated_at = now
            self.db.flush()
            self.log_action(inventory.id, AuditAction.INVENTORY_LOCKED, actor)

        logger.info("Inventory %s locked by %s", inventory.id, actor.value)
        return inventory

    # ------------------------------------------------------------------
    # Shared helpers for room and item services
    # ------------------------------------------------------------------
    def recalculate_totals(self, inventory_id: uuid.UUID) -> Totals:
        """Full recompute of the inventory totals (runs in the caller's transaction)."""
        return self.totals.recalculate(inventory_id)

    def log_action(
        self,
        inventory_id: uuid.UUID,
        action: Union[AuditAction, str],
        actor: Union[Actor, str] = Actor.CUSTOMER,
        payload: PayloadInput = None,
    ) -> AuditLogEntry:
        """Single audit-write entry point (runs in the caller's transaction)."""
        return self.audit.append(inventory_id, action, actor, payload)
