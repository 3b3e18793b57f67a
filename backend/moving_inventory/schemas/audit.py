"""Audit log schemas.

Every action kind has its own payload model; ``PAYLOAD_MODELS`` maps the
action to the model so writers and the activity describer agree on keys.
Payload keys are stored camelCase (``itemName``, ``totalCuFt``...), which is
the format the admin activity view and historical rows use.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class AuditAction(str, Enum):
    """Closed set of audited actions."""

    INVENTORY_CREATED = "inventory_created"
    INVENTORY_UPDATED = "inventory_updated"
    INVENTORY_SUBMITTED = "inventory_submitted"
    INVENTORY_LOCKED = "inventory_locked"
    ROOM_CREATED = "room_created"
    ROOM_DELETED = "room_deleted"
    ITEM_CREATED = "item_created"
    ITEM_UPDATED = "item_updated"
    ITEM_DELETED = "item_deleted"


class Actor(str, Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"


class AuditPayload(BaseModel):
    """Base for payload models: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> Dict[str, Any]:
        """Serialise only the fields the writer actually set."""
        return self.model_dump(by_alias=True, mode="json", exclude_unset=True)


class FieldChange(BaseModel):
    old: Any = None
    new: Any = None


class InventoryUpdatedPayload(AuditPayload):
    changes: Dict[str, FieldChange] = Field(default_factory=dict)


class InventorySubmittedPayload(AuditPayload):
    customer_name: Optional[str] = None
    move_date: Optional[str] = None
    from_address: Optional[str] = None
    to_address: Optional[str] = None
    total_items: Optional[int] = None
    total_cu_ft: Optional[str] = None
    total_weight: Optional[str] = None


class RoomPayload(AuditPayload):
    """Used by both room_created and room_deleted."""

    room_name: Optional[str] = None
    type: Optional[str] = None


class ItemCreatedPayload(AuditPayload):
    item_name: Optional[str] = None
    room_name: Optional[str] = None
    category: Optional[str] = None
    quantity: Optional[int] = None
    has_photos: bool = False


class ItemUpdatedPayload(AuditPayload):
    item_name: Optional[str] = None
    room_name: Optional[str] = None
    quantity: Optional[int] = None
    changes: Dict[str, FieldChange] = Field(default_factory=dict)


class ItemDeletedPayload(AuditPayload):
    item_name: Optional[str] = None
    room_name: Optional[str] = None


# None means the action carries no payload
PAYLOAD_MODELS: Dict[AuditAction, Optional[Type[AuditPayload]]] = {
    AuditAction.INVENTORY_CREATED: None,
    AuditAction.INVENTORY_UPDATED: InventoryUpdatedPayload,
    AuditAction.INVENTORY_SUBMITTED: InventorySubmittedPayload,
    AuditAction.INVENTORY_LOCKED: None,
    AuditAction.ROOM_CREATED: RoomPayload,
    AuditAction.ROOM_DELETED: RoomPayload,
    AuditAction.ITEM_CREATED: ItemCreatedPayload,
    AuditAction.ITEM_UPDATED: ItemUpdatedPayload,
    AuditAction.ITEM_DELETED: ItemDeletedPayload,
}


class ActivityDescription(BaseModel):
    """Human-readable rendering of one audit entry."""

    title: str
    description: Optional[str] = None
    details: List[str] = Field(default_factory=list)


class AuditLogResponse(BaseModel):
    """Audit entry decorated with its activity description."""

    id: int
    inventory_id: Optional[uuid.UUID] = None
    action: str
    actor: str
    payload: Optional[Dict[str, Any]] = None
    created_at: datetime
    title: str
    description: Optional[str] = None
    details: List[str] = Field(default_factory=list)
