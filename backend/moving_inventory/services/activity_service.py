"""Human-readable activity descriptions for audit entries.

Maps each audit action to a title, a one-line description and optional
detail lines, as shown in the admin "Recent Activities" panel.
"""

import logging
import re
import uuid
from datetime import date
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError
from sqlalchemy.orm import Session

from moving_inventory.models.audit import AuditLogEntry
from moving_inventory.schemas.audit import (
    ActivityDescription,
    Actor,
    AuditAction,
    AuditLogResponse,
    FieldChange,
    InventorySubmittedPayload,
    InventoryUpdatedPayload,
    ItemCreatedPayload,
    ItemDeletedPayload,
    ItemUpdatedPayload,
    RoomPayload,
)
from moving_inventory.services.audit_service import AuditService

logger = logging.getLogger(__name__)

# Human-readable labels for known field names
FIELD_NAME_MAP = {
    "moveDate": "Move Date",
    "customerName": "Customer Name",
    "customerEmail": "Email",
    "customerPhone": "Phone Number",
    "fromAddress": "From Address",
    "toAddress": "To Address",
    "notes": "Notes",
    "quantity": "Quantity",
    "photos": "Photos",
}

EMPTY = "(empty)"

_ISO_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")


def humanize_field(field: str) -> str:
    """``moveDate`` -> ``Move Date``; unknown camelCase names get spaced and capitalised."""
    if field in FIELD_NAME_MAP:
        return FIELD_NAME_MAP[field]
    spaced = re.sub(r"([A-Z])", r" \1", field)
    return spaced[:1].upper() + spaced[1:]


def format_date(value: date) -> str:
    """Render as ``Mar 15, 2026``."""
    return f"{value:%b} {value.day}, {value.year}"


def format_value(value: Any) -> str:
    """Render ISO-8601 date-shaped strings as ``MMM D, YYYY``, anything else as-is."""
    text = str(value)
    match = _ISO_DATE_RE.match(text)
    if match:
        try:
            parsed = date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
        except ValueError:
            return text
        return format_date(parsed)
    return text


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def change_lines(changes: Dict[str, FieldChange]) -> List[str]:
    """One ``Field: old → new`` line per changed field."""
    lines = []
    for field, change in changes.items():
        old = EMPTY if _is_blank(change.old) else format_value(change.old)
        new = EMPTY if _is_blank(change.new) else format_value(change.new)
        lines.append(f"{humanize_field(field)}: {old} → {new}")
    return lines


def humanize_action(action: str) -> str:
    """``foo_bar`` -> ``Foo Bar``."""
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), action.replace("_", " "))


# ==================== PER-ACTION DESCRIBERS ====================

def _inventory_created(payload: Optional[dict]) -> ActivityDescription:
    return ActivityDescription(title="Inventory Created", description="New inventory started")


def _inventory_updated(payload: Optional[dict]) -> ActivityDescription:
    data = InventoryUpdatedPayload.model_validate(payload or {})
    changes = data.changes
    if not changes:
        description = "Information updated"
    elif len(changes) == 1:
        field, change = next(iter(changes.items()))
        new = "empty" if change.new is None else format_value(change.new)
        description = f"{humanize_field(field)} set to: {new}"
    else:
        description = "Updated: " + ", ".join(humanize_field(f) for f in changes)
    return ActivityDescription(
        title="Inventory Updated",
        description=description,
        details=change_lines(changes),
    )


def _inventory_submitted(payload: Optional[dict]) -> ActivityDescription:
    data = InventorySubmittedPayload.model_validate(payload or {})
    if data.total_items:
        n = data.total_items
        description = f"Submitted with {n} item{'s' if n != 1 else ''} for review"
    else:
        description = "Customer submitted inventory for review"

    details = []
    if not _is_blank(data.move_date):
        details.append(f"Move Date: {format_value(data.move_date)}")
    if not _is_blank(data.from_address):
        details.append(f"From: {data.from_address}")
    if not _is_blank(data.to_address):
        details.append(f"To: {data.to_address}")
    if data.total_items is not None:
        details.append(f"Total Items: {data.total_items}")
    if not _is_blank(data.total_cu_ft):
        details.append(f"Volume: {data.total_cu_ft} cu ft")
    if not _is_blank(data.total_weight):
        details.append(f"Weight: {data.total_weight} lbs")
    return ActivityDescription(title="Inventory Submitted", description=description, details=details)


def _inventory_locked(payload: Optional[dict]) -> ActivityDescription:
    return ActivityDescription(
        title="Inventory Locked",
        description="Admin locked inventory — no further changes allowed",
    )


def _room_created(payload: Optional[dict]) -> ActivityDescription:
    data = RoomPayload.model_validate(payload or {})
    return ActivityDescription(title="Room Added", description=f"Added room: {data.room_name or 'Room'}")


def _room_deleted(payload: Optional[dict]) -> ActivityDescription:
    data = RoomPayload.model_validate(payload or {})
    return ActivityDescription(title="Room Removed", description=f"Removed room: {data.room_name or 'Room'}")


def _item_created(payload: Optional[dict]) -> ActivityDescription:
    data = ItemCreatedPayload.model_validate(payload or {})
    description = f'Added "{data.item_name or "Item"}" × {data.quantity or 1}'
    if data.room_name:
        description += f" in {data.room_name}"

    details = []
    if data.room_name:
        details.append(f"Room: {data.room_name}")
    if data.category:
        details.append(f"Category: {data.category}")
    if data.has_photos:
        details.append("Added with photos")
    return ActivityDescription(title="Item Added", description=description, details=details)


def _item_updated(payload: Optional[dict]) -> ActivityDescription:
    data = ItemUpdatedPayload.model_validate(payload or {})
    item_name = data.item_name or "Item"
    if len(data.changes) == 1:
        field, change = next(iter(data.changes.items()))
        new = "" if change.new is None else format_value(change.new)
        description = f'"{item_name}": {humanize_field(field)} → {new}'
        if data.room_name:
            description += f" ({data.room_name})"
    else:
        description = f'Updated "{item_name}"'
        if data.room_name:
            description += f" in {data.room_name}"
    return ActivityDescription(
        title="Item Updated",
        description=description,
        details=change_lines(data.changes),
    )


def _item_deleted(payload: Optional[dict]) -> ActivityDescription:
    data = ItemDeletedPayload.model_validate(payload or {})
    description = f'Removed "{data.item_name or "Item"}"'
    if data.room_name:
        description += f" from {data.room_name}"
    return ActivityDescription(title="Item Removed", description=description)


_DESCRIBERS: Dict[AuditAction, Callable[[Optional[dict]], ActivityDescription]] = {
    AuditAction.INVENTORY_CREATED: _inventory_created,
    AuditAction.INVENTORY_UPDATED: _inventory_updated,
    AuditAction.INVENTORY_SUBMITTED: _inventory_submitted,
    AuditAction.INVENTORY_LOCKED: _inventory_locked,
    AuditAction.ROOM_CREATED: _room_created,
    AuditAction.ROOM_DELETED: _room_deleted,
    AuditAction.ITEM_CREATED: _item_created,
    AuditAction.ITEM_UPDATED: _item_updated,
    AuditAction.ITEM_DELETED: _item_deleted,
}


def _fallback(entry: AuditLogEntry) -> ActivityDescription:
    return ActivityDescription(
        title=humanize_action(entry.action),
        description="Customer action" if entry.actor == Actor.CUSTOMER.value else "Admin action",
    )


def describe(entry: AuditLogEntry) -> ActivityDescription:
    """Title, description and detail lines for one audit entry."""
    try:
        describer = _DESCRIBERS[AuditAction(entry.action)]
    except ValueError:
        return _fallback(entry)

    try:
        return describer(entry.payload)
    except ValidationError:
        logger.warning("Malformed %s payload on audit entry %s", entry.action, entry.id)
        return _fallback(entry)


def activity_feed(db: Session, inventory_id: uuid.UUID, limit: Optional[int] = None) -> List[AuditLogResponse]:
    """Newest-first audit entries for an inventory, each with its description."""
    feed = []
    for entry in AuditService(db).list(inventory_id, limit=limit):
        described = describe(entry)
        feed.append(
            AuditLogResponse(
                id=entry.id,
                inventory_id=entry.inventory_id,
                action=entry.action,
                actor=entry.actor,
                payload=entry.payload,
                created_at=entry.created_at,
                title=described.title,
                description=described.description,
                details=described.details,
            )
        )
    return feed
