"""Tests for the inventory lifecycle: create, update, submit, lock."""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from moving_inventory.core.exceptions import (
    InventoryConflictError,
    InventoryLockedError,
    InventoryNotFoundError,
)
from moving_inventory.models.audit import AuditLogEntry
from moving_inventory.models.inventory import InventoryStatus
from moving_inventory.schemas.inventory import InventoryCreate, InventoryUpdate
from moving_inventory.services.audit_service import AuditService
from moving_inventory.services.inventory_service import (
    InventoryService,
    generate_token,
    normalize_move_date,
)
from moving_inventory.services.item_service import ItemService


def actions(db_session, inventory_id):
    """Audit actions oldest first."""
    return [e.action for e in reversed(AuditService(db_session).list(inventory_id, limit=100))]


# ============== Tokens and dates ==============

def test_generate_token_is_lowercase_alphanumeric():
    token = generate_token()
    assert len(token) == 24
    assert token.isalnum()
    assert token == token.lower()


def test_generate_token_is_unique():
    assert len({generate_token() for _ in range(50)}) == 50


def test_normalize_move_date_keeps_calendar_day():
    value = datetime(2026, 3, 15, 18, 45, tzinfo=timezone.utc)
    assert normalize_move_date(value) == datetime(2026, 3, 15, tzinfo=timezone.utc)
    assert normalize_move_date(date(2026, 3, 15)) == datetime(2026, 3, 15, tzinfo=timezone.utc)
    assert normalize_move_date(None) is None


# ============== Create ==============

def test_create_starts_draft_with_zero_totals(db_session):
    inventory = InventoryService(db_session).create(
        InventoryCreate(customer_name="Sam", from_address="1 Main St")
    )

    assert inventory.status == InventoryStatus.DRAFT
    assert inventory.is_locked is False
    assert inventory.total_items == 0
    assert inventory.total_cu_ft == Decimal("0")
    assert inventory.total_weight == Decimal("0")
    assert inventory.expires_at is not None
    assert actions(db_session, inventory.id) == ["inventory_created"]


def test_find_by_token_unknown_raises(db_session):
    with pytest.raises(InventoryNotFoundError):
        InventoryService(db_session).find_by_token("does-not-exist")


# ============== Update ==============

def test_update_records_changes_and_moves_to_in_progress(db_session, inventory):
    service = InventoryService(db_session)
    updated = service.update(inventory.id, InventoryUpdate(customer_name="Jane"))

    assert updated.customer_name == "Jane"
    assert updated.status == InventoryStatus.IN_PROGRESS

    entries = AuditService(db_session).list(inventory.id)
    assert entries[0].action == "inventory_updated"
    assert entries[0].payload == {"changes": {"customerName": {"old": None, "new": "Jane"}}}


def test_update_without_changes_writes_no_audit(db_session, inventory):
    service = InventoryService(db_session)
    service.update(inventory.id, InventoryUpdate(customer_name="Jane"))
    service.update(inventory.id, InventoryUpdate(customer_name="Jane"))

    assert actions(db_session, inventory.id).count("inventory_updated") == 1


def test_update_compares_move_date_by_day(db_session, inventory):
    service = InventoryService(db_session)
    service.update(inventory.id, InventoryUpdate(move_date=datetime(2026, 3, 15, 9, 0, tzinfo=timezone.utc)))
    service.update(inventory.id, InventoryUpdate(move_date=datetime(2026, 3, 15, 17, 30, tzinfo=timezone.utc)))

    entries = [
        e for e in AuditService(db_session).list(inventory.id) if e.action == "inventory_updated"
    ]
    assert len(entries) == 1
    assert entries[0].payload["changes"]["moveDate"] == {"old": None, "new": "2026-03-15"}


def test_update_explicit_null_clears_field(db_session, inventory):
    service = InventoryService(db_session)
    service.update(inventory.id, InventoryUpdate(customer_phone="555-0100"))
    updated = service.update(inventory.id, InventoryUpdate(customer_phone=None))

    assert updated.customer_phone is None


def test_update_after_submit_returns_to_in_progress(db_session, inventory):
    service = InventoryService(db_session)
    service.submit(inventory.id)
    updated = service.update(inventory.id, InventoryUpdate(notes="Fragile stuff upstairs"))

    assert updated.status == InventoryStatus.IN_PROGRESS
    assert updated.is_locked is False


def test_update_locked_inventory_is_forbidden(db_session, inventory):
    service = InventoryService(db_session)
    service.lock(inventory.id)
    before = db_session.query(AuditLogEntry).count()

    with pytest.raises(InventoryLockedError):
        service.update(inventory.id, InventoryUpdate(customer_name="Nope"))

    assert service.get(inventory.id).customer_name is None
    assert db_session.query(AuditLogEntry).count() == before


# ============== Submit ==============

def test_submit_snapshots_recomputed_totals(db_session, inventory, bedroom, bed_item):
    ItemService(db_session).upsert(inventory.id, bedroom.id, bed_item)
    service = InventoryService(db_session)
    submitted = service.submit(inventory.id)

    assert submitted.status == InventoryStatus.SUBMITTED
    assert submitted.submitted_at is not None

    entry = AuditService(db_session).list(inventory.id)[0]
    assert entry.action == "inventory_submitted"
    assert entry.payload["totalItems"] == 2
    assert entry.payload["totalCuFt"] == "80.0"
    assert entry.payload["totalWeight"] == "300"


def test_submit_locked_inventory_conflicts(db_session, inventory):
    service = InventoryService(db_session)
    service.lock(inventory.id)

    with pytest.raises(InventoryConflictError):
        service.submit(inventory.id)


def test_submit_twice_is_allowed_while_unlocked(db_session, inventory):
    service = InventoryService(db_session)
    service.submit(inventory.id)
    service.submit(inventory.id)

    assert actions(db_session, inventory.id).count("inventory_submitted") == 2


# ============== Lock ==============

def test_lock_sets_status_and_is_idempotent(db_session, inventory):
    service = InventoryService(db_session)
    locked = service.lock(inventory.id)

    assert locked.is_locked is True
    assert locked.status == InventoryStatus.LOCKED
    assert locked.locked_at is not None

    service.lock(inventory.id)
    assert actions(db_session, inventory.id).count("inventory_locked") == 1


def test_lock_unknown_inventory_raises(db_session):
    import uuid

    with pytest.raises(InventoryNotFoundError):
        InventoryService(db_session).lock(uuid.uuid4())


def test_locked_flag_matches_status(db_session, inventory):
    service = InventoryService(db_session)
    for step in (
        lambda: service.update(inventory.id, InventoryUpdate(customer_name="A")),
        lambda: service.submit(inventory.id),
        lambda: service.lock(inventory.id),
    ):
        current = step()
        assert current.is_locked == (current.status == InventoryStatus.LOCKED)


# ============== Full scenario ==============

def test_bed_scenario_end_to_end(db_session, inventory, bedroom, bed_item):
    items = ItemService(db_session)
    item = items.upsert(inventory.id, bedroom.id, bed_item)

    assert item.total_cu_ft == Decimal("80.00")
    assert item.total_weight == Decimal("300.00")

    service = InventoryService(db_session)
    current = service.get(inventory.id)
    assert current.total_items == 2
    assert current.total_cu_ft == Decimal("80.00")
    assert current.total_weight == Decimal("300.00")
    assert actions(db_session, inventory.id) == ["inventory_created", "room_created", "item_created"]

    service.submit(inventory.id)
    service.lock(inventory.id)
    assert service.get(inventory.id).status == InventoryStatus.LOCKED

    with pytest.raises(InventoryLockedError):
        items.upsert(inventory.id, bedroom.id, bed_item)
