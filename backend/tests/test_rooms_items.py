"""Tests for room and item services: ordering, dedup, quantities, totals."""

import uuid
from decimal import Decimal

import pytest
from pydantic import ValidationError

from moving_inventory.core.exceptions import (
    InventoryLockedError,
    ItemNotFoundError,
    RoomNotFoundError,
)
from moving_inventory.models.inventory import Room, RoomItem, RoomType
from moving_inventory.schemas.inventory import InventoryCreate, RoomItemUpsert, RoomUpdate
from moving_inventory.services.audit_service import AuditService
from moving_inventory.services.inventory_service import InventoryService
from moving_inventory.services.item_service import ItemService
from moving_inventory.services.room_service import RoomService
from moving_inventory.services.totals_service import TotalsService


def assert_totals_match_items(db_session, inventory_id):
    inventory = InventoryService(db_session).get(inventory_id)
    items = db_session.query(RoomItem).filter(RoomItem.inventory_id == inventory_id).all()
    assert inventory.total_items == sum(i.quantity for i in items)
    assert inventory.total_cu_ft == sum((i.total_cu_ft for i in items), Decimal("0"))
    assert inventory.total_weight == sum((i.total_weight for i in items), Decimal("0"))


# ============== Rooms ==============

def test_rooms_get_sequential_sort_order(db_session, inventory):
    service = RoomService(db_session)
    for room_type in (RoomType.KITCHEN, RoomType.BEDROOM, RoomType.GARAGE):
        service.create(inventory.id, room_type)

    rooms = service.list_for_inventory(inventory.id)
    assert [r.sort_order for r in rooms] == [0, 1, 2]
    assert [r.type for r in rooms] == [RoomType.KITCHEN, RoomType.BEDROOM, RoomType.GARAGE]


def test_room_display_name(db_session, inventory):
    service = RoomService(db_session)
    plain = service.create(inventory.id, RoomType.LIVING_ROOM)
    named = service.create(inventory.id, RoomType.BEDROOM, custom_name="Kids Room")

    assert plain.display_name == "living room"
    assert named.display_name == "Kids Room"

    entry = AuditService(db_session).list(inventory.id)[0]
    assert entry.payload == {"roomName": "Kids Room", "type": "bedroom"}


def test_create_room_on_locked_inventory_is_forbidden(db_session, inventory):
    InventoryService(db_session).lock(inventory.id)

    with pytest.raises(InventoryLockedError):
        RoomService(db_session).create(inventory.id, RoomType.OFFICE)


def test_update_room_applies_supplied_fields_only(db_session, inventory, bedroom):
    service = RoomService(db_session)
    updated = service.update(bedroom.id, RoomUpdate(is_complete=True))

    assert updated.is_complete is True
    assert updated.custom_name is None
    assert updated.sort_order == 0


@pytest.mark.parametrize("field", ["is_complete", "sort_order"])
def test_room_update_schema_rejects_null_for_required_fields(field):
    with pytest.raises(ValidationError):
        RoomUpdate.model_validate({field: None})


def test_update_room_can_clear_custom_name(db_session, inventory, bedroom):
    service = RoomService(db_session)
    service.update(bedroom.id, RoomUpdate(custom_name="Guest Room"))
    updated = service.update(bedroom.id, RoomUpdate.model_validate({"custom_name": None}))

    assert updated.custom_name is None
    assert updated.is_complete is False


def test_update_room_is_allowed_on_locked_inventory(db_session, inventory, bedroom):
    InventoryService(db_session).lock(inventory.id)
    updated = RoomService(db_session).update(bedroom.id, RoomUpdate(is_complete=True))

    assert updated.is_complete is True


def test_room_lookup_is_scoped_to_inventory(db_session, inventory, bedroom):
    other = InventoryService(db_session).create(InventoryCreate())

    with pytest.raises(RoomNotFoundError):
        RoomService(db_session).get(bedroom.id, inventory_id=other.id)


def test_delete_room_removes_items_and_recomputes(db_session, inventory, bedroom, bed_item):
    room_id = bedroom.id
    ItemService(db_session).upsert(inventory.id, room_id, bed_item)
    RoomService(db_session).delete(room_id, inventory_id=inventory.id)

    assert db_session.get(Room, room_id) is None
    assert db_session.query(RoomItem).count() == 0
    current = InventoryService(db_session).get(inventory.id)
    assert current.total_items == 0
    assert current.total_cu_ft == Decimal("0")
    assert AuditService(db_session).list(inventory.id)[0].action == "room_deleted"


# ============== Items ==============

def test_upsert_inserts_and_recomputes(db_session, inventory, bedroom, bed_item):
    item = ItemService(db_session).upsert(inventory.id, bedroom.id, bed_item)

    assert item.quantity == 2
    assert item.total_cu_ft == Decimal("80.00")
    assert item.total_weight == Decimal("300.00")
    assert_totals_match_items(db_session, inventory.id)

    entry = AuditService(db_session).list(inventory.id)[0]
    assert entry.action == "item_created"
    assert entry.payload == {
        "itemName": "Bed",
        "roomName": "bedroom",
        "category": None,
        "quantity": 2,
        "hasPhotos": False,
    }


def test_upsert_defaults_missing_rates_to_zero(db_session, inventory, bedroom):
    item = ItemService(db_session).upsert(
        inventory.id, bedroom.id, RoomItemUpsert(name="Lamp", quantity=3)
    )

    assert item.total_cu_ft == Decimal("0")
    assert item.total_weight == Decimal("0")
    assert InventoryService(db_session).get(inventory.id).total_items == 3


def test_upsert_same_library_item_updates_quantity(db_session, inventory, bedroom):
    service = ItemService(db_session)
    data = RoomItemUpsert(
        item_library_id="queen-bed", name="Queen Bed", quantity=1,
        cu_ft_per_item=Decimal("60"), weight_per_item=Decimal("300"),
    )
    first = service.upsert(inventory.id, bedroom.id, data)
    second = service.upsert(inventory.id, bedroom.id, data.model_copy(update={"quantity": 3}))

    assert first.id == second.id
    assert db_session.query(RoomItem).count() == 1
    assert second.quantity == 3
    assert second.total_cu_ft == Decimal("180.00")
    assert_totals_match_items(db_session, inventory.id)

    entry = AuditService(db_session).list(inventory.id)[0]
    assert entry.action == "item_updated"
    assert entry.payload["changes"] == {"quantity": {"old": 1, "new": 3}}


def test_upsert_rounds_totals_after_multiplying(db_session, inventory, bedroom):
    item = ItemService(db_session).upsert(
        inventory.id,
        bedroom.id,
        RoomItemUpsert(
            name="Book Box", quantity=8,
            cu_ft_per_item=Decimal("0.125"), weight_per_item=Decimal("0.333"),
        ),
    )

    assert item.total_cu_ft == Decimal("1.00")
    assert item.total_weight == Decimal("2.66")
    assert item.cu_ft_per_item == Decimal("0.13")
    assert InventoryService(db_session).get(inventory.id).total_cu_ft == Decimal("1.00")
    assert_totals_match_items(db_session, inventory.id)


def test_upsert_same_library_item_uses_new_rates(db_session, inventory, bedroom):
    service = ItemService(db_session)
    data = RoomItemUpsert(
        item_library_id="queen-bed", name="Queen Bed", quantity=1,
        cu_ft_per_item=Decimal("60"), weight_per_item=Decimal("300"),
    )
    service.upsert(inventory.id, bedroom.id, data)
    item = service.upsert(
        inventory.id, bedroom.id,
        data.model_copy(update={"quantity": 2, "cu_ft_per_item": Decimal("65")}),
    )

    assert item.cu_ft_per_item == Decimal("65.00")
    assert item.total_cu_ft == Decimal("130.00")
    assert item.total_weight == Decimal("600.00")

    item = service.update_quantity(item.id, 3)
    assert item.total_cu_ft == Decimal("195.00")
    assert_totals_match_items(db_session, inventory.id)


def test_upsert_same_library_item_in_other_room_inserts(db_session, inventory, bedroom):
    kitchen = RoomService(db_session).create(inventory.id, RoomType.KITCHEN)
    service = ItemService(db_session)
    data = RoomItemUpsert(item_library_id="dining-chair", name="Dining Chair", quantity=2)
    service.upsert(inventory.id, bedroom.id, data)
    service.upsert(inventory.id, kitchen.id, data)

    assert db_session.query(RoomItem).count() == 2


def test_upsert_without_library_id_always_inserts(db_session, inventory, bedroom):
    service = ItemService(db_session)
    service.upsert(inventory.id, bedroom.id, RoomItemUpsert(name="Box", quantity=1))
    service.upsert(inventory.id, bedroom.id, RoomItemUpsert(name="Box", quantity=1))

    assert db_session.query(RoomItem).count() == 2


def test_upsert_into_room_of_other_inventory_fails(db_session, inventory, bedroom, bed_item):
    other = InventoryService(db_session).create(InventoryCreate())

    with pytest.raises(RoomNotFoundError):
        ItemService(db_session).upsert(other.id, bedroom.id, bed_item)


def test_update_quantity_recomputes_from_rates(db_session, inventory, bedroom, bed_item):
    service = ItemService(db_session)
    item = service.upsert(inventory.id, bedroom.id, bed_item)
    updated = service.update_quantity(item.id, 5)

    assert updated.total_cu_ft == Decimal("200.00")
    assert updated.total_weight == Decimal("750.00")
    assert_totals_match_items(db_session, inventory.id)


@pytest.mark.parametrize("quantity", [0, -1])
def test_update_quantity_zero_or_less_deletes(db_session, inventory, bedroom, bed_item, quantity):
    service = ItemService(db_session)
    item = service.upsert(inventory.id, bedroom.id, bed_item)
    item_id = item.id

    assert service.update_quantity(item_id, quantity) is None
    assert db_session.get(RoomItem, item_id) is None

    current = InventoryService(db_session).get(inventory.id)
    assert current.total_items == 0
    assert current.total_cu_ft == Decimal("0")
    assert AuditService(db_session).list(inventory.id)[0].action == "item_deleted"


def test_update_quantity_unchanged_writes_no_audit(db_session, inventory, bedroom, bed_item):
    service = ItemService(db_session)
    item = service.upsert(inventory.id, bedroom.id, bed_item)
    service.update_quantity(item.id, 2)

    assert AuditService(db_session).list(inventory.id)[0].action == "item_created"


def test_update_images_logs_photo_count_change(db_session, inventory, bedroom, bed_item):
    service = ItemService(db_session)
    item = service.upsert(inventory.id, bedroom.id, bed_item)
    updated = service.update_images(item.id, ["https://img/1.jpg", "https://img/2.jpg"])

    assert updated.images == ["https://img/1.jpg", "https://img/2.jpg"]
    assert updated.total_cu_ft == Decimal("80.00")
    entry = AuditService(db_session).list(inventory.id)[0]
    assert entry.payload == {
        "itemName": "Bed",
        "roomName": "bedroom",
        "changes": {"photos": {"old": 0, "new": 2}},
    }


def test_item_mutations_on_locked_inventory_are_forbidden(db_session, inventory, bedroom, bed_item):
    service = ItemService(db_session)
    item = service.upsert(inventory.id, bedroom.id, bed_item)
    InventoryService(db_session).lock(inventory.id)

    with pytest.raises(InventoryLockedError):
        service.update_quantity(item.id, 4)
    with pytest.raises(InventoryLockedError):
        service.update_images(item.id, [])
    with pytest.raises(InventoryLockedError):
        service.delete(item.id)

    assert db_session.get(RoomItem, item.id).quantity == 2


def test_delete_unknown_item_raises(db_session):
    with pytest.raises(ItemNotFoundError):
        ItemService(db_session).delete(uuid.uuid4())


# ============== Totals ==============

def test_recalculate_is_idempotent(db_session, inventory, bedroom, bed_item):
    ItemService(db_session).upsert(inventory.id, bedroom.id, bed_item)
    totals = TotalsService(db_session)

    first = totals.recalculate(inventory.id)
    second = totals.recalculate(inventory.id)
    db_session.commit()

    assert first == second
    assert second.total_items == 2
    assert second.total_cu_ft == Decimal("80.00")


def test_totals_hold_after_mixed_mutations(db_session, inventory, bedroom, bed_item):
    items = ItemService(db_session)
    kitchen = RoomService(db_session).create(inventory.id, RoomType.KITCHEN)

    bed = items.upsert(inventory.id, bedroom.id, bed_item)
    assert_totals_match_items(db_session, inventory.id)
    items.upsert(
        inventory.id, kitchen.id,
        RoomItemUpsert(name="Fridge", quantity=1, cu_ft_per_item=Decimal("45.5"), weight_per_item=Decimal("300.25")),
    )
    assert_totals_match_items(db_session, inventory.id)
    items.update_quantity(bed.id, 1)
    assert_totals_match_items(db_session, inventory.id)
    RoomService(db_session).delete(kitchen.id)
    assert_totals_match_items(db_session, inventory.id)

    current = InventoryService(db_session).get(inventory.id)
    assert current.total_cu_ft == Decimal("40.00")
    assert current.total_weight == Decimal("150.00")


# ============== Item library ==============

@pytest.fixture
def library(db_session):
    from moving_inventory.data.item_library_seed import seed_item_library

    seed_item_library(db_session)
    return db_session


def test_seed_is_idempotent(library):
    from moving_inventory.data.item_library_seed import ITEM_LIBRARY, seed_item_library

    assert seed_item_library(library) == 0
    assert len(ItemService(library).search_library()) == len(ITEM_LIBRARY)


def test_search_library_matches_keywords_case_insensitively(library):
    names = [e.name for e in ItemService(library).search_library("MATTRESS")]
    assert names == ["King Bed", "Queen Bed", "Twin Bed"]


def test_search_library_filters_by_category_and_room_type(library):
    service = ItemService(library)

    assert {e.category for e in service.search_library(category="Office")} == {"Office"}
    garage = service.search_library(room_type="garage")
    assert garage
    assert all("garage" in e.room_types for e in garage)


def test_search_library_skips_inactive_entries(library):
    from moving_inventory.models.item_library import ItemLibraryEntry

    entry = library.get(ItemLibraryEntry, "safe")
    entry.is_active = False
    library.commit()

    assert "safe" not in [e.id for e in ItemService(library).search_library("safe")]


def test_categories_are_distinct_and_sorted(library):
    categories = ItemService(library).get_categories()
    assert categories == sorted(set(categories))
    assert "Bedroom" in categories
