"""Default item catalogue loaded into an empty ``item_library`` table on startup.

Volumes are cubic feet and weights pounds per single item, using the usual
7 lbs per cu ft mover's estimate where no better figure is known.
"""

import logging
from decimal import Decimal

from sqlalchemy.orm import Session

from moving_inventory.models.item_library import ItemLibraryEntry

logger = logging.getLogger(__name__)

BEDROOMS = ["master_bedroom", "bedroom"]

ITEM_LIBRARY = [
    # Bedroom
    {"id": "king-bed", "name": "King Bed", "category": "Bedroom", "room_types": BEDROOMS,
     "cu_ft": "70", "weight": "350", "requires_disassembly": True, "search_keywords": "bed mattress frame king"},
    {"id": "queen-bed", "name": "Queen Bed", "category": "Bedroom", "room_types": BEDROOMS,
     "cu_ft": "60", "weight": "300", "requires_disassembly": True, "search_keywords": "bed mattress frame queen"},
    {"id": "twin-bed", "name": "Twin Bed", "category": "Bedroom", "room_types": BEDROOMS,
     "cu_ft": "40", "weight": "200", "requires_disassembly": True, "search_keywords": "bed mattress frame single twin"},
    {"id": "dresser", "name": "Dresser", "category": "Bedroom", "room_types": BEDROOMS,
     "cu_ft": "30", "weight": "210", "search_keywords": "drawers chest"},
    {"id": "nightstand", "name": "Nightstand", "category": "Bedroom", "room_types": BEDROOMS,
     "cu_ft": "5", "weight": "35", "search_keywords": "bedside table"},
    # Living room
    {"id": "sofa-3-seat", "name": "Sofa (3 Seat)", "category": "Living Room", "room_types": ["living_room", "basement"],
     "cu_ft": "50", "weight": "350", "search_keywords": "couch sofa settee"},
    {"id": "loveseat", "name": "Loveseat", "category": "Living Room", "room_types": ["living_room"],
     "cu_ft": "35", "weight": "245", "search_keywords": "couch sofa"},
    {"id": "armchair", "name": "Armchair", "category": "Living Room", "room_types": ["living_room", "bedroom", "office"],
     "cu_ft": "15", "weight": "105", "search_keywords": "chair recliner"},
    {"id": "coffee-table", "name": "Coffee Table", "category": "Living Room", "room_types": ["living_room"],
     "cu_ft": "5", "weight": "35", "search_keywords": "table"},
    {"id": "tv-large", "name": "TV (50\" or larger)", "category": "Electronics", "room_types": ["living_room", "bedroom", "basement"],
     "cu_ft": "10", "weight": "70", "is_fragile": True, "search_keywords": "television screen flat"},
    {"id": "piano-upright", "name": "Upright Piano", "category": "Specialty", "room_types": ["living_room", "basement"],
     "cu_ft": "60", "weight": "500", "is_specialty_item": True, "search_keywords": "piano instrument"},
    # Dining and kitchen
    {"id": "dining-table", "name": "Dining Table", "category": "Dining Room", "room_types": ["dining_room", "kitchen"],
     "cu_ft": "30", "weight": "210", "requires_disassembly": True, "search_keywords": "table"},
    {"id": "dining-chair", "name": "Dining Chair", "category": "Dining Room", "room_types": ["dining_room", "kitchen"],
     "cu_ft": "5", "weight": "35", "search_keywords": "chair"},
    {"id": "china-cabinet", "name": "China Cabinet", "category": "Dining Room", "room_types": ["dining_room"],
     "cu_ft": "50", "weight": "350", "is_fragile": True, "search_keywords": "hutch cabinet glass"},
    {"id": "refrigerator", "name": "Refrigerator", "category": "Appliances", "room_types": ["kitchen", "garage"],
     "cu_ft": "45", "weight": "300", "search_keywords": "fridge freezer appliance"},
    {"id": "microwave", "name": "Microwave", "category": "Appliances", "room_types": ["kitchen"],
     "cu_ft": "3", "weight": "25", "search_keywords": "appliance"},
    # Office
    {"id": "desk", "name": "Desk", "category": "Office", "room_types": ["office", "bedroom"],
     "cu_ft": "25", "weight": "175", "requires_disassembly": True, "search_keywords": "table workstation"},
    {"id": "office-chair", "name": "Office Chair", "category": "Office", "room_types": ["office"],
     "cu_ft": "8", "weight": "40", "search_keywords": "chair"},
    {"id": "filing-cabinet", "name": "Filing Cabinet", "category": "Office", "room_types": ["office", "storage"],
     "cu_ft": "10", "weight": "70", "search_keywords": "cabinet drawers files"},
    # Garage and outdoor
    {"id": "lawn-mower", "name": "Lawn Mower", "category": "Outdoor", "room_types": ["garage", "outdoor"],
     "cu_ft": "15", "weight": "80", "search_keywords": "mower yard"},
    {"id": "patio-table", "name": "Patio Table", "category": "Outdoor", "room_types": ["outdoor"],
     "cu_ft": "20", "weight": "60", "search_keywords": "table garden"},
    {"id": "tool-chest", "name": "Tool Chest", "category": "Garage", "room_types": ["garage", "basement"],
     "cu_ft": "20", "weight": "250", "search_keywords": "tools toolbox"},
    {"id": "safe", "name": "Safe", "category": "Specialty", "room_types": ["office", "master_bedroom", "basement"],
     "cu_ft": "10", "weight": "400", "is_specialty_item": True, "search_keywords": "gun safe vault"},
    # Boxes
    {"id": "box-medium", "name": "Medium Box", "category": "Boxes", "room_types": [],
     "cu_ft": "3", "weight": "30", "search_keywords": "box carton packing"},
    {"id": "box-large", "name": "Large Box", "category": "Boxes", "room_types": [],
     "cu_ft": "4.5", "weight": "40", "search_keywords": "box carton packing"},
]


def seed_item_library(db: Session) -> int:
    """Insert the default catalogue if the table is empty. Returns rows added."""
    if db.query(ItemLibraryEntry).first() is not None:
        return 0

    for position, entry in enumerate(ITEM_LIBRARY):
        db.add(ItemLibraryEntry(
            id=entry["id"],
            name=entry["name"],
            category=entry["category"],
            room_types=list(entry["room_types"]),
            cu_ft=Decimal(entry["cu_ft"]),
            weight=Decimal(entry["weight"]),
            is_specialty_item=entry.get("is_specialty_item", False),
            requires_disassembly=entry.get("requires_disassembly", False),
            is_fragile=entry.get("is_fragile", False),
            search_keywords=entry.get("search_keywords"),
            sort_order=position,
        ))
    db.commit()

    logger.info(f"Seeded item library with {len(ITEM_LIBRARY)} entries")
    return len(ITEM_LIBRARY)
