"""Inventory totals: item count, cubic feet and weight.

Totals are always recomputed in full from the inventory's room items, never
adjusted by deltas, so a skipped or failed recompute heals on the next one.
"""

import logging
import uuid
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy.orm import Session

from moving_inventory.core.exceptions import InventoryNotFoundError
from moving_inventory.db.base import utcnow
from moving_inventory.models.inventory import Inventory, RoomItem

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def quantize(value: Decimal) -> Decimal:
    """Round to the 2-decimal precision used for stored volumes and weights."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Totals:
    total_items: int
    total_cu_ft: Decimal
    total_weight: Decimal


class TotalsService:
    """Recomputes derived totals on the inventory row."""

    def __init__(self, db: Session):
        self.db = db

    def compute(self, inventory_id: uuid.UUID) -> Totals:
        """Sum the inventory's room items without writing anything."""
        items = self.db.query(RoomItem).filter(RoomItem.inventory_id == inventory_id).all()

        total_items = 0
        total_cu_ft = Decimal("0")
        total_weight = Decimal("0")
        for item in items:
            total_items += item.quantity or 0
            total_cu_ft += Decimal(item.total_cu_ft or 0)
            total_weight += Decimal(item.total_weight or 0)

        return Totals(
            total_items=total_items,
            total_cu_ft=quantize(total_cu_ft),
            total_weight=quantize(total_weight),
        )

    def recalculate(self, inventory_id: uuid.UUID) -> Totals:
        """Recompute and store totals for one inventory.

        Pending item writes must be flushed before calling this; the caller
        owns the transaction and commits.
        """
        inventory = self.db.get(Inventory, inventory_id)
        if inventory is None:
            raise InventoryNotFoundError()

        totals = self.compute(inventory_id)
        inventory.total_items = totals.total_items
        inventory.total_cu_ft = totals.total_cu_ft
        inventory.total_weight = totals.total_weight
        inventory.updated_at = utcnow()
        self.db.flush()

        logger.debug(
            "Totals for inventory %s: %s items, %s cu ft, %s lbs",
            inventory_id, totals.total_items, totals.total_cu_ft, totals.total_weight,
        )
        return totals
