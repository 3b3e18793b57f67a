"""Admin-only inventory operations: dashboard stats, internal notes, CRM push.

Locking, listing and summaries are delegated to ``InventoryService``; this
service owns what exists only in the admin context.
"""

import logging
import uuid
from typing import Any, Dict, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from moving_inventory.core.exceptions import InventoryNotFoundError
from moving_inventory.db.base import utcnow
from moving_inventory.db.session import transaction
from moving_inventory.models.inventory import Inventory, InventoryStatus
from moving_inventory.services.audit_service import ClientInfo
from moving_inventory.services.crm_service import CrmService
from moving_inventory.services.inventory_service import InventoryService

logger = logging.getLogger(__name__)


class AdminService:
    def __init__(self, db: Session, client: Optional[ClientInfo] = None):
        self.db = db
        self.inventories = InventoryService(db, client)

    def get_dashboard_stats(self) -> Dict[str, Any]:
        """Inventory counts by status plus CRM and item totals."""
        by_status = {status.value: 0 for status in InventoryStatus}
        rows = (
            self.db.query(Inventory.status, func.count(Inventory.id))
            .group_by(Inventory.status)
            .all()
        )
        for status, count in rows:
            by_status[status.value] = count

        ghl_pushed = (
            self.db.query(func.count(Inventory.id))
            .filter(Inventory.ghl_submitted_at.isnot(None))
            .scalar()
        )
        total_items = self.db.query(func.coalesce(func.sum(Inventory.total_items), 0)).scalar()

        return {
            "total": sum(by_status.values()),
            "by_status": by_status,
            "ghl_pushed": ghl_pushed or 0,
            "total_items_tracked": int(total_items or 0),
        }

    def add_internal_note(self, inventory_id: uuid.UUID, note: str) -> Inventory:
        """Append a timestamped line to the admin-only notes."""
        with transaction(self.db):
            inventory = self.db.get(Inventory, inventory_id)
            if inventory is None:
                raise InventoryNotFoundError()

            now = utcnow()
            entry = f"[{now.isoformat()}] {note}"
            inventory.internal_notes = (
                f"{inventory.internal_notes}\n{entry}" if inventory.internal_notes else entry
            )
            inventory.updated_at = now
            self.db.flush()

        return inventory

    def push_to_crm(self, inventory_id: uuid.UUID, crm: CrmService) -> Dict[str, Any]:
        """Send the inventory summary to the CRM and record the delivery.

        Nothing is recorded when the webhook is not configured.

        Raises:
            InventoryNotFoundError: Unknown inventory.
            CrmDeliveryError: The webhook call failed.
        """
        summary = self.inventories.get_summary(inventory_id)
        payload = crm.build_payload(summary)
        response = crm.push(payload)

        if response is None:
            return {"delivered": False, "response": None, "payload": payload}

        with transaction(self.db):
            inventory = self.db.get(Inventory, inventory_id)
            now = utcnow()
            inventory.ghl_submitted_at = now
            inventory.ghl_webhook_payload = payload
            inventory.updated_at = now
            self.db.flush()

        logger.info(f"Inventory {inventory_id} pushed to CRM")
        return {"delivered": True, "response": response, "payload": payload}
