"""Admin inventory routes. Every route requires the x-admin-key header."""

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request

from moving_inventory.core.admin_auth import AdminAccess
from moving_inventory.core.config import Settings, get_settings
from moving_inventory.core.exceptions import InventoryNotFoundError
from moving_inventory.core.rate_limit import limiter
from moving_inventory.db.session import DbSession
from moving_inventory.models.inventory import Inventory, InventoryStatus
from moving_inventory.schemas.admin import CrmPushResponse, DashboardStats, InternalNoteCreate
from moving_inventory.schemas.audit import AuditLogResponse
from moving_inventory.schemas.inventory import (
    AdminInventorySummaryResponse,
    InventoryAdminListItem,
    InventoryAdminResponse,
)
from moving_inventory.services.activity_service import activity_feed
from moving_inventory.services.admin_service import AdminService
from moving_inventory.services.audit_service import client_info
from moving_inventory.services.crm_service import CrmService
from moving_inventory.services.inventory_service import InventoryService

router = APIRouter()


@router.get("/stats", response_model=DashboardStats)
@limiter.limit("60/minute")
async def get_stats(request: Request, db: DbSession, _: AdminAccess):
    """Dashboard counters."""
    return AdminService(db).get_dashboard_stats()


@router.get("", response_model=List[InventoryAdminListItem])
@limiter.limit("60/minute")
async def list_inventories(
    request: Request,
    db: DbSession,
    _: AdminAccess,
    status: Optional[InventoryStatus] = Query(None),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    """List inventories, newest first."""
    return InventoryService(db).find_all(status, limit=limit, offset=offset)


@router.get("/{inventory_id}/summary", response_model=AdminInventorySummaryResponse)
@limiter.limit("60/minute")
async def get_summary(request: Request, db: DbSession, _: AdminAccess, inventory_id: uuid.UUID):
    """Full summary including internal notes."""
    return InventoryService(db).get_summary(inventory_id)


@router.post("/{inventory_id}/lock", response_model=InventoryAdminResponse)
@limiter.limit("30/minute")
async def lock_inventory(request: Request, db: DbSession, _: AdminAccess, inventory_id: uuid.UUID):
    """Lock an inventory against further customer changes."""
    return InventoryService(db, client_info(request)).lock(inventory_id)


@router.post("/{inventory_id}/push-ghl", response_model=CrmPushResponse)
@limiter.limit("10/minute")
def push_to_crm(
    request: Request,
    db: DbSession,
    _: AdminAccess,
    inventory_id: uuid.UUID,
    settings: Settings = Depends(get_settings),
):
    """Send the inventory to the CRM webhook."""
    return AdminService(db).push_to_crm(inventory_id, CrmService(settings))


@router.patch("/{inventory_id}/notes")
@limiter.limit("30/minute")
async def add_internal_note(
    request: Request,
    db: DbSession,
    _: AdminAccess,
    inventory_id: uuid.UUID,
    data: InternalNoteCreate,
):
    """Append an internal note."""
    inventory = AdminService(db).add_internal_note(inventory_id, data.note)
    return {"message": "Note added", "internal_notes": inventory.internal_notes}


@router.get("/{inventory_id}/audit-logs", response_model=List[AuditLogResponse])
@limiter.limit("60/minute")
async def get_audit_logs(
    request: Request,
    db: DbSession,
    _: AdminAccess,
    inventory_id: uuid.UUID,
    limit: Optional[int] = Query(None, ge=1, le=100),
):
    """Recent activity for an inventory, newest first."""
    if db.get(Inventory, inventory_id) is None:
        raise InventoryNotFoundError()
    return activity_feed(db, inventory_id, limit)
