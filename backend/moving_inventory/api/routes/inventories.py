"""Customer inventory routes, addressed by access token."""

from fastapi import APIRouter, Request, status

from moving_inventory.core.config import settings
from moving_inventory.core.rate_limit import limiter
from moving_inventory.db.session import DbSession
from moving_inventory.schemas.inventory import (
    InventoryCreate,
    InventoryCreatedResponse,
    InventoryResponse,
    InventorySummaryResponse,
    InventoryUpdate,
)
from moving_inventory.services.audit_service import client_info
from moving_inventory.services.inventory_service import InventoryService

router = APIRouter()


def access_url(token: str) -> str:
    return f"{settings.web_url.rstrip('/')}/inventory/{token}"


@router.post("", response_model=InventoryCreatedResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("20/minute")
async def create_inventory(request: Request, db: DbSession, data: InventoryCreate):
    """Start a new inventory and hand back its access link."""
    inventory = InventoryService(db, client_info(request)).create(data)
    return InventoryCreatedResponse(
        id=inventory.id,
        token=inventory.token,
        access_url=access_url(inventory.token),
        expires_at=inventory.expires_at,
    )


@router.get("/{token}", response_model=InventoryResponse)
@limiter.limit("60/minute")
async def get_inventory(request: Request, db: DbSession, token: str):
    """Get an inventory with its rooms and items."""
    return InventoryService(db).find_by_token(token)


@router.patch("/{token}", response_model=InventoryResponse)
@limiter.limit("60/minute")
async def update_inventory(request: Request, db: DbSession, token: str, data: InventoryUpdate):
    """Update customer and move details."""
    service = InventoryService(db, client_info(request))
    inventory = service.find_by_token(token)
    return service.update(inventory.id, data)


@router.post("/{token}/submit", response_model=InventoryResponse)
@limiter.limit("10/minute")
async def submit_inventory(request: Request, db: DbSession, token: str):
    """Submit the inventory for review."""
    service = InventoryService(db, client_info(request))
    inventory = service.find_by_token(token)
    return service.submit(inventory.id)


@router.get("/{token}/summary", response_model=InventorySummaryResponse)
@limiter.limit("60/minute")
async def get_inventory_summary(request: Request, db: DbSession, token: str):
    """Per-room totals and specialty items."""
    service = InventoryService(db)
    inventory = service.find_by_token(token)
    return service.get_summary(inventory.id)
