"""Room routes nested under an inventory token."""

import uuid
from typing import List

from fastapi import APIRouter, Request, status

from moving_inventory.core.rate_limit import limiter
from moving_inventory.db.session import DbSession
from moving_inventory.schemas.inventory import (
    DeletedResponse,
    RoomCreate,
    RoomResponse,
    RoomUpdate,
)
from moving_inventory.services.audit_service import client_info
from moving_inventory.services.room_service import RoomService

router = APIRouter()


@router.get("/{token}/rooms", response_model=List[RoomResponse])
@limiter.limit("60/minute")
async def list_rooms(request: Request, db: DbSession, token: str):
    """List rooms in display order."""
    service = RoomService(db)
    inventory = service.inventories.find_by_token(token)
    return service.list_for_inventory(inventory.id)


@router.post("/{token}/rooms", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("60/minute")
async def create_room(request: Request, db: DbSession, token: str, data: RoomCreate):
    """Add a room."""
    service = RoomService(db, client_info(request))
    inventory = service.inventories.find_by_token(token)
    return service.create(inventory.id, data.type, data.custom_name)


@router.patch("/{token}/rooms/{room_id}", response_model=RoomResponse)
@limiter.limit("60/minute")
async def update_room(
    request: Request, db: DbSession, token: str, room_id: uuid.UUID, data: RoomUpdate
):
    """Rename, reorder or mark a room complete."""
    service = RoomService(db, client_info(request))
    inventory = service.inventories.find_by_token(token)
    return service.update(room_id, data, inventory_id=inventory.id)


@router.delete("/{token}/rooms/{room_id}", response_model=DeletedResponse)
@limiter.limit("30/minute")
async def delete_room(request: Request, db: DbSession, token: str, room_id: uuid.UUID):
    """Delete a room and everything in it."""
    service = RoomService(db, client_info(request))
    inventory = service.inventories.find_by_token(token)
    service.delete(room_id, inventory_id=inventory.id)
    return DeletedResponse()
