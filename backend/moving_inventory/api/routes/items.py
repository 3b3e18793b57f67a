"""Room item routes nested under an inventory token and room."""

import uuid
from typing import Union

from fastapi import APIRouter, Request, status

from moving_inventory.core.exceptions import ItemNotFoundError
from moving_inventory.core.rate_limit import limiter
from moving_inventory.db.session import DbSession
from moving_inventory.schemas.inventory import (
    DeletedResponse,
    ImagesUpdate,
    QuantityUpdate,
    RoomItemResponse,
    RoomItemUpsert,
)
from moving_inventory.services.audit_service import client_info
from moving_inventory.services.item_service import ItemService

router = APIRouter()


def _item_in_room(service: ItemService, inventory_id: uuid.UUID, room_id: uuid.UUID, item_id: uuid.UUID):
    item = service.get(item_id, inventory_id)
    if item.room_id != room_id:
        raise ItemNotFoundError()
    return item


@router.post(
    "/{token}/rooms/{room_id}/items",
    response_model=RoomItemResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit("120/minute")
async def upsert_item(
    request: Request, db: DbSession, token: str, room_id: uuid.UUID, data: RoomItemUpsert
):
    """Add an item, or bump the quantity of the same library item in this room."""
    service = ItemService(db, client_info(request))
    inventory = service.inventories.find_by_token(token)
    return service.upsert(inventory.id, room_id, data)


@router.patch(
    "/{token}/rooms/{room_id}/items/{item_id}/quantity",
    response_model=Union[RoomItemResponse, DeletedResponse],
)
@limiter.limit("120/minute")
async def update_item_quantity(
    request: Request,
    db: DbSession,
    token: str,
    room_id: uuid.UUID,
    item_id: uuid.UUID,
    data: QuantityUpdate,
):
    """Change an item's quantity. Zero or less removes it."""
    service = ItemService(db, client_info(request))
    inventory = service.inventories.find_by_token(token)
    _item_in_room(service, inventory.id, room_id, item_id)
    item = service.update_quantity(item_id, data.quantity, inventory_id=inventory.id)
    if item is None:
        return DeletedResponse()
    return item


@router.patch(
    "/{token}/rooms/{room_id}/items/{item_id}/images",
    response_model=RoomItemResponse,
)
@limiter.limit("60/minute")
async def update_item_images(
    request: Request,
    db: DbSession,
    token: str,
    room_id: uuid.UUID,
    item_id: uuid.UUID,
    data: ImagesUpdate,
):
    """Replace an item's photo URLs."""
    service = ItemService(db, client_info(request))
    inventory = service.inventories.find_by_token(token)
    _item_in_room(service, inventory.id, room_id, item_id)
    return service.update_images(item_id, data.images, inventory_id=inventory.id)


@router.delete("/{token}/rooms/{room_id}/items/{item_id}", response_model=DeletedResponse)
@limiter.limit("60/minute")
async def delete_item(
    request: Request, db: DbSession, token: str, room_id: uuid.UUID, item_id: uuid.UUID
):
    """Remove an item."""
    service = ItemService(db, client_info(request))
    inventory = service.inventories.find_by_token(token)
    _item_in_room(service, inventory.id, room_id, item_id)
    service.delete(item_id, inventory_id=inventory.id)
    return DeletedResponse()
