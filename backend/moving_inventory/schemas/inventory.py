"""Inventory, room and room item schemas."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional, Union

from pydantic import BaseModel, EmailStr, Field, field_validator

from moving_inventory.core.config import settings
from moving_inventory.models.inventory import InventoryStatus, RoomType


# ==================== INVENTORY ====================

class InventoryCreate(BaseModel):
    """Customer-initiated inventory creation. Every field is optional."""

    customer_name: Optional[str] = Field(default=None, max_length=255)
    customer_email: Optional[EmailStr] = None
    customer_phone: Optional[str] = Field(default=None, max_length=50)
    move_date: Optional[Union[datetime, date]] = None  # "YYYY-MM-DD" or full ISO-8601
    from_address: Optional[str] = None
    to_address: Optional[str] = None
    notes: Optional[str] = None


class InventoryUpdate(InventoryCreate):
    """Partial update; only fields present in the request body are applied."""

    pass


class InventoryCreatedResponse(BaseModel):
    id: uuid.UUID
    token: str
    access_url: str
    expires_at: Optional[datetime] = None


class RoomItemResponse(BaseModel):
    """Room item response schema."""

    id: uuid.UUID
    room_id: uuid.UUID
    inventory_id: uuid.UUID
    item_library_id: Optional[str] = None
    name: str
    category: Optional[str] = None
    quantity: int
    cu_ft_per_item: Decimal
    weight_per_item: Decimal
    total_cu_ft: Decimal
    total_weight: Decimal
    is_specialty_item: bool
    requires_disassembly: bool
    is_fragile: bool
    is_high_value: bool
    images: List[str] = []
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class RoomResponse(BaseModel):
    """Room response schema with its items."""

    id: uuid.UUID
    inventory_id: uuid.UUID
    type: RoomType
    custom_name: Optional[str] = None
    display_name: str
    sort_order: int
    is_complete: bool
    items: List[RoomItemResponse] = []
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class InventoryListItem(BaseModel):
    """Inventory without nested rooms (listing rows)."""

    id: uuid.UUID
    token: str
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    move_date: Optional[datetime] = None
    from_address: Optional[str] = None
    to_address: Optional[str] = None
    status: InventoryStatus
    is_locked: bool
    locked_at: Optional[datetime] = None
    total_items: int
    total_cu_ft: Decimal
    total_weight: Decimal
    notes: Optional[str] = None
    submitted_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    expires_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class InventoryResponse(InventoryListItem):
    """Customer view: inventory with rooms and items."""

    rooms: List[RoomResponse] = []


class InventoryAdminResponse(InventoryResponse):
    """Admin view adds internal notes and CRM bookkeeping."""

    internal_notes: Optional[str] = None
    ghl_contact_id: Optional[str] = None
    ghl_submitted_at: Optional[datetime] = None


class InventoryAdminListItem(InventoryListItem):
    internal_notes: Optional[str] = None
    ghl_submitted_at: Optional[datetime] = None


# ==================== ROOMS ====================

class RoomCreate(BaseModel):
    type: RoomType
    custom_name: Optional[str] = Field(default=None, max_length=255)


class RoomUpdate(BaseModel):
    """Partial room update. Only ``custom_name`` can be cleared with null."""

    custom_name: Optional[str] = Field(default=None, max_length=255)
    is_complete: Optional[bool] = None
    sort_order: Optional[int] = Field(default=None, ge=0)

    @field_validator("is_complete", "sort_order")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


# ==================== ROOM ITEMS ====================

class RoomItemUpsert(BaseModel):
    """Add an item to a room, or update the existing row for the same library item."""

    item_library_id: Optional[str] = Field(default=None, max_length=100)
    name: str = Field(min_length=1, max_length=255)
    category: Optional[str] = Field(default=None, max_length=100)
    quantity: int = Field(ge=1)
    cu_ft_per_item: Optional[Decimal] = Field(default=None, ge=0)
    weight_per_item: Optional[Decimal] = Field(default=None, ge=0)
    is_specialty_item: bool = False
    requires_disassembly: bool = False
    is_fragile: bool = False
    is_high_value: bool = False
    images: Optional[List[str]] = Field(default=None, max_length=settings.max_item_photos)
    notes: Optional[str] = None


class QuantityUpdate(BaseModel):
    """Zero or a negative quantity removes the item."""

    quantity: int


class ImagesUpdate(BaseModel):
    images: List[str] = Field(max_length=settings.max_item_photos)


class DeletedResponse(BaseModel):
    deleted: bool = True


# ==================== SUMMARY ====================

class RoomSummary(BaseModel):
    id: uuid.UUID
    type: RoomType
    name: str
    item_count: int
    cu_ft: Decimal
    weight: Decimal
    items: List[RoomItemResponse] = []


class SummaryTotals(BaseModel):
    items: int
    cu_ft: Decimal
    weight: Decimal


class InventorySummaryResponse(BaseModel):
    inventory: InventoryResponse
    room_summaries: List[RoomSummary]
    specialty_items: List[RoomItemResponse]
    totals: SummaryTotals


class AdminInventorySummaryResponse(InventorySummaryResponse):
    inventory: InventoryAdminResponse
