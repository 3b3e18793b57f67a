"""Item library (catalogue) routes."""

from typing import List, Optional

from fastapi import APIRouter, Query, Request

from moving_inventory.core.rate_limit import limiter
from moving_inventory.db.session import DbSession
from moving_inventory.schemas.item_library import ItemLibraryResponse
from moving_inventory.services.item_service import ItemService

router = APIRouter()


@router.get("", response_model=List[ItemLibraryResponse])
@limiter.limit("120/minute")
async def search_item_library(
    request: Request,
    db: DbSession,
    q: Optional[str] = Query(None, max_length=100),
    category: Optional[str] = Query(None),
    room_type: Optional[str] = Query(None),
):
    """Search the catalogue by name, category or keyword."""
    return ItemService(db).search_library(q, category, room_type)


@router.get("/categories", response_model=List[str])
@limiter.limit("60/minute")
async def list_categories(request: Request, db: DbSession):
    """Distinct catalogue categories."""
    return ItemService(db).get_categories()
