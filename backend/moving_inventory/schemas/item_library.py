"""Item library schemas."""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel


class ItemLibraryResponse(BaseModel):
    """Catalogue entry as offered to the customer's item picker."""

    id: str
    name: str
    category: str
    room_types: List[str] = []
    cu_ft: Decimal
    weight: Decimal
    is_specialty_item: bool
    requires_disassembly: bool
    is_fragile: bool
    search_keywords: Optional[str] = None
    sort_order: int

    model_config = {"from_attributes": True}
