"""Seeded item catalogue."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import JSON, Boolean, DateTime, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from moving_inventory.db.base import Base, utcnow


class ItemLibraryEntry(Base):
    """Reference item with default category, volume and weight.

    Read-only at runtime; rows come from ``moving_inventory.data.item_library_seed``.
    """

    __tablename__ = "item_library"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)  # slug, e.g. "queen-bed"
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    category: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    room_types: Mapped[List[str]] = mapped_column(JSON, default=list, nullable=False)
    cu_ft: Mapped[Decimal] = mapped_column(Numeric(8, 2), default=Decimal("0"), nullable=False)
    weight: Mapped[Decimal] = mapped_column(Numeric(8, 2), default=Decimal("0"), nullable=False)
    is_specialty_item: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    requires_disassembly: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_fragile: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    search_keywords: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
