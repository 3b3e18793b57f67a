"""Admin and upload schemas."""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class StatusCounts(BaseModel):
    draft: int = 0
    in_progress: int = 0
    submitted: int = 0
    locked: int = 0


class DashboardStats(BaseModel):
    total: int
    by_status: StatusCounts
    ghl_pushed: int
    total_items_tracked: int


class InternalNoteCreate(BaseModel):
    note: str = Field(min_length=1, max_length=5000)


class CrmPushResponse(BaseModel):
    """Result of forwarding an inventory to the CRM.

    ``delivered`` is False when no webhook URL is configured.
    """

    delivered: bool
    response: Optional[Any] = None
    payload: Optional[Dict[str, Any]] = None


class UploadImageRequest(BaseModel):
    base64_data: str = Field(min_length=1)
    inventory_token: Optional[str] = None


class UploadImageResponse(BaseModel):
    url: str


class SignedUploadParams(BaseModel):
    timestamp: int
    signature: str
    api_key: Optional[str] = None
    cloud_name: Optional[str] = None
    folder: str
