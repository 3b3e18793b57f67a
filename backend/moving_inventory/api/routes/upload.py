"""Image upload routes (Cloudinary)."""

import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from moving_inventory.core.config import Settings, get_settings
from moving_inventory.core.rate_limit import limiter
from moving_inventory.schemas.admin import (
    SignedUploadParams,
    UploadImageRequest,
    UploadImageResponse,
)
from moving_inventory.services.upload_service import DEFAULT_FOLDER, UploadService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/image", response_model=UploadImageResponse)
@limiter.limit("30/minute")
def upload_image(
    request: Request,
    data: UploadImageRequest,
    settings: Settings = Depends(get_settings),
):
    """Upload a base64 photo and return its hosted URL."""
    try:
        url = UploadService(settings).upload_base64_image(
            data.base64_data, DEFAULT_FOLDER, data.inventory_token
        )
    except httpx.HTTPError as e:
        logger.error(f"Image upload failed: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Image upload failed")
    return UploadImageResponse(url=url)


@router.get("/sign", response_model=SignedUploadParams)
@limiter.limit("60/minute")
async def get_signed_params(
    request: Request,
    folder: str = Query(DEFAULT_FOLDER, max_length=100),
    settings: Settings = Depends(get_settings),
):
    """Signed params for a direct browser upload."""
    return UploadService(settings).get_signed_upload_params(folder)
