"""Image hosting via Cloudinary signed uploads."""

import hashlib
import logging
import time
from typing import Any, Dict, Optional

import httpx

from moving_inventory.core.config import Settings
from moving_inventory.core.exceptions import UploadNotConfiguredError

logger = logging.getLogger(__name__)

CLOUDINARY_API_BASE = "https://api.cloudinary.com/v1_1"
DEFAULT_FOLDER = "moving-inventory"


def sign(params: str, secret: str) -> str:
    """Cloudinary signature: sha1 hex of the sorted param string plus the secret."""
    return hashlib.sha1(f"{params}{secret}".encode("utf-8")).hexdigest()


class UploadService:
    """Uploads item photos and hands out signed params for direct browser uploads."""

    def __init__(self, settings: Settings):
        self.cloud_name = settings.cloudinary_cloud_name
        self.api_key = settings.cloudinary_api_key
        self.api_secret = settings.cloudinary_api_secret
        self.upload_preset = settings.cloudinary_upload_preset

    @property
    def is_configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)

    @property
    def _upload_url(self) -> str:
        return f"{CLOUDINARY_API_BASE}/{self.cloud_name}/image/upload"

    def upload_base64_image(
        self,
        base64_data: str,
        folder: str = DEFAULT_FOLDER,
        inventory_token: Optional[str] = None,
    ) -> str:
        """Upload a base64 image (bare or data URI) and return its secure URL.

        Raises:
            UploadNotConfiguredError: Cloudinary credentials are missing.
            httpx.HTTPError: Cloudinary rejected the upload.
        """
        if not self.is_configured:
            raise UploadNotConfiguredError()

        timestamp = int(time.time())
        public_id = f"{folder}/{inventory_token or 'misc'}/{int(time.time() * 1000)}"
        signature = sign(
            f"folder={folder}&public_id={public_id}&timestamp={timestamp}", self.api_secret
        )

        file_data = base64_data if base64_data.startswith("data:") else f"data:image/jpeg;base64,{base64_data}"
        form = {
            "file": file_data,
            "upload_preset": self.upload_preset,
            "public_id": public_id,
            "folder": folder,
            "timestamp": str(timestamp),
            "api_key": self.api_key,
            "signature": signature,
        }

        resp = httpx.post(self._upload_url, data=form, timeout=30.0)
        resp.raise_for_status()
        url = resp.json()["secure_url"]
        logger.info(f"Uploaded image {public_id}")
        return url

    def get_signed_upload_params(self, folder: str = DEFAULT_FOLDER) -> Dict[str, Any]:
        """Params the browser needs to upload straight to Cloudinary."""
        if not self.is_configured:
            raise UploadNotConfiguredError()

        timestamp = int(time.time())
        return {
            "timestamp": timestamp,
            "signature": sign(f"folder={folder}&timestamp={timestamp}", self.api_secret),
            "api_key": self.api_key,
            "cloud_name": self.cloud_name,
            "folder": folder,
        }
