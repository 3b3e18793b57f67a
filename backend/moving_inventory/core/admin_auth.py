"""Admin access check (shared ``x-admin-key`` header)."""

import hmac
import logging
from typing import Annotated, Optional

from fastapi import Depends, Header

from moving_inventory.core.config import Settings, get_settings
from moving_inventory.core.exceptions import AdminUnauthorizedError

logger = logging.getLogger("auth")


def validate_admin_key(api_key: Optional[str], settings: Settings) -> None:
    """Raise unless ``api_key`` matches the configured admin key.

    An unconfigured key rejects every request.
    """
    expected = settings.admin_api_key
    if not expected:
        logger.error("ADMIN_API_KEY is not set; rejecting admin request")
        raise AdminUnauthorizedError()
    if not api_key or not hmac.compare_digest(api_key.encode("utf-8"), expected.encode("utf-8")):
        logger.warning("Rejected admin request with invalid key")
        raise AdminUnauthorizedError()


async def require_admin(
    x_admin_key: Optional[str] = Header(None, alias="x-admin-key"),
    settings: Settings = Depends(get_settings),
) -> str:
    """FastAPI dependency guarding every admin route."""
    validate_admin_key(x_admin_key, settings)
    return "admin"


AdminAccess = Annotated[str, Depends(require_admin)]
