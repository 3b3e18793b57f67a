"""CRM webhook (GoHighLevel) integration.

Builds the submitted-inventory payload and POSTs it to the configured
webhook. Delivery is attempted once; there is no retry queue.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

import httpx

from moving_inventory.core.config import Settings
from moving_inventory.core.exceptions import CrmDeliveryError

logger = logging.getLogger(__name__)

PAYLOAD_SOURCE = "moving-inventory-app"
PAYLOAD_VERSION = "1.0"


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _number(value: Any) -> float:
    return float(Decimal(value or 0))


class CrmService:
    """Push inventory summaries to the CRM webhook."""

    def __init__(self, settings: Settings):
        self.webhook_url = settings.crm_webhook_url
        self.api_key = settings.crm_api_key
        self.timeout = settings.crm_timeout_seconds
        self.web_url = settings.web_url.rstrip("/")

    @property
    def is_configured(self) -> bool:
        return bool(self.webhook_url)

    def build_payload(self, summary: Dict[str, Any]) -> Dict[str, Any]:
        """Flatten an inventory summary into the webhook body."""
        inventory = summary["inventory"]
        totals = summary["totals"]

        rooms = []
        for room in summary["room_summaries"]:
            rooms.append({
                "name": room["name"],
                "type": room["type"].value,
                "itemCount": room["item_count"],
                "items": [
                    {
                        "name": item.name,
                        "quantity": item.quantity,
                        "cuFt": _number(item.total_cu_ft),
                        "weight": _number(item.total_weight),
                        "isSpecialty": item.is_specialty_item,
                    }
                    for item in room["items"]
                ],
            })

        return {
            "inventoryId": str(inventory.id),
            "token": inventory.token,
            "customerName": inventory.customer_name,
            "customerEmail": inventory.customer_email,
            "customerPhone": inventory.customer_phone,
            "fromAddress": inventory.from_address,
            "toAddress": inventory.to_address,
            "moveDate": _iso(inventory.move_date),
            "totalItems": totals["items"],
            "totalCuFt": _number(totals["cu_ft"]),
            "totalWeight": _number(totals["weight"]),
            "rooms": rooms,
            "specialtyItems": [
                f"{item.quantity}x {item.name}" for item in summary["specialty_items"]
            ],
            "submittedAt": _iso(inventory.submitted_at),
            "inventoryUrl": f"{self.web_url}/inventory/{inventory.token}",
        }

    def push(self, payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """POST the payload. Returns the CRM response body, or None when not configured.

        Raises:
            CrmDeliveryError: The request failed or the CRM answered with an error status.
        """
        if not self.is_configured:
            logger.warning("CRM webhook not configured. Set CRM_WEBHOOK_URL to enable pushes.")
            return None

        body = {**payload, "source": PAYLOAD_SOURCE, "version": PAYLOAD_VERSION}
        headers = {"Content-Type": "application/json", "X-API-Key": self.api_key}

        try:
            resp = httpx.post(self.webhook_url, json=body, headers=headers, timeout=self.timeout)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"CRM push failed for inventory {payload.get('inventoryId')}: {e}")
            raise CrmDeliveryError(f"CRM push failed: {e}") from e

        logger.info(f"CRM push delivered for inventory {payload.get('inventoryId')}")
        try:
            return resp.json()
        except ValueError:
            return {"status_code": resp.status_code, "text": resp.text}
