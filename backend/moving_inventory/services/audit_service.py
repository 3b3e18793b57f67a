"""Audit logging service.

Appends immutable audit entries for state-changing inventory operations and
reads them back newest-first. Entries are written inside the caller's
transaction: ``append`` only flushes, the calling service commits.

Payloads for known action kinds are validated against the model registered
in ``moving_inventory.schemas.audit.PAYLOAD_MODELS`` before being stored.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Any, List, Optional, Union

from sqlalchemy.orm import Session
from starlette.requests import Request

from moving_inventory.core.config import settings
from moving_inventory.models.audit import AuditLogEntry
from moving_inventory.schemas.audit import PAYLOAD_MODELS, Actor, AuditAction, AuditPayload

logger = logging.getLogger("audit")

PayloadInput = Union[AuditPayload, dict[str, Any], None]

USER_AGENT_MAX_LENGTH = 500


@dataclass(frozen=True)
class ClientInfo:
    """Where a request came from, stamped on every audit entry it writes."""

    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


def client_info(request: Request) -> ClientInfo:
    user_agent = request.headers.get("user-agent", "")[:USER_AGENT_MAX_LENGTH]
    return ClientInfo(
        ip_address=request.client.host if request.client else None,
        user_agent=user_agent or None,
    )


def normalize_payload(action: str, payload: PayloadInput) -> Optional[dict[str, Any]]:
    """Turn a payload model or loose dict into the stored JSON map."""
    if payload is None:
        return None
    if isinstance(payload, AuditPayload):
        return payload.to_json()

    try:
        model = PAYLOAD_MODELS.get(AuditAction(action))
    except ValueError:
        model = None  # unknown action kind, stored as given
    if model is None:
        return dict(payload)
    return model.model_validate(payload).to_json()


class AuditService:
    """Append-only access to the audit log."""

    def __init__(self, db: Session, client: Optional[ClientInfo] = None):
        self.db = db
        self.client = client or ClientInfo()

    def append(
        self,
        inventory_id: Optional[uuid.UUID],
        action: Union[AuditAction, str],
        actor: Union[Actor, str] = Actor.CUSTOMER,
        payload: PayloadInput = None,
    ) -> AuditLogEntry:
        """Write one audit entry.

        Args:
            inventory_id: Owning inventory (nullable, survives deletion as NULL).
            action: Action kind, normally an ``AuditAction``.
            actor: ``customer`` or ``admin``.
            payload: Action-specific payload model or dict.

        The client IP and user agent come from the ``ClientInfo`` the service
        was built with.
        """
        action_value = action.value if isinstance(action, AuditAction) else str(action)
        actor_value = actor.value if isinstance(actor, Actor) else str(actor)

        entry = AuditLogEntry(
            inventory_id=inventory_id,
            action=action_value,
            actor=actor_value,
            payload=normalize_payload(action_value, payload),
            ip_address=self.client.ip_address,
            user_agent=self.client.user_agent,
        )
        self.db.add(entry)
        self.db.flush()
        logger.debug("Audit %s by %s on inventory %s", action_value, actor_value, inventory_id)
        return entry

    def list(self, inventory_id: uuid.UUID, limit: Optional[int] = None) -> List[AuditLogEntry]:
        """Entries for an inventory, newest first."""
        if limit is None:
            limit = settings.audit_default_limit
        return (
            self.db.query(AuditLogEntry)
            .filter(AuditLogEntry.inventory_id == inventory_id)
            .order_by(AuditLogEntry.created_at.desc(), AuditLogEntry.id.desc())
            .limit(limit)
            .all()
        )
