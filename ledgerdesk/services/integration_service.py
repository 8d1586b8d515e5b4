"""Simulated third-party accounting and payment integrations."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from ledgerdesk.core.config import settings
from ledgerdesk.core.errors import ValidationError
from ledgerdesk.repositories.documents import InvoiceRepository
from ledgerdesk.repositories.filters import DocumentFilters
from ledgerdesk.services.signatures import verify_signature
from ledgerdesk.utils.time import utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Integration:
    id: str
    name: str
    type: str
    connected: bool
    features: tuple[str, ...] = field(default_factory=tuple)


CATALOGUE: tuple[Integration, ...] = (
    Integration("quickbooks", "QuickBooks Online", "accounting", True, ("invoices", "expenses", "reports")),
    Integration("xero", "Xero", "accounting", False, ("invoices", "bank_feeds", "reports")),
    Integration("stripe", "Stripe", "payment", True, ("payments", "refunds", "subscriptions")),
    Integration("paypal", "PayPal", "payment", False, ("payments", "invoices")),
)
INTEGRATIONS: dict[str, Integration] = {item.id: item for item in CATALOGUE}


@dataclass(frozen=True)
class SyncResult:
    integration: str
    direction: str
    entity_type: str | None
    synced: int | None = None
    imported: int | None = None


def list_integrations() -> list[dict[str, Any]]:
    """Catalogue rows; connected integrations report a fresh ``last_sync``."""
    now = utc_now()
    return [
        {
            "id": item.id,
            "name": item.name,
            "type": item.type,
            "status": "connected" if item.connected else "disconnected",
            "last_sync": now if item.connected else None,
            "features": list(item.features),
        }
        for item in CATALOGUE
    ]


def configure_integration(integration: str) -> tuple[str, datetime]:
    """Acknowledge a configuration request; credentials are neither stored nor echoed."""
    if integration not in INTEGRATIONS:
        raise ValidationError(f"Unknown integration: {integration}")
    return integration, utc_now()


def sync_integration(db: Session, integration: str, direction: str, entity_type: str | None, company_id: str) -> SyncResult:
    if integration == "quickbooks" and direction == "outbound":
        synced = InvoiceRepository(db).count(DocumentFilters(company_id=company_id))
        logger.info("Simulated QuickBooks export of %s invoices for company_id=%s", synced, company_id)
        return SyncResult(integration, direction, entity_type, synced=synced)
    if integration == "quickbooks" and direction == "inbound":
        return SyncResult(integration, direction, entity_type, imported=0)
    raise ValidationError("Unknown integration or direction")


def verify_inbound_webhook(integration: str, body: bytes, signature: str | None) -> bool:
    """Check an inbound provider callback against the shared integration secret."""
    if integration not in INTEGRATIONS:
        return False
    return verify_signature(body, signature, settings.integration_webhook_secret)
