"""Third-party integration schemas."""

from datetime import datetime
from typing import Any

from pydantic import Field

from ledgerdesk.schemas.common import ApiModel


class IntegrationRead(ApiModel):
    id: str
    name: str
    type: str
    status: str
    last_sync: datetime | None = None
    features: list[str]


class IntegrationListResponse(ApiModel):
    integrations: list[IntegrationRead]


class IntegrationConfigureRequest(ApiModel):
    integration: str
    credentials: dict[str, Any] = Field(default_factory=dict)
    company_id: str | None = None


class IntegrationConfigured(ApiModel):
    id: str
    status: str
    configured_at: datetime


class IntegrationConfigureResponse(ApiModel):
    success: bool
    integration: IntegrationConfigured


class IntegrationSyncRequest(ApiModel):
    integration: str
    direction: str
    entity_type: str | None = None
    filters: dict[str, Any] = Field(default_factory=dict)


class IntegrationSyncResponse(ApiModel):
    success: bool
    integration: str
    direction: str
    entity_type: str | None
    synced: int | None = None
    imported: int | None = None


class WebhookReceipt(ApiModel):
    received: bool
