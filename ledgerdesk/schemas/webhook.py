"""Outbound webhook subscription schemas."""

from datetime import datetime
from typing import Literal

from pydantic import Field

from ledgerdesk.schemas.common import ApiModel


class WebhookCreate(ApiModel):
    company_id: str | None = None
    url: str
    events: list[str] = Field(min_length=1)
    description: str | None = None
    active: bool = True


class WebhookUpdate(ApiModel):
    id: str
    url: str | None = None
    events: list[str] | None = Field(default=None, min_length=1)
    description: str | None = None
    status: Literal["active", "paused", "failed"] | None = None


class WebhookRead(ApiModel):
    id: str
    company_id: str
    url: str
    events: list[str]
    description: str | None
    status: str
    failure_count: int
    last_triggered: datetime | None
    last_failed_at: datetime | None
    created_at: datetime
    updated_at: datetime


class WebhookCreatedRead(WebhookRead):
    """Returned once on creation; the secret is not shown again."""

    secret: str


class WebhookLogRead(ApiModel):
    id: str
    webhook_id: str
    event: str
    status: str
    response_code: int | None
    error_message: str | None
    retry_count: int
    created_at: datetime


class WebhookListResponse(ApiModel):
    webhooks: list[WebhookRead]
    recent_logs: list[WebhookLogRead] | None = None


class WebhookRetryRequest(ApiModel):
    webhook_id: str
    log_id: str


class WebhookRetryResponse(ApiModel):
    success: bool
    response_code: int | None = None
    error: str | None = None


class WebhookDeleted(ApiModel):
    deleted: bool
