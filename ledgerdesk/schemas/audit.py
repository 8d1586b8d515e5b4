"""Audit log API schemas."""

from datetime import datetime
from typing import Any

from ledgerdesk.schemas.common import ApiModel


class AuditLogRead(ApiModel):
    """Serialized audit entry."""

    id: str
    company_id: str
    user_id: str | None
    action: str
    entity_type: str
    entity_id: str | None
    ip_address: str | None
    user_agent: str | None = None
    old_value: dict[str, Any] | None = None
    new_value: dict[str, Any] | None = None
    created_at: datetime


class AuditLogPage(ApiModel):
    """One page of filtered audit entries."""

    logs: list[AuditLogRead]
    total: int
    page: int
    page_count: int


class AuditTrailResponse(ApiModel):
    logs: list[AuditLogRead]


class AuditPurgeResponse(ApiModel):
    message: str
    deleted_count: int


class ActionCount(ApiModel):
    action: str
    count: int


class UserActivity(ApiModel):
    user_id: str | None
    action: str
    count: int


class AuditSummaryResponse(ApiModel):
    actions: list[ActionCount]
    users: list[UserActivity]
