"""Audit log recording, querying, export and retention."""

from __future__ import annotations

import csv
import io
import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ledgerdesk.core.config import settings
from ledgerdesk.core.errors import ValidationError
from ledgerdesk.models import AuditAction, AuditEntityType, AuditLog
from ledgerdesk.repositories.audit_logs import AuditLogRepository
from ledgerdesk.repositories.filters import AuditLogFilters
from ledgerdesk.utils.time import epoch_millis, utc_now

if TYPE_CHECKING:
    from ledgerdesk.auth import RequestContext

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 500
CSV_HEADER = ("ID", "User ID", "Action", "Entity Type", "Entity ID", "IP Address", "Timestamp")


@dataclass(frozen=True)
class AuditPage:
    logs: list[AuditLog]
    total: int
    page: int
    page_count: int


def _fit(value: str | None, column: str) -> str | None:
    """Clip a client-supplied header value to the width of an audit column."""
    length = AuditLog.__table__.c[column].type.length
    if value is None or length is None:
        return value
    return value[:length]


def record_action(
    db: Session,
    *,
    company_id: str | None,
    action: AuditAction | str,
    entity_type: AuditEntityType | str,
    entity_id: str | None = None,
    user_id: str | None = None,
    ip_address: str | None = None,
    user_agent: str | None = None,
    old_value: dict[str, Any] | None = None,
    new_value: dict[str, Any] | None = None,
) -> AuditLog | None:
    """Append one audit entry in its own commit.

    Call after the business change has been committed. A failure here is
    logged and rolled back; it never reaches the caller.
    """
    if company_id is None:
        logger.warning("[AUDIT] Skipping %s on %s/%s: no company", action, entity_type, entity_id)
        return None
    entry = AuditLog(
        company_id=company_id,
        user_id=user_id,
        action=AuditAction(action).value,
        entity_type=AuditEntityType(entity_type).value,
        entity_id=entity_id,
        ip_address=_fit(ip_address, "ip_address"),
        user_agent=_fit(user_agent, "user_agent"),
        old_value=old_value,
        new_value=new_value,
        created_at=utc_now(),
    )
    try:
        AuditLogRepository(db).insert(entry)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("[AUDIT] Failed to record %s on %s/%s", entry.action, entry.entity_type, entity_id)
        return None
    return entry


def audit(
    db: Session,
    ctx: "RequestContext",
    action: AuditAction,
    entity_type: AuditEntityType,
    entity_id: str | None = None,
    *,
    company_id: str | None = None,
    old_value: dict[str, Any] | None = None,
    new_value: dict[str, Any] | None = None,
) -> AuditLog | None:
    """``record_action`` with user, address and agent taken from the request context."""
    return record_action(
        db,
        company_id=company_id or ctx.company_id,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        user_id=ctx.user_id,
        ip_address=ctx.ip_address,
        user_agent=ctx.user_agent,
        old_value=old_value,
        new_value=new_value,
    )


def query_audit_logs(db: Session, filters: AuditLogFilters, *, page: int = 1, limit: int = 50) -> AuditPage:
    if page < 1:
        raise ValidationError("Invalid page parameter")
    if limit < 1 or limit > MAX_PAGE_SIZE:
        raise ValidationError("Invalid limit parameter")
    repo = AuditLogRepository(db)
    total = repo.count(filters)
    logs = repo.list(filters, limit=limit, offset=(page - 1) * limit)
    return AuditPage(logs=logs, total=total, page=page, page_count=math.ceil(total / limit))


def format_audit_logs_csv(logs: Iterable[AuditLog]) -> str:
    """Render entries as CSV; fields holding a comma, quote or newline are quoted."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for log in logs:
        writer.writerow(
            [
                log.id,
                log.user_id or "",
                log.action,
                log.entity_type,
                log.entity_id or "",
                log.ip_address or "",
                epoch_millis(log.created_at),
            ]
        )
    return buffer.getvalue()


def purge_audit_logs(
    db: Session,
    before: datetime,
    *,
    company_id: str | None = None,
    batch_size: int | None = None,
) -> int:
    """Delete entries created strictly before ``before``, one committed batch at a time."""
    size = batch_size or settings.audit_purge_batch_size
    repo = AuditLogRepository(db)
    deleted = 0
    while True:
        removed = repo.purge_batch(before, company_id=company_id, batch_size=size)
        if removed == 0:
            break
        db.commit()
        deleted += removed
        if removed < size:
            break
    logger.info("[AUDIT] Retention purge before %s removed %s entries (company=%s)", before.isoformat(), deleted, company_id or "*")
    return deleted


def entity_trail(db: Session, company_id: str, entity_type: str, entity_id: str) -> list[AuditLog]:
    return AuditLogRepository(db).entity_trail(company_id, entity_type, entity_id)


def activity_summary(
    db: Session,
    company_id: str,
    *,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
) -> tuple[list[tuple[str, int]], list[tuple[str | None, str, int]]]:
    """Counts grouped by action and by (user, action) within an optional window."""
    filters = AuditLogFilters(company_id=company_id, start_date=start_date, end_date=end_date)
    repo = AuditLogRepository(db)
    return repo.action_counts(filters), repo.user_activity(filters)


def snapshot(schema: Any, obj: Any) -> dict[str, Any]:
    """JSON-safe copy of ``obj`` as rendered by ``schema``, for old/new values."""
    return schema.model_validate(obj).model_dump(mode="json", by_alias=True)
