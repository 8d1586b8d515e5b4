"""Audit log endpoints: filtered listing, CSV export, retention and summaries."""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from ledgerdesk.auth import AUDIT_READ_ROLES, RequestContext, require_roles
from ledgerdesk.core.errors import ValidationError
from ledgerdesk.db.session import get_db
from ledgerdesk.repositories.filters import AuditLogFilters
from ledgerdesk.schemas.audit import (
    ActionCount,
    AuditLogPage,
    AuditLogRead,
    AuditPurgeResponse,
    AuditSummaryResponse,
    AuditTrailResponse,
    UserActivity,
)
from ledgerdesk.services.audit_service import (
    activity_summary,
    entity_trail,
    format_audit_logs_csv,
    purge_audit_logs,
    query_audit_logs,
)
from ledgerdesk.utils.time import parse_datetime_param, utc_now

router: APIRouter = APIRouter()


@router.get("", response_model=AuditLogPage)
def read_audit_logs(
    page: int = Query(default=1),
    limit: int = Query(default=50),
    user_id: str | None = Query(default=None, alias="userId"),
    action: str | None = Query(default=None),
    entity_type: str | None = Query(default=None, alias="entityType"),
    entity_id: str | None = Query(default=None, alias="entityId"),
    start_date: str | None = Query(default=None, alias="startDate"),
    end_date: str | None = Query(default=None, alias="endDate"),
    export: str | None = Query(default=None),
    ctx: RequestContext = Depends(require_roles(*AUDIT_READ_ROLES)),
    db: Session = Depends(get_db),
) -> AuditLogPage | Response:
    filters = AuditLogFilters(
        company_id=ctx.require_company(),
        user_id=user_id,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        start_date=parse_datetime_param(start_date, "startDate"),
        end_date=parse_datetime_param(end_date, "endDate"),
    )
    result = query_audit_logs(db, filters, page=page, limit=limit)
    if export == "csv":
        filename = f"audit-logs-{utc_now().date().isoformat()}.csv"
        return Response(
            content=format_audit_logs_csv(result.logs),
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )
    return AuditLogPage(
        logs=[AuditLogRead.model_validate(log) for log in result.logs],
        total=result.total,
        page=result.page,
        page_count=result.page_count,
    )


@router.delete("", response_model=AuditPurgeResponse)
def delete_audit_logs(
    before_date: str | None = Query(default=None, alias="beforeDate"),
    ctx: RequestContext = Depends(require_roles("admin")),
    db: Session = Depends(get_db),
) -> AuditPurgeResponse:
    before = parse_datetime_param(before_date, "beforeDate")
    if before is None:
        raise ValidationError("beforeDate parameter is required")
    deleted = purge_audit_logs(db, before, company_id=ctx.require_company())
    return AuditPurgeResponse(message=f"Deleted {deleted} audit log entries", deleted_count=deleted)


@router.get("/summary", response_model=AuditSummaryResponse)
def read_audit_summary(
    start_date: str | None = Query(default=None, alias="startDate"),
    end_date: str | None = Query(default=None, alias="endDate"),
    ctx: RequestContext = Depends(require_roles(*AUDIT_READ_ROLES)),
    db: Session = Depends(get_db),
) -> AuditSummaryResponse:
    actions, users = activity_summary(
        db,
        ctx.require_company(),
        start_date=parse_datetime_param(start_date, "startDate"),
        end_date=parse_datetime_param(end_date, "endDate"),
    )
    return AuditSummaryResponse(
        actions=[ActionCount(action=action, count=count) for action, count in actions],
        users=[UserActivity(user_id=user_id, action=action, count=count) for user_id, action, count in users],
    )


@router.get("/entity/{entity_type}/{entity_id}", response_model=AuditTrailResponse)
def read_entity_trail(
    entity_type: str,
    entity_id: str,
    ctx: RequestContext = Depends(require_roles(*AUDIT_READ_ROLES)),
    db: Session = Depends(get_db),
) -> AuditTrailResponse:
    logs = entity_trail(db, ctx.require_company(), entity_type, entity_id)
    return AuditTrailResponse(logs=[AuditLogRead.model_validate(log) for log in logs])
