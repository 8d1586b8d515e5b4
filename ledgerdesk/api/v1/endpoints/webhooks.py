"""Outbound webhook subscription endpoints."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ledgerdesk.auth import WRITE_ROLES, RequestContext, get_request_context, require_roles
from ledgerdesk.core.errors import ValidationError
from ledgerdesk.db.session import get_db
from ledgerdesk.models import AuditAction, AuditEntityType
from ledgerdesk.repositories.filters import WebhookFilters
from ledgerdesk.schemas.webhook import (
    WebhookCreate,
    WebhookCreatedRead,
    WebhookDeleted,
    WebhookListResponse,
    WebhookLogRead,
    WebhookRead,
    WebhookRetryRequest,
    WebhookRetryResponse,
    WebhookUpdate,
)
from ledgerdesk.services.audit_service import audit
from ledgerdesk.services.webhook_service import (
    create_webhook,
    delete_webhook,
    list_webhooks,
    recent_logs,
    retry_delivery,
    update_webhook,
)

router: APIRouter = APIRouter()


@router.get("", response_model=WebhookListResponse, response_model_exclude_none=True)
def read_webhooks(
    company_id: str | None = Query(default=None, alias="companyId"),
    status_filter: str | None = Query(default=None, alias="status"),
    include_logs: bool = Query(default=False, alias="includeLogs"),
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
) -> WebhookListResponse:
    scoped = ctx.target_company(company_id)
    hooks = list_webhooks(db, WebhookFilters(company_id=scoped, status=status_filter))
    logs = [WebhookLogRead.model_validate(log) for log in recent_logs(db, scoped)] if include_logs else None
    return WebhookListResponse(webhooks=[WebhookRead.model_validate(hook) for hook in hooks], recent_logs=logs)


@router.post("", response_model=WebhookCreatedRead, status_code=status.HTTP_201_CREATED)
def add_webhook(
    payload: WebhookCreate,
    ctx: RequestContext = Depends(require_roles(*WRITE_ROLES)),
    db: Session = Depends(get_db),
) -> WebhookCreatedRead:
    company_id = ctx.target_company(payload.company_id)
    result = WebhookCreatedRead.model_validate(create_webhook(db, payload, company_id=company_id))
    audit(
        db,
        ctx,
        AuditAction.CREATE,
        AuditEntityType.WEBHOOK,
        result.id,
        company_id=company_id,
        new_value={"url": result.url, "events": result.events},
    )
    return result


@router.put("", response_model=WebhookRead)
def edit_webhook(
    payload: WebhookUpdate,
    ctx: RequestContext = Depends(require_roles(*WRITE_ROLES)),
    db: Session = Depends(get_db),
) -> WebhookRead:
    company_id = ctx.require_company()
    result = WebhookRead.model_validate(update_webhook(db, payload, company_id=company_id))
    audit(
        db,
        ctx,
        AuditAction.UPDATE,
        AuditEntityType.WEBHOOK,
        result.id,
        company_id=company_id,
        new_value=payload.model_dump(mode="json", by_alias=True, exclude_unset=True),
    )
    return result


@router.delete("", response_model=WebhookDeleted)
def remove_webhook(
    webhook_id: str | None = Query(default=None, alias="id"),
    ctx: RequestContext = Depends(require_roles(*WRITE_ROLES)),
    db: Session = Depends(get_db),
) -> WebhookDeleted:
    if not webhook_id:
        raise ValidationError("id parameter is required")
    company_id = ctx.require_company()
    removed = delete_webhook(db, webhook_id, company_id=company_id)
    audit(
        db,
        ctx,
        AuditAction.DELETE,
        AuditEntityType.WEBHOOK,
        webhook_id,
        company_id=company_id,
        old_value=removed,
    )
    return WebhookDeleted(deleted=True)


@router.patch("", response_model=WebhookRetryResponse, response_model_exclude_none=True)
def retry_webhook(
    payload: WebhookRetryRequest,
    ctx: RequestContext = Depends(require_roles(*WRITE_ROLES)),
    db: Session = Depends(get_db),
) -> WebhookRetryResponse:
    result = retry_delivery(db, company_id=ctx.require_company(), webhook_id=payload.webhook_id, log_id=payload.log_id)
    return WebhookRetryResponse(success=result.success, response_code=result.response_code, error=result.error)
