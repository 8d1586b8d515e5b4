"""Third-party integration endpoints (simulated)."""

import logging

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, status
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from ledgerdesk.auth import WRITE_ROLES, RequestContext, client_ip, get_request_context, require_roles
from ledgerdesk.db.session import get_db
from ledgerdesk.models import AuditAction, AuditEntityType
from ledgerdesk.schemas.integration import (
    IntegrationConfigured,
    IntegrationConfigureRequest,
    IntegrationConfigureResponse,
    IntegrationListResponse,
    IntegrationRead,
    IntegrationSyncRequest,
    IntegrationSyncResponse,
    WebhookReceipt,
)
from ledgerdesk.services.audit_service import audit, record_action
from ledgerdesk.services.integration_service import (
    configure_integration,
    list_integrations,
    sync_integration,
    verify_inbound_webhook,
)

router: APIRouter = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=IntegrationListResponse)
def read_integrations(
    company_id: str | None = Query(default=None, alias="companyId"),
    ctx: RequestContext = Depends(get_request_context),
) -> IntegrationListResponse:
    ctx.scope_company(company_id)
    return IntegrationListResponse(integrations=[IntegrationRead.model_validate(item) for item in list_integrations()])


@router.post("", response_model=IntegrationConfigureResponse)
def configure(
    payload: IntegrationConfigureRequest,
    ctx: RequestContext = Depends(require_roles(*WRITE_ROLES)),
    db: Session = Depends(get_db),
) -> IntegrationConfigureResponse:
    company_id = ctx.scope_company(payload.company_id)
    integration_id, configured_at = configure_integration(payload.integration)
    audit(
        db,
        ctx,
        AuditAction.UPDATE,
        AuditEntityType.INTEGRATION,
        integration_id,
        company_id=company_id,
        new_value={"status": "configured"},
    )
    return IntegrationConfigureResponse(
        success=True,
        integration=IntegrationConfigured(id=integration_id, status="configured", configured_at=configured_at),
    )


@router.put("", response_model=IntegrationSyncResponse)
def sync(
    payload: IntegrationSyncRequest,
    ctx: RequestContext = Depends(require_roles(*WRITE_ROLES)),
    db: Session = Depends(get_db),
) -> IntegrationSyncResponse:
    company_id = ctx.target_company(payload.filters.get("companyId") or payload.filters.get("company_id"))
    result = sync_integration(db, payload.integration, payload.direction, payload.entity_type, company_id)
    audit(
        db,
        ctx,
        AuditAction.SYNC,
        AuditEntityType.INTEGRATION,
        payload.integration,
        company_id=company_id,
        new_value={"direction": result.direction, "synced": result.synced, "imported": result.imported},
    )
    return IntegrationSyncResponse(
        success=True,
        integration=result.integration,
        direction=result.direction,
        entity_type=result.entity_type,
        synced=result.synced,
        imported=result.imported,
    )


@router.post("/{integration}/webhook", response_model=WebhookReceipt)
async def receive_webhook(
    integration: str,
    request: Request,
    company_id: str | None = Query(default=None, alias="companyId"),
    signature: str | None = Header(default=None, alias="X-Webhook-Signature"),
    db: Session = Depends(get_db),
) -> WebhookReceipt:
    body = await request.body()
    if not verify_inbound_webhook(integration, body, signature):
        logger.warning("[WEBHOOK] Rejected inbound %s webhook from %s", integration, client_ip(request))
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid webhook signature")
    await run_in_threadpool(
        record_action,
        db,
        company_id=company_id,
        action=AuditAction.RECEIVE,
        entity_type=AuditEntityType.WEBHOOK,
        entity_id=integration,
        ip_address=client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )
    return WebhookReceipt(received=True)
