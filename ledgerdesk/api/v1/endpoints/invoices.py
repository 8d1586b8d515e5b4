"""Invoice endpoints."""

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from ledgerdesk.auth import WRITE_ROLES, RequestContext, get_request_context, require_roles
from ledgerdesk.db.session import get_db
from ledgerdesk.models import AuditAction, AuditEntityType
from ledgerdesk.repositories.documents import InvoiceRepository
from ledgerdesk.repositories.filters import DocumentFilters
from ledgerdesk.schemas.common import DocumentPageMeta
from ledgerdesk.schemas.document import (
    DocumentSummaryRead,
    InvoiceCreate,
    InvoiceListResponse,
    InvoiceListRow,
    InvoiceRead,
    InvoiceUpdate,
)
from ledgerdesk.services.audit_service import audit, snapshot
from ledgerdesk.services.document_service import create_document, get_document, list_documents, update_document
from ledgerdesk.services.webhook_service import dispatch_event
from ledgerdesk.utils.time import parse_date_param

router: APIRouter = APIRouter()


@router.get("", response_model=InvoiceListResponse)
def list_invoices(
    company_id: str | None = Query(default=None, alias="companyId"),
    customer_id: str | None = Query(default=None, alias="customerId"),
    status_filter: str | None = Query(default=None, alias="status"),
    start_date: str | None = Query(default=None, alias="startDate"),
    end_date: str | None = Query(default=None, alias="endDate"),
    limit: int = Query(default=50),
    offset: int = Query(default=0),
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
) -> InvoiceListResponse:
    filters = DocumentFilters(
        company_id=ctx.scope_company(company_id),
        counterparty_id=customer_id,
        status=status_filter,
        start_date=parse_date_param(start_date, "startDate"),
        end_date=parse_date_param(end_date, "endDate"),
    )
    page = list_documents(InvoiceRepository(db), filters, limit=limit, offset=offset)
    rows = [InvoiceListRow.model_validate(invoice).model_copy(update={"customer_name": name}) for invoice, name in page.rows]
    return InvoiceListResponse(
        data=rows,
        summary=DocumentSummaryRead.model_validate(page.summary),
        meta=DocumentPageMeta(limit=limit, offset=offset, total=page.total),
    )


@router.get("/{invoice_id}", response_model=InvoiceRead)
def read_invoice(
    invoice_id: str,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
) -> InvoiceRead:
    invoice = get_document(InvoiceRepository(db), invoice_id, company_id=ctx.company_id)
    return InvoiceRead.model_validate(invoice)


@router.post("", response_model=InvoiceRead, status_code=status.HTTP_201_CREATED)
def create_invoice(
    payload: InvoiceCreate,
    background_tasks: BackgroundTasks,
    ctx: RequestContext = Depends(require_roles(*WRITE_ROLES)),
    db: Session = Depends(get_db),
) -> InvoiceRead:
    company_id = ctx.target_company(payload.company_id)
    invoice = create_document(db, InvoiceRepository(db), payload, company_id=company_id, created_by=ctx.user_id)
    result = InvoiceRead.model_validate(invoice)
    created = result.model_dump(mode="json", by_alias=True)
    audit(db, ctx, AuditAction.CREATE, AuditEntityType.INVOICE, result.id, company_id=company_id, new_value=created)
    background_tasks.add_task(dispatch_event, company_id, "invoice.created", created)
    return result


@router.patch("", response_model=InvoiceRead)
def update_invoice(
    payload: InvoiceUpdate,
    background_tasks: BackgroundTasks,
    ctx: RequestContext = Depends(require_roles(*WRITE_ROLES)),
    db: Session = Depends(get_db),
) -> InvoiceRead:
    repo = InvoiceRepository(db)
    before = snapshot(InvoiceRead, get_document(repo, payload.id, company_id=ctx.company_id))
    invoice = update_document(db, repo, payload, company_id=ctx.company_id)
    result = InvoiceRead.model_validate(invoice)
    after = result.model_dump(mode="json", by_alias=True)
    audit(db, ctx, AuditAction.UPDATE, AuditEntityType.INVOICE, result.id, company_id=result.company_id, old_value=before, new_value=after)
    if payload.status == "paid" and before.get("status") != "paid":
        background_tasks.add_task(dispatch_event, result.company_id, "invoice.paid", after)
    return result
