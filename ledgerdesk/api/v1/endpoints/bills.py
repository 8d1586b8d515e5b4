"""Bill endpoints."""

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from ledgerdesk.auth import WRITE_ROLES, RequestContext, get_request_context, require_roles
from ledgerdesk.db.session import get_db
from ledgerdesk.models import AuditAction, AuditEntityType
from ledgerdesk.repositories.documents import BillRepository
from ledgerdesk.repositories.filters import DocumentFilters
from ledgerdesk.schemas.common import DocumentPageMeta
from ledgerdesk.schemas.document import BillCreate, BillListResponse, BillListRow, BillRead, BillUpdate, DocumentSummaryRead
from ledgerdesk.services.audit_service import audit, snapshot
from ledgerdesk.services.document_service import create_document, get_document, list_documents, update_document
from ledgerdesk.services.webhook_service import dispatch_event
from ledgerdesk.utils.time import parse_date_param

router: APIRouter = APIRouter()


@router.get("", response_model=BillListResponse)
def list_bills(
    company_id: str | None = Query(default=None, alias="companyId"),
    vendor_id: str | None = Query(default=None, alias="vendorId"),
    status_filter: str | None = Query(default=None, alias="status"),
    start_date: str | None = Query(default=None, alias="startDate"),
    end_date: str | None = Query(default=None, alias="endDate"),
    limit: int = Query(default=50),
    offset: int = Query(default=0),
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
) -> BillListResponse:
    filters = DocumentFilters(
        company_id=ctx.scope_company(company_id),
        counterparty_id=vendor_id,
        status=status_filter,
        start_date=parse_date_param(start_date, "startDate"),
        end_date=parse_date_param(end_date, "endDate"),
    )
    page = list_documents(BillRepository(db), filters, limit=limit, offset=offset)
    return BillListResponse(
        data=[BillListRow.model_validate(bill).model_copy(update={"vendor_name": name}) for bill, name in page.rows],
        summary=DocumentSummaryRead.model_validate(page.summary),
        meta=DocumentPageMeta(limit=limit, offset=offset, total=page.total),
    )


@router.get("/{bill_id}", response_model=BillRead)
def read_bill(
    bill_id: str,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
) -> BillRead:
    return BillRead.model_validate(get_document(BillRepository(db), bill_id, company_id=ctx.company_id))


@router.post("", response_model=BillRead, status_code=status.HTTP_201_CREATED)
def create_bill(
    payload: BillCreate,
    background_tasks: BackgroundTasks,
    ctx: RequestContext = Depends(require_roles(*WRITE_ROLES)),
    db: Session = Depends(get_db),
) -> BillRead:
    company_id = ctx.target_company(payload.company_id)
    bill = create_document(db, BillRepository(db), payload, company_id=company_id, created_by=ctx.user_id)
    result = BillRead.model_validate(bill)
    created = result.model_dump(mode="json", by_alias=True)
    audit(db, ctx, AuditAction.CREATE, AuditEntityType.BILL, result.id, company_id=company_id, new_value=created)
    background_tasks.add_task(dispatch_event, company_id, "bill.created", created)
    return result


@router.patch("", response_model=BillRead)
def update_bill(
    payload: BillUpdate,
    background_tasks: BackgroundTasks,
    ctx: RequestContext = Depends(require_roles(*WRITE_ROLES)),
    db: Session = Depends(get_db),
) -> BillRead:
    repo = BillRepository(db)
    before = snapshot(BillRead, get_document(repo, payload.id, company_id=ctx.company_id))
    bill = update_document(db, repo, payload, company_id=ctx.company_id)
    result = BillRead.model_validate(bill)
    after = result.model_dump(mode="json", by_alias=True)
    action = AuditAction.APPROVE if payload.approved_by else AuditAction.UPDATE
    audit(db, ctx, action, AuditEntityType.BILL, result.id, company_id=result.company_id, old_value=before, new_value=after)
    if payload.status == "paid" and before.get("status") != "paid":
        background_tasks.add_task(dispatch_event, result.company_id, "bill.paid", after)
    if payload.approved_by:
        background_tasks.add_task(dispatch_event, result.company_id, "bill.approved", after)
    return result
