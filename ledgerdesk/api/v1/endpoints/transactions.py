"""Transaction endpoints."""

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from ledgerdesk.auth import WRITE_ROLES, RequestContext, get_request_context, require_roles
from ledgerdesk.db.session import get_db
from ledgerdesk.models import AuditAction, AuditEntityType
from ledgerdesk.repositories.filters import TransactionFilters
from ledgerdesk.repositories.transactions import TransactionRepository
from ledgerdesk.schemas.common import DocumentPageMeta
from ledgerdesk.schemas.transaction import (
    TransactionCreate,
    TransactionListResponse,
    TransactionListRow,
    TransactionRead,
    TransactionTotalsRead,
)
from ledgerdesk.services.audit_service import audit
from ledgerdesk.services.transaction_service import create_transaction, list_transactions
from ledgerdesk.services.webhook_service import dispatch_event
from ledgerdesk.utils.time import parse_datetime_param

router: APIRouter = APIRouter()


@router.get("", response_model=TransactionListResponse)
def read_transactions(
    company_id: str | None = Query(default=None, alias="companyId"),
    type_filter: str | None = Query(default=None, alias="type"),
    category_id: str | None = Query(default=None, alias="categoryId"),
    is_reconciled: bool | None = Query(default=None, alias="isReconciled"),
    start_date: str | None = Query(default=None, alias="startDate"),
    end_date: str | None = Query(default=None, alias="endDate"),
    limit: int = Query(default=50),
    offset: int = Query(default=0),
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
) -> TransactionListResponse:
    filters = TransactionFilters(
        company_id=ctx.scope_company(company_id),
        type=type_filter,
        category_id=category_id,
        is_reconciled=is_reconciled,
        start_date=parse_datetime_param(start_date, "startDate"),
        end_date=parse_datetime_param(end_date, "endDate"),
    )
    page = list_transactions(TransactionRepository(db), filters, limit=limit, offset=offset)
    rows = [
        TransactionListRow.model_validate(transaction).model_copy(update={"customer_name": customer, "vendor_name": vendor})
        for transaction, customer, vendor in page.rows
    ]
    return TransactionListResponse(
        data=rows,
        totals=TransactionTotalsRead.model_validate(page.totals),
        meta=DocumentPageMeta(limit=limit, offset=offset, total=page.total),
    )


@router.post("", response_model=TransactionRead, status_code=status.HTTP_201_CREATED)
def add_transaction(
    payload: TransactionCreate,
    background_tasks: BackgroundTasks,
    ctx: RequestContext = Depends(require_roles(*WRITE_ROLES)),
    db: Session = Depends(get_db),
) -> TransactionRead:
    company_id = ctx.target_company(payload.company_id)
    result = TransactionRead.model_validate(create_transaction(db, payload, company_id=company_id, created_by=ctx.user_id))
    created = result.model_dump(mode="json", by_alias=True)
    audit(db, ctx, AuditAction.CREATE, AuditEntityType.TRANSACTION, result.id, company_id=company_id, new_value=created)
    background_tasks.add_task(dispatch_event, company_id, "transaction.created", created)
    return result
