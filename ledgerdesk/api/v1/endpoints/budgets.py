"""Budget endpoints."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ledgerdesk.auth import WRITE_ROLES, RequestContext, get_request_context, require_roles
from ledgerdesk.db.session import get_db
from ledgerdesk.models import AuditAction, AuditEntityType
from ledgerdesk.repositories.filters import BudgetFilters
from ledgerdesk.schemas.budget import BudgetCreate, BudgetListResponse, BudgetRead
from ledgerdesk.schemas.common import PageMeta
from ledgerdesk.services.audit_service import audit
from ledgerdesk.services.budget_service import create_budget, list_budgets

router: APIRouter = APIRouter()


@router.get("", response_model=BudgetListResponse)
def read_budgets(
    company_id: str | None = Query(default=None, alias="companyId"),
    status_filter: str | None = Query(default=None, alias="status"),
    limit: int = Query(default=100),
    offset: int = Query(default=0),
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
) -> BudgetListResponse:
    filters = BudgetFilters(company_id=ctx.scope_company(company_id), status=status_filter)
    budgets = list_budgets(db, filters, limit=limit, offset=offset)
    return BudgetListResponse(
        data=[BudgetRead.model_validate(budget) for budget in budgets],
        meta=PageMeta(limit=limit, offset=offset),
    )


@router.post("", response_model=BudgetRead, status_code=status.HTTP_201_CREATED)
def add_budget(
    payload: BudgetCreate,
    ctx: RequestContext = Depends(require_roles(*WRITE_ROLES)),
    db: Session = Depends(get_db),
) -> BudgetRead:
    company_id = ctx.target_company(payload.company_id)
    result = BudgetRead.model_validate(create_budget(db, payload, company_id=company_id, created_by=ctx.user_id))
    audit(
        db,
        ctx,
        AuditAction.CREATE,
        AuditEntityType.BUDGET,
        result.id,
        company_id=company_id,
        new_value=result.model_dump(mode="json", by_alias=True),
    )
    return result
