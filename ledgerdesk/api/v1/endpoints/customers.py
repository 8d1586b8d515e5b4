"""Customer endpoints."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ledgerdesk.auth import WRITE_ROLES, RequestContext, get_request_context, require_roles
from ledgerdesk.db.session import get_db
from ledgerdesk.models import AuditAction, AuditEntityType
from ledgerdesk.repositories.filters import PartyFilters
from ledgerdesk.repositories.parties import CustomerRepository
from ledgerdesk.schemas.common import PageMeta
from ledgerdesk.schemas.party import CustomerCreate, CustomerListResponse, CustomerRead
from ledgerdesk.services.audit_service import audit
from ledgerdesk.services.party_service import create_party, list_parties

router: APIRouter = APIRouter()


@router.get("", response_model=CustomerListResponse)
def list_customers(
    company_id: str | None = Query(default=None, alias="companyId"),
    is_active: bool | None = Query(default=None, alias="isActive"),
    limit: int = Query(default=100),
    offset: int = Query(default=0),
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
) -> CustomerListResponse:
    filters = PartyFilters(company_id=ctx.scope_company(company_id), is_active=is_active)
    customers = list_parties(CustomerRepository(db), filters, limit=limit, offset=offset)
    return CustomerListResponse(
        data=[CustomerRead.model_validate(customer) for customer in customers],
        meta=PageMeta(limit=limit, offset=offset),
    )


@router.post("", response_model=CustomerRead, status_code=status.HTTP_201_CREATED)
def create_customer(
    payload: CustomerCreate,
    ctx: RequestContext = Depends(require_roles(*WRITE_ROLES)),
    db: Session = Depends(get_db),
) -> CustomerRead:
    company_id = ctx.target_company(payload.company_id)
    result = CustomerRead.model_validate(create_party(db, CustomerRepository(db), payload, company_id=company_id))
    audit(
        db,
        ctx,
        AuditAction.CREATE,
        AuditEntityType.CUSTOMER,
        result.id,
        company_id=company_id,
        new_value=result.model_dump(mode="json", by_alias=True),
    )
    return result
