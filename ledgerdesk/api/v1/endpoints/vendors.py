"""Vendor endpoints."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ledgerdesk.auth import WRITE_ROLES, RequestContext, get_request_context, require_roles
from ledgerdesk.db.session import get_db
from ledgerdesk.models import AuditAction, AuditEntityType
from ledgerdesk.repositories.filters import PartyFilters
from ledgerdesk.repositories.parties import VendorRepository
from ledgerdesk.schemas.common import PageMeta
from ledgerdesk.schemas.party import VendorCreate, VendorListResponse, VendorRead
from ledgerdesk.services.audit_service import audit
from ledgerdesk.services.party_service import create_party, list_parties

router: APIRouter = APIRouter()


@router.get("", response_model=VendorListResponse)
def list_vendors(
    company_id: str | None = Query(default=None, alias="companyId"),
    is_active: bool | None = Query(default=None, alias="isActive"),
    limit: int = Query(default=100),
    offset: int = Query(default=0),
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
) -> VendorListResponse:
    filters = PartyFilters(company_id=ctx.scope_company(company_id), is_active=is_active)
    vendors = list_parties(VendorRepository(db), filters, limit=limit, offset=offset)
    return VendorListResponse(
        data=[VendorRead.model_validate(vendor) for vendor in vendors],
        meta=PageMeta(limit=limit, offset=offset),
    )


@router.post("", response_model=VendorRead, status_code=status.HTTP_201_CREATED)
def create_vendor(
    payload: VendorCreate,
    ctx: RequestContext = Depends(require_roles(*WRITE_ROLES)),
    db: Session = Depends(get_db),
) -> VendorRead:
    company_id = ctx.target_company(payload.company_id)
    result = VendorRead.model_validate(create_party(db, VendorRepository(db), payload, company_id=company_id))
    audit(
        db,
        ctx,
        AuditAction.CREATE,
        AuditEntityType.VENDOR,
        result.id,
        company_id=company_id,
        new_value=result.model_dump(mode="json", by_alias=True),
    )
    return result
