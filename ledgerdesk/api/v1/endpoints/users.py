"""User endpoints."""

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from ledgerdesk.auth import RequestContext, get_request_context, require_roles
from ledgerdesk.db.session import get_db
from ledgerdesk.models import AuditAction, AuditEntityType
from ledgerdesk.repositories.filters import UserFilters
from ledgerdesk.schemas.common import PageMeta
from ledgerdesk.schemas.user import UserCreate, UserListResponse, UserListRow, UserRead
from ledgerdesk.services.audit_service import audit
from ledgerdesk.services.user_service import create_user, list_users
from ledgerdesk.services.webhook_service import dispatch_event

router: APIRouter = APIRouter()


@router.get("", response_model=UserListResponse, summary="List users")
def read_users(
    company_id: str | None = Query(default=None, alias="companyId"),
    role: str | None = Query(default=None),
    is_active: bool | None = Query(default=None, alias="isActive"),
    limit: int = Query(default=50),
    offset: int = Query(default=0),
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
) -> UserListResponse:
    filters = UserFilters(company_id=ctx.scope_company(company_id), role=role, is_active=is_active)
    rows = list_users(db, filters, limit=limit, offset=offset)
    return UserListResponse(
        data=[UserListRow.model_validate(user).model_copy(update={"company_name": name}) for user, name in rows],
        meta=PageMeta(limit=limit, offset=offset),
    )


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def add_user(
    payload: UserCreate,
    background_tasks: BackgroundTasks,
    ctx: RequestContext = Depends(require_roles("admin")),
    db: Session = Depends(get_db),
) -> UserRead:
    company_id = ctx.scope_company(payload.company_id)
    result = UserRead.model_validate(create_user(db, payload, company_id=company_id))
    created = result.model_dump(mode="json", by_alias=True)
    audit(db, ctx, AuditAction.CREATE, AuditEntityType.USER, result.id, company_id=company_id, new_value=created)
    if company_id is not None:
        background_tasks.add_task(dispatch_event, company_id, "user.created", created)
    return result
