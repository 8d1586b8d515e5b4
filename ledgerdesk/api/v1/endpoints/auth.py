"""Authentication endpoints (API JWT)."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from ledgerdesk.auth import client_ip
from ledgerdesk.core.security import create_access_token, get_current_user
from ledgerdesk.db.session import get_db
from ledgerdesk.models import AuditAction, AuditEntityType
from ledgerdesk.models.user import User
from ledgerdesk.schemas.auth import LoginRequest, TokenResponse
from ledgerdesk.schemas.user import UserRead
from ledgerdesk.services.audit_service import record_action
from ledgerdesk.services.user_service import authenticate_user

router: APIRouter = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, request: Request, db: Session = Depends(get_db)) -> TokenResponse:
    user: User | None = authenticate_user(db, payload.email, payload.password)
    if user is None:
        logger.info("[AUTH] Failed login for %s", payload.email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Incorrect email or password")
    record_action(
        db,
        company_id=user.company_id,
        action=AuditAction.LOGIN,
        entity_type=AuditEntityType.SESSION,
        entity_id=user.id,
        user_id=user.id,
        ip_address=client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )
    return TokenResponse(access_token=create_access_token(data={"sub": str(user.id)}))


@router.get("/me", response_model=UserRead)
def me(current_user: User = Depends(get_current_user)) -> UserRead:
    return UserRead.model_validate(current_user)
