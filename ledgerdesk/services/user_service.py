"""User service operations."""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ledgerdesk.core.errors import PersistenceError, ValidationError
from ledgerdesk.core.security import get_password_hash, verify_password
from ledgerdesk.db.base import new_id
from ledgerdesk.models.user import User, normalize_user_role
from ledgerdesk.repositories.filters import UserFilters
from ledgerdesk.repositories.users import UserRepository
from ledgerdesk.schemas.user import UserCreate
from ledgerdesk.services.document_service import check_page
from ledgerdesk.utils.time import utc_now

logger = logging.getLogger(__name__)


def get_user_by_email(db: Session, email: str) -> User | None:
    return UserRepository(db).get_by_email(email.strip().lower())


def list_users(db: Session, filters: UserFilters, *, limit: int, offset: int) -> list[tuple[User, str | None]]:
    check_page(limit, offset)
    return UserRepository(db).list_with_company(filters, limit=limit, offset=offset)


def create_user(db: Session, payload: UserCreate, *, company_id: str | None) -> User:
    """Create a user; only the password hash is stored."""
    repo = UserRepository(db)
    email = payload.email.strip().lower()
    if repo.get_by_email(email) is not None:
        raise ValidationError("Email already registered")
    if payload.id is not None and repo.get(payload.id) is not None:
        raise ValidationError(f"User {payload.id} already exists")
    user = User(
        id=payload.id or new_id(),
        email=email,
        password_hash=get_password_hash(payload.password),
        first_name=payload.first_name,
        last_name=payload.last_name,
        role=normalize_user_role(payload.role),
        company_id=company_id,
        avatar=payload.avatar,
        is_active=True,
    )
    try:
        repo.insert(user)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to create user email=%s", email)
        raise PersistenceError("Failed to create user") from exc
    db.refresh(user)
    return user


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    """Return the active user matching the credentials and stamp ``last_login_at``."""
    user = get_user_by_email(db, email)
    if user is None or not user.is_active or not verify_password(password, user.password_hash):
        return None
    user.last_login_at = utc_now()
    db.commit()
    return user
