"""Database seeding helpers."""

import logging

from sqlalchemy.orm import Session

from ledgerdesk.core.config import settings
from ledgerdesk.core.security import get_password_hash
from ledgerdesk.models import Company, User
from ledgerdesk.repositories.users import CompanyRepository, UserRepository

logger = logging.getLogger(__name__)

DEFAULT_COMPANY_CODE = "DEFAULT"


def ensure_default_company(session: Session) -> Company:
    repo = CompanyRepository(session)
    company = repo.get_by_code(DEFAULT_COMPANY_CODE)
    if company is None:
        company = repo.insert(Company(name=settings.default_company_name, code=DEFAULT_COMPANY_CODE))
        session.commit()
        logger.info("[BOOTSTRAP] Default company created id=%s", company.id)
    return company


def ensure_admin_user(session: Session) -> User | None:
    """Ensure the configured admin account exists and is active.

    Does nothing unless both ``ADMIN_EMAIL`` and ``ADMIN_PASS`` are set.
    """
    if not settings.admin_email or not settings.admin_pass:
        logger.info("[BOOTSTRAP] ADMIN_EMAIL/ADMIN_PASS not set; skipping admin seed")
        return None

    repo = UserRepository(session)
    email = settings.admin_email.strip().lower()
    existing = repo.get_by_email(email)
    if existing is not None:
        if not existing.is_active or existing.role != "admin":
            existing.is_active = True
            existing.role = "admin"
            session.commit()
            logger.warning("[BOOTSTRAP] Admin %s re-activated with admin role", email)
        return existing

    company = ensure_default_company(session)
    admin = repo.insert(
        User(
            email=email,
            password_hash=get_password_hash(settings.admin_pass),
            first_name="System",
            last_name="Administrator",
            role="admin",
            company_id=company.id,
            is_active=True,
        )
    )
    session.commit()
    logger.warning("[BOOTSTRAP] Admin account created for %s", email)
    return admin


def ensure_seed_data(session: Session) -> None:
    ensure_admin_user(session)
