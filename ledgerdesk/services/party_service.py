"""Customer and vendor operations."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ledgerdesk.core.errors import PersistenceError, ValidationError
from ledgerdesk.db.base import new_id
from ledgerdesk.repositories.base import Repository
from ledgerdesk.repositories.filters import PartyFilters
from ledgerdesk.schemas.party import CustomerCreate, VendorCreate
from ledgerdesk.services.document_service import check_page

logger = logging.getLogger(__name__)


def list_parties(repo: Repository, filters: PartyFilters, *, limit: int, offset: int) -> list[Any]:
    check_page(limit, offset)
    return repo.list(filters, limit=limit, offset=offset)


def create_party(db: Session, repo: Repository, payload: CustomerCreate | VendorCreate, *, company_id: str) -> Any:
    kind = repo.model.__name__.lower()
    if payload.id is not None and repo.get(payload.id) is not None:
        raise ValidationError(f"{repo.model.__name__} {payload.id} already exists")
    party = repo.model(**payload.model_dump(exclude={"id", "company_id"}), id=payload.id or new_id(), company_id=company_id)
    try:
        repo.insert(party)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to create %s for company_id=%s", kind, company_id)
        raise PersistenceError(f"Failed to create {kind}") from exc
    db.refresh(party)
    return party
