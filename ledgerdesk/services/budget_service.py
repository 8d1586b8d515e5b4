"""Budget operations."""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ledgerdesk.core.errors import PersistenceError, ValidationError
from ledgerdesk.db.base import new_id
from ledgerdesk.models import Budget, BudgetLineItem
from ledgerdesk.repositories.budgets import BudgetRepository
from ledgerdesk.repositories.filters import BudgetFilters
from ledgerdesk.schemas.budget import BudgetCreate
from ledgerdesk.services.document_service import check_page
from ledgerdesk.utils.time import utc_now

logger = logging.getLogger(__name__)


def list_budgets(db: Session, filters: BudgetFilters, *, limit: int, offset: int) -> list[Budget]:
    check_page(limit, offset)
    return BudgetRepository(db).list_with_lines(filters, limit=limit, offset=offset)


def create_budget(db: Session, payload: BudgetCreate, *, company_id: str, created_by: str | None) -> Budget:
    """Insert a budget and its line items together; missing dates default to today."""
    repo = BudgetRepository(db)
    if payload.id is not None and repo.get(payload.id) is not None:
        raise ValidationError(f"Budget {payload.id} already exists")
    today = utc_now().date()
    start_date = payload.start_date or today
    end_date = payload.end_date or today
    if end_date < start_date:
        raise ValidationError("endDate must not be before startDate")

    budget = Budget(
        **payload.model_dump(exclude={"id", "company_id", "start_date", "end_date", "line_items"}),
        id=payload.id or new_id(),
        company_id=company_id,
        start_date=start_date,
        end_date=end_date,
        created_by=created_by,
    )
    lines = [BudgetLineItem(**item.model_dump(), id=new_id()) for item in payload.line_items]
    try:
        repo.insert_with_lines(budget, lines)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to create budget for company_id=%s", company_id)
        raise PersistenceError("Failed to create budget") from exc
    db.refresh(budget)
    return budget
