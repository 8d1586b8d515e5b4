"""Transaction listing with totals, and recording."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ledgerdesk.core.errors import PersistenceError, ValidationError
from ledgerdesk.db.base import new_id
from ledgerdesk.models import Transaction
from ledgerdesk.repositories.documents import to_money
from ledgerdesk.repositories.filters import TransactionFilters
from ledgerdesk.repositories.transactions import TransactionRepository, TransactionTotals
from ledgerdesk.schemas.transaction import TransactionCreate
from ledgerdesk.services.document_service import check_page
from ledgerdesk.utils.time import as_utc, utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransactionPage:
    rows: list[tuple[Transaction, str | None, str | None]]
    totals: TransactionTotals
    total: int


def list_transactions(repo: TransactionRepository, filters: TransactionFilters, *, limit: int, offset: int) -> TransactionPage:
    check_page(limit, offset)
    totals = repo.totals(filters)
    rows = repo.list_with_parties(filters, limit=limit, offset=offset)
    return TransactionPage(rows=rows, totals=totals, total=totals.count)


def create_transaction(db: Session, payload: TransactionCreate, *, company_id: str, created_by: str | None) -> Transaction:
    repo = TransactionRepository(db)
    if payload.id is not None and repo.get(payload.id) is not None:
        raise ValidationError(f"Transaction {payload.id} already exists")
    now = utc_now()
    transaction = Transaction(
        **payload.model_dump(exclude={"id", "company_id", "date", "amount", "tax_amount"}),
        id=payload.id or new_id(),
        company_id=company_id,
        date=as_utc(payload.date),
        amount=to_money(payload.amount),
        tax_amount=to_money(payload.tax_amount),
        created_by=created_by,
        created_at=now,
        updated_at=now,
    )
    try:
        repo.insert(transaction)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to create transaction for company_id=%s", company_id)
        raise PersistenceError("Failed to create transaction") from exc
    db.refresh(transaction)
    return transaction
