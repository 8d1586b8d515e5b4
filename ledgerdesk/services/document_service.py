"""Invoice and bill workflows shared through ``DocumentRepository``."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ledgerdesk.core.errors import NotFoundError, PersistenceError, ValidationError
from ledgerdesk.db.base import new_id
from ledgerdesk.repositories.documents import CENT, DocumentRepository, DocumentSummary, InvoiceRepository, to_money
from ledgerdesk.repositories.filters import DocumentFilters
from ledgerdesk.schemas.document import BillCreate, BillUpdate, InvoiceCreate, InvoiceUpdate
from ledgerdesk.utils.time import utc_now

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 500


@dataclass(frozen=True)
class DocumentPage:
    rows: list[tuple[Any, str | None]]
    summary: DocumentSummary
    total: int


def check_page(limit: int, offset: int) -> None:
    if limit < 1 or limit > MAX_PAGE_SIZE:
        raise ValidationError("Invalid limit parameter")
    if offset < 0:
        raise ValidationError("Invalid offset parameter")


def list_documents(repo: DocumentRepository, filters: DocumentFilters, *, limit: int, offset: int) -> DocumentPage:
    """One page of documents plus a summary over every row the filters match."""
    check_page(limit, offset)
    summary = repo.summarize(filters)
    rows = repo.list_with_counterparty(filters, limit=limit, offset=offset)
    return DocumentPage(rows=rows, summary=summary, total=summary.count)


def resolve_total(subtotal: Decimal, tax_amount: Decimal, discount_amount: Decimal, supplied: Decimal | None) -> Decimal:
    """Return ``subtotal + tax - discount``; a supplied total must agree with it."""
    expected = to_money(subtotal + tax_amount - discount_amount)
    if supplied is None:
        return expected
    if to_money(supplied) != expected:
        raise ValidationError("totalAmount must equal subtotal + taxAmount - discountAmount")
    return expected


def line_total(quantity: Decimal, unit_price: Decimal, tax_rate: Decimal) -> Decimal:
    return (quantity * unit_price * (1 + tax_rate / 100)).quantize(CENT)


def create_document(
    db: Session,
    repo: DocumentRepository,
    payload: InvoiceCreate | BillCreate,
    *,
    company_id: str,
    created_by: str | None,
) -> Any:
    """Insert a document and its line items in one transaction.

    A document created as ``paid`` is fully paid at creation; one created as
    ``approved`` is approved by its creator.
    """
    if payload.id is not None and repo.get(payload.id) is not None:
        raise ValidationError(f"{repo.label} {payload.id} already exists")
    if isinstance(repo, InvoiceRepository) and repo.number_taken(payload.invoice_number):
        raise ValidationError(f"Invoice number {payload.invoice_number} already exists")

    discount = getattr(payload, "discount_amount", Decimal("0"))
    total_amount = resolve_total(payload.subtotal, payload.tax_amount, discount, payload.total_amount)
    fields = payload.model_dump(exclude={"id", "company_id", "total_amount", "line_items"})
    now = utc_now()
    document = repo.model(
        **fields,
        id=payload.id or new_id(),
        company_id=company_id,
        total_amount=total_amount,
        amount_paid=Decimal("0.00"),
        created_by=created_by,
        created_at=now,
        updated_at=now,
    )
    # Same stamps update_document applies on a status change.
    if payload.status == "paid":
        document.paid_at = now
        document.amount_paid = total_amount
    if payload.status == "approved":
        document.approved_by = created_by
        document.approved_at = now
    lines = []
    for position, item in enumerate(payload.line_items):
        values = item.model_dump(exclude={"id", "total"})
        total = item.total if item.total is not None else line_total(item.quantity, item.unit_price, item.tax_rate)
        lines.append(repo.line_model(**values, id=item.id or new_id(), position=position, total=to_money(total)))

    try:
        repo.insert_with_lines(document, lines)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to create %s for company_id=%s", repo.label.lower(), company_id)
        raise PersistenceError(f"Failed to create {repo.label.lower()}") from exc
    db.refresh(document)
    return document


def get_document(repo: DocumentRepository, document_id: str, *, company_id: str | None = None) -> Any:
    document = repo.get(document_id)
    if document is None or (company_id is not None and document.company_id != company_id):
        raise NotFoundError(f"{repo.label} not found")
    return document


def update_document(
    db: Session,
    repo: DocumentRepository,
    payload: InvoiceUpdate | BillUpdate,
    *,
    company_id: str | None = None,
) -> Any:
    """Apply a partial status/payment/approval update.

    ``paid`` stamps ``paid_at``; an approver stamps ``approved_at``;
    ``updated_at`` moves on every call.
    """
    document = get_document(repo, payload.id, company_id=company_id)
    changes = {key: value for key, value in payload.model_dump(exclude={"id"}, exclude_unset=True).items() if value is not None}
    now = utc_now()
    if changes.get("status") == "paid":
        changes["paid_at"] = now
    if changes.get("approved_by"):
        changes["approved_at"] = now
    if "amount_paid" in changes:
        changes["amount_paid"] = to_money(changes["amount_paid"])
    changes["updated_at"] = now

    try:
        repo.update(document, changes)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to update %s id=%s", repo.label.lower(), payload.id)
        raise PersistenceError(f"Failed to update {repo.label.lower()}") from exc
    db.refresh(document)
    return document
