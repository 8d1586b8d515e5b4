"""Invoice and bill repositories: counterparty join, summaries, parent plus lines."""

from __future__ import annotations

import operator
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, ClassVar, Generic, TypeVar

from sqlalchemy import func, select

from ledgerdesk.models import Bill, BillLineItem, Customer, Invoice, InvoiceLineItem, Vendor
from ledgerdesk.repositories.base import Repository
from ledgerdesk.repositories.filters import Criterion, DocumentFilters

CENT = Decimal("0.01")
DocumentT = TypeVar("DocumentT", Invoice, Bill)


def to_money(value: Any) -> Decimal:
    return Decimal(str(value or 0)).quantize(CENT)


@dataclass(frozen=True)
class DocumentSummary:
    total: Decimal
    paid: Decimal
    outstanding: Decimal
    count: int


class DocumentRepository(Repository[DocumentT, DocumentFilters], Generic[DocumentT]):
    """Shared query pattern for financial documents and their line items."""

    label: ClassVar[str]
    line_model: ClassVar[type[Any]]
    counterparty_model: ClassVar[type[Any]]
    counterparty_attr: ClassVar[str]

    @property
    def counterparty_column(self) -> Any:
        return getattr(self.model, self.counterparty_attr)

    def criteria(self, filters: DocumentFilters) -> list[Criterion]:
        return [
            Criterion(self.model.company_id, filters.company_id),
            Criterion(self.counterparty_column, filters.counterparty_id),
            Criterion(self.model.status, filters.status),
            Criterion(self.model.issue_date, filters.start_date, operator.ge),
            Criterion(self.model.issue_date, filters.end_date, operator.le),
        ]

    def list_with_counterparty(self, filters: DocumentFilters, *, limit: int, offset: int) -> list[tuple[DocumentT, str | None]]:
        """Return ``(document, counterparty name)`` pairs; unmatched counterparties yield ``None``."""
        counterparty = self.counterparty_model
        stmt = (
            select(self.model, counterparty.name)
            .outerjoin(counterparty, counterparty.id == self.counterparty_column)
            .where(self.predicate(filters))
            .order_by(*self.ordering())
            .limit(limit)
            .offset(offset)
        )
        return [(row[0], row[1]) for row in self.db.execute(stmt).all()]

    def summarize(self, filters: DocumentFilters) -> DocumentSummary:
        stmt = select(
            func.coalesce(func.sum(self.model.total_amount), 0),
            func.coalesce(func.sum(self.model.amount_paid), 0),
            func.count(self.model.id),
        ).where(self.predicate(filters))
        total, paid, count = self.db.execute(stmt).one()
        total_amount = to_money(total)
        paid_amount = to_money(paid)
        return DocumentSummary(
            total=total_amount,
            paid=paid_amount,
            outstanding=total_amount - paid_amount,
            count=int(count or 0),
        )

    def insert_with_lines(self, document: DocumentT, lines: list[Any]) -> DocumentT:
        """Stage the parent and its children in the caller's transaction."""
        document.line_items = lines
        return self.insert(document)


class InvoiceRepository(DocumentRepository[Invoice]):
    model = Invoice
    label = "Invoice"
    line_model = InvoiceLineItem
    counterparty_model = Customer
    counterparty_attr = "customer_id"

    def number_taken(self, invoice_number: str) -> bool:
        return self.db.scalar(select(Invoice.id).where(Invoice.invoice_number == invoice_number).limit(1)) is not None


class BillRepository(DocumentRepository[Bill]):
    model = Bill
    label = "Bill"
    line_model = BillLineItem
    counterparty_model = Vendor
    counterparty_attr = "vendor_id"
