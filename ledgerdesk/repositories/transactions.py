"""Transaction repository: party names and income/expense totals."""

from __future__ import annotations

import operator
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from sqlalchemy import case, func, select

from ledgerdesk.models import Customer, Transaction, Vendor
from ledgerdesk.repositories.base import Repository
from ledgerdesk.repositories.documents import to_money
from ledgerdesk.repositories.filters import Criterion, TransactionFilters


@dataclass(frozen=True)
class TransactionTotals:
    income: Decimal
    expense: Decimal
    net: Decimal
    count: int


class TransactionRepository(Repository[Transaction, TransactionFilters]):
    model = Transaction

    def criteria(self, filters: TransactionFilters) -> list[Criterion]:
        return [
            Criterion(Transaction.company_id, filters.company_id),
            Criterion(Transaction.type, filters.type),
            Criterion(Transaction.category_id, filters.category_id),
            Criterion(Transaction.is_reconciled, filters.is_reconciled),
            Criterion(Transaction.date, filters.start_date, operator.ge),
            Criterion(Transaction.date, filters.end_date, operator.le),
        ]

    def ordering(self) -> tuple[Any, ...]:
        return (Transaction.date.desc(), Transaction.id.desc())

    def list_with_parties(
        self, filters: TransactionFilters, *, limit: int, offset: int
    ) -> list[tuple[Transaction, str | None, str | None]]:
        """Return ``(transaction, customer name, vendor name)``; missing parties yield ``None``."""
        stmt = (
            select(Transaction, Customer.name, Vendor.name)
            .outerjoin(Customer, Customer.id == Transaction.customer_id)
            .outerjoin(Vendor, Vendor.id == Transaction.vendor_id)
            .where(self.predicate(filters))
            .order_by(*self.ordering())
            .limit(limit)
            .offset(offset)
        )
        return [(row[0], row[1], row[2]) for row in self.db.execute(stmt).all()]

    def totals(self, filters: TransactionFilters) -> TransactionTotals:
        """Income and expense sums over every matching row; transfers count toward neither."""
        stmt = select(
            func.coalesce(func.sum(case((Transaction.type == "income", Transaction.amount), else_=0)), 0),
            func.coalesce(func.sum(case((Transaction.type == "expense", Transaction.amount), else_=0)), 0),
            func.count(Transaction.id),
        ).where(self.predicate(filters))
        income, expense, count = self.db.execute(stmt).one()
        income_amount = to_money(income)
        expense_amount = to_money(expense)
        return TransactionTotals(
            income=income_amount,
            expense=expense_amount,
            net=income_amount - expense_amount,
            count=int(count or 0),
        )
