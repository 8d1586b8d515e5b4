"""Budget repository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from ledgerdesk.models import Budget, BudgetLineItem
from ledgerdesk.repositories.base import Repository
from ledgerdesk.repositories.filters import BudgetFilters, Criterion


class BudgetRepository(Repository[Budget, BudgetFilters]):
    model = Budget

    def criteria(self, filters: BudgetFilters) -> list[Criterion]:
        return [
            Criterion(Budget.company_id, filters.company_id),
            Criterion(Budget.status, filters.status),
        ]

    def list_with_lines(self, filters: BudgetFilters, *, limit: int, offset: int) -> list[Budget]:
        """Budgets plus their line items, loaded in one extra query instead of one per budget."""
        stmt = (
            select(Budget)
            .options(selectinload(Budget.line_items))
            .where(self.predicate(filters))
            .order_by(*self.ordering())
            .limit(limit)
            .offset(offset)
        )
        return list(self.db.scalars(stmt).all())

    def insert_with_lines(self, budget: Budget, lines: list[BudgetLineItem]) -> Budget:
        budget.line_items = lines
        return self.insert(budget)
