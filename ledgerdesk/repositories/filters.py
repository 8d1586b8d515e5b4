"""Optional-filter structures and the fold that turns them into one predicate."""

from __future__ import annotations

import operator
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from sqlalchemy import and_, true
from sqlalchemy.sql.elements import ColumnElement

Comparison = Callable[[Any, Any], ColumnElement[bool]]


@dataclass(frozen=True)
class Criterion:
    """One optional predicate; a ``None`` value leaves the column unconstrained."""

    column: Any
    value: Any
    compare: Comparison = operator.eq


def compose(criteria: Iterable[Criterion]) -> ColumnElement[bool]:
    """AND together every criterion whose value is present."""
    return and_(true(), *(item.compare(item.column, item.value) for item in criteria if item.value is not None))


@dataclass(frozen=True)
class DocumentFilters:
    company_id: str | None = None
    counterparty_id: str | None = None
    status: str | None = None
    start_date: date | None = None
    end_date: date | None = None


@dataclass(frozen=True)
class PartyFilters:
    company_id: str | None = None
    is_active: bool | None = None


@dataclass(frozen=True)
class BudgetFilters:
    company_id: str | None = None
    status: str | None = None


@dataclass(frozen=True)
class UserFilters:
    company_id: str | None = None
    role: str | None = None
    is_active: bool | None = None


@dataclass(frozen=True)
class AuditLogFilters:
    company_id: str
    user_id: str | None = None
    action: str | None = None
    entity_type: str | None = None
    entity_id: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None


@dataclass(frozen=True)
class WebhookFilters:
    company_id: str | None = None
    status: str | None = None


@dataclass(frozen=True)
class TransactionFilters:
    company_id: str | None = None
    type: str | None = None
    category_id: str | None = None
    is_reconciled: bool | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
