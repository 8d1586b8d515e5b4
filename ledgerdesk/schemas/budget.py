"""Budget schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import Literal

from pydantic import Field

from ledgerdesk.schemas.common import ApiModel, PageMeta


class BudgetLineItemCreate(ApiModel):
    category_id: str | None = None
    allocated: Decimal = Field(default=Decimal("0"), ge=0)
    spent: Decimal = Field(default=Decimal("0"), ge=0)
    alert_threshold: int = Field(default=80, ge=0, le=100)


class BudgetLineItemRead(ApiModel):
    id: str
    category_id: str | None
    allocated: Decimal
    spent: Decimal
    alert_threshold: int
    alert_triggered: bool


class BudgetCreate(ApiModel):
    id: str | None = None
    company_id: str | None = None
    name: str = Field(min_length=1)
    description: str | None = None
    period: Literal["monthly", "quarterly", "annual"] = "monthly"
    start_date: date | None = None
    end_date: date | None = None
    total_allocated: Decimal = Field(default=Decimal("0"), ge=0)
    total_spent: Decimal = Field(default=Decimal("0"), ge=0)
    status: Literal["draft", "active", "closed"] = "draft"
    line_items: list[BudgetLineItemCreate] = Field(default_factory=list)


class BudgetRead(ApiModel):
    id: str
    company_id: str
    name: str
    description: str | None
    period: str
    start_date: date
    end_date: date
    total_allocated: Decimal
    total_spent: Decimal
    status: str
    created_by: str | None
    created_at: datetime
    line_items: list[BudgetLineItemRead] = Field(default_factory=list)


class BudgetListResponse(ApiModel):
    data: list[BudgetRead]
    meta: PageMeta
