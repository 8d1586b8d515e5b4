"""Transaction schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import Field

from ledgerdesk.schemas.common import ApiModel, DocumentPageMeta

TransactionType = Literal["income", "expense", "transfer"]
PaymentMethod = Literal["cash", "check", "bank_transfer", "credit_card", "other"]


class TransactionCreate(ApiModel):
    id: str | None = None
    company_id: str | None = None
    type: TransactionType
    amount: Decimal = Field(gt=0)
    date: datetime
    category_id: str | None = None
    account_id: str | None = None
    customer_id: str | None = None
    vendor_id: str | None = None
    invoice_id: str | None = None
    bill_id: str | None = None
    payment_method: PaymentMethod | None = None
    reference: str | None = None
    description: str | None = None
    notes: str | None = None
    is_reconciled: bool = False
    is_taxable: bool = True
    tax_amount: Decimal = Field(default=Decimal("0"), ge=0)


class TransactionRead(TransactionCreate):
    id: str
    company_id: str
    created_by: str | None = None
    created_at: datetime
    updated_at: datetime


class TransactionListRow(ApiModel):
    id: str
    type: str
    amount: Decimal
    date: datetime
    description: str | None
    reference: str | None
    payment_method: str | None
    is_reconciled: bool
    category_id: str | None
    customer_name: str | None = None
    vendor_name: str | None = None


class TransactionTotalsRead(ApiModel):
    """Sums over the full filtered set, not just the current page."""

    income: Decimal
    expense: Decimal
    net: Decimal


class TransactionListResponse(ApiModel):
    data: list[TransactionListRow]
    totals: TransactionTotalsRead
    meta: DocumentPageMeta
