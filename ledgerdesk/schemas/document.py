"""Invoice and bill API schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import Literal

from pydantic import Field

from ledgerdesk.schemas.common import ApiModel, DocumentPageMeta

InvoiceStatus = Literal["draft", "sent", "viewed", "partial", "paid", "overdue", "cancelled", "written_off"]
BillStatus = Literal["draft", "pending", "approved", "partial", "paid", "overdue", "cancelled"]


class LineItemCreate(ApiModel):
    """Single line item payload; ``total`` is derived when omitted."""

    id: str | None = None
    description: str = Field(min_length=1)
    quantity: Decimal = Field(default=Decimal("1"), gt=0)
    unit_price: Decimal
    tax_rate: Decimal = Field(default=Decimal("0"), ge=0)
    total: Decimal | None = None


class BillLineItemCreate(LineItemCreate):
    category_id: str | None = None


class LineItemRead(ApiModel):
    id: str
    description: str
    quantity: Decimal
    unit_price: Decimal
    tax_rate: Decimal
    total: Decimal


class BillLineItemRead(LineItemRead):
    category_id: str | None = None


class InvoiceCreate(ApiModel):
    """Create an invoice with its line items in one request."""

    id: str | None = None
    company_id: str | None = None
    invoice_number: str = Field(min_length=1)
    customer_id: str
    status: InvoiceStatus = "draft"
    issue_date: date
    due_date: date
    subtotal: Decimal = Field(ge=0)
    tax_amount: Decimal = Decimal("0")
    discount_amount: Decimal = Decimal("0")
    total_amount: Decimal | None = None
    notes: str | None = None
    terms: str | None = None
    line_items: list[LineItemCreate] = Field(default_factory=list)


class BillCreate(ApiModel):
    """Create a bill with its line items in one request."""

    id: str | None = None
    company_id: str | None = None
    bill_number: str | None = None
    vendor_id: str
    status: BillStatus = "draft"
    issue_date: date
    due_date: date
    subtotal: Decimal = Field(ge=0)
    tax_amount: Decimal = Decimal("0")
    total_amount: Decimal | None = None
    notes: str | None = None
    line_items: list[BillLineItemCreate] = Field(default_factory=list)


class InvoiceUpdate(ApiModel):
    id: str
    status: InvoiceStatus | None = None
    amount_paid: Decimal | None = Field(default=None, ge=0)


class BillUpdate(ApiModel):
    id: str
    status: BillStatus | None = None
    amount_paid: Decimal | None = Field(default=None, ge=0)
    approved_by: str | None = None
    approval_notes: str | None = None


class InvoiceRead(ApiModel):
    """Serialized invoice with line items."""

    id: str
    company_id: str
    invoice_number: str
    customer_id: str
    status: str
    issue_date: date
    due_date: date
    subtotal: Decimal
    tax_amount: Decimal
    discount_amount: Decimal
    total_amount: Decimal
    amount_paid: Decimal
    notes: str | None
    terms: str | None
    created_by: str | None
    created_at: datetime
    updated_at: datetime
    paid_at: datetime | None
    line_items: list[LineItemRead] = Field(default_factory=list)


class BillRead(ApiModel):
    """Serialized bill with line items."""

    id: str
    company_id: str
    bill_number: str | None
    vendor_id: str
    status: str
    issue_date: date
    due_date: date
    subtotal: Decimal
    tax_amount: Decimal
    total_amount: Decimal
    amount_paid: Decimal
    notes: str | None
    approval_notes: str | None
    created_by: str | None
    approved_by: str | None
    approved_at: datetime | None
    created_at: datetime
    updated_at: datetime
    paid_at: datetime | None
    line_items: list[BillLineItemRead] = Field(default_factory=list)


class InvoiceListRow(ApiModel):
    id: str
    invoice_number: str
    customer_id: str
    customer_name: str | None = None
    status: str
    issue_date: date
    due_date: date
    total_amount: Decimal
    amount_paid: Decimal
    created_at: datetime


class BillListRow(ApiModel):
    id: str
    bill_number: str | None
    vendor_id: str
    vendor_name: str | None = None
    status: str
    issue_date: date
    due_date: date
    total_amount: Decimal
    amount_paid: Decimal
    created_at: datetime


class DocumentSummaryRead(ApiModel):
    """Aggregates over the full filtered set, not just the current page."""

    total: Decimal
    paid: Decimal
    outstanding: Decimal
    count: int


class InvoiceListResponse(ApiModel):
    data: list[InvoiceListRow]
    summary: DocumentSummaryRead
    meta: DocumentPageMeta


class BillListResponse(ApiModel):
    data: list[BillListRow]
    summary: DocumentSummaryRead
    meta: DocumentPageMeta
