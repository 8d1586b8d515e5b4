"""Customer and vendor schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import Field

from ledgerdesk.schemas.common import ApiModel, PageMeta


class CustomerCreate(ApiModel):
    id: str | None = None
    company_id: str | None = None
    name: str = Field(min_length=1)
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    credit_limit: Decimal = Field(default=Decimal("0"), ge=0)
    payment_terms: int = Field(default=30, ge=0)
    notes: str | None = None
    is_active: bool = True


class CustomerRead(CustomerCreate):
    id: str
    company_id: str
    created_at: datetime


class VendorCreate(ApiModel):
    id: str | None = None
    company_id: str | None = None
    name: str = Field(min_length=1)
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    payment_details: str | None = None
    tax_id: str | None = None
    is_1099_eligible: bool = False
    payment_terms: int = Field(default=30, ge=0)
    discount_terms: str | None = None
    notes: str | None = None
    is_active: bool = True


class VendorRead(VendorCreate):
    id: str
    company_id: str
    created_at: datetime


class CustomerListResponse(ApiModel):
    data: list[CustomerRead]
    meta: PageMeta


class VendorListResponse(ApiModel):
    data: list[VendorRead]
    meta: PageMeta
