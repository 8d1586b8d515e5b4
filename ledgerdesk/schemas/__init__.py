"""Schema exports."""

from ledgerdesk.schemas.audit import (
    ActionCount,
    AuditLogPage,
    AuditLogRead,
    AuditPurgeResponse,
    AuditSummaryResponse,
    AuditTrailResponse,
    UserActivity,
)
from ledgerdesk.schemas.auth import LoginRequest, TokenResponse
from ledgerdesk.schemas.budget import BudgetCreate, BudgetLineItemCreate, BudgetListResponse, BudgetRead
from ledgerdesk.schemas.document import (
    BillCreate,
    BillListResponse,
    BillListRow,
    BillRead,
    BillUpdate,
    DocumentSummaryRead,
    InvoiceCreate,
    InvoiceListResponse,
    InvoiceListRow,
    InvoiceRead,
    InvoiceUpdate,
)
from ledgerdesk.schemas.party import CustomerCreate, CustomerListResponse, CustomerRead, VendorCreate, VendorListResponse, VendorRead
from ledgerdesk.schemas.user import UserCreate, UserListResponse, UserListRow, UserRead

__all__ = [
    "ActionCount",
    "AuditLogPage",
    "AuditLogRead",
    "AuditPurgeResponse",
    "AuditSummaryResponse",
    "AuditTrailResponse",
    "UserActivity",
    "LoginRequest",
    "TokenResponse",
    "BudgetCreate",
    "BudgetLineItemCreate",
    "BudgetListResponse",
    "BudgetRead",
    "BillCreate",
    "BillListResponse",
    "BillListRow",
    "BillRead",
    "BillUpdate",
    "DocumentSummaryRead",
    "InvoiceCreate",
    "InvoiceListResponse",
    "InvoiceListRow",
    "InvoiceRead",
    "InvoiceUpdate",
    "CustomerCreate",
    "CustomerListResponse",
    "CustomerRead",
    "VendorCreate",
    "VendorListResponse",
    "VendorRead",
    "UserCreate",
    "UserListResponse",
    "UserListRow",
    "UserRead",
]
