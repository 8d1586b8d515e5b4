"""Application models package."""

from ledgerdesk.models.audit_log import AuditAction, AuditEntityType, AuditLog
from ledgerdesk.models.budget import Budget, BudgetLineItem
from ledgerdesk.models.company import Company
from ledgerdesk.models.document import Bill, BillLineItem, Invoice, InvoiceLineItem
from ledgerdesk.models.party import Customer, Vendor
from ledgerdesk.models.transaction import Transaction
from ledgerdesk.models.user import User
from ledgerdesk.models.webhook import Webhook, WebhookLog

__all__ = [
    "AuditAction", "AuditEntityType", "AuditLog", "Budget", "BudgetLineItem", "Company",
    "Bill", "BillLineItem", "Invoice", "InvoiceLineItem", "Customer", "Vendor", "Transaction",
    "User", "Webhook", "WebhookLog",
]
