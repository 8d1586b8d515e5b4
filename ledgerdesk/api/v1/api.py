"""API v1 router composition."""

from fastapi import APIRouter

from ledgerdesk.api.v1.endpoints import (
    audit_logs,
    auth,
    bills,
    budgets,
    customers,
    integrations,
    invoices,
    transactions,
    users,
    vendors,
    webhooks,
)

api_router: APIRouter = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(audit_logs.router, prefix="/audit-logs", tags=["audit"])
api_router.include_router(invoices.router, prefix="/invoices", tags=["invoices"])
api_router.include_router(bills.router, prefix="/bills", tags=["bills"])
api_router.include_router(transactions.router, prefix="/transactions", tags=["transactions"])
api_router.include_router(customers.router, prefix="/customers", tags=["customers"])
api_router.include_router(vendors.router, prefix="/vendors", tags=["vendors"])
api_router.include_router(budgets.router, prefix="/budgets", tags=["budgets"])
api_router.include_router(integrations.router, prefix="/integrations", tags=["integrations"])
api_router.include_router(webhooks.router, prefix="/webhooks", tags=["webhooks"])
