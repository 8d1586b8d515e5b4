"""Per-request caller context and role guards for API routes."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from fastapi import Depends, Request

from ledgerdesk.core.errors import AuthorizationError, ValidationError
from ledgerdesk.core.security import get_current_user
from ledgerdesk.models.user import User

WRITE_ROLES: tuple[str, ...] = ("admin", "accountant", "clerk")
AUDIT_READ_ROLES: tuple[str, ...] = ("admin", "auditor", "accountant")


@dataclass(frozen=True)
class RequestContext:
    """Who is calling and from where; passed explicitly to services."""

    user: User
    ip_address: str | None
    user_agent: str | None

    @property
    def user_id(self) -> str:
        return self.user.id

    @property
    def company_id(self) -> str | None:
        return self.user.company_id

    def require_company(self) -> str:
        if self.user.company_id is None:
            raise ValidationError("User is not assigned to a company")
        return self.user.company_id

    def scope_company(self, requested: str | None) -> str | None:
        """Company a request may act on: the caller's own unless an admin asks for another."""
        if requested is None or requested == self.user.company_id:
            return self.user.company_id
        if self.user.role != "admin":
            raise AuthorizationError("Access to another company is not allowed")
        return requested

    def target_company(self, requested: str | None) -> str:
        company_id = self.scope_company(requested)
        if company_id is None:
            raise ValidationError("companyId is required")
        return company_id


def client_ip(request: Request) -> str | None:
    """First ``X-Forwarded-For`` hop when present, else the socket peer."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return request.client.host if request.client else None


def get_request_context(request: Request, user: User = Depends(get_current_user)) -> RequestContext:
    return RequestContext(user=user, ip_address=client_ip(request), user_agent=request.headers.get("user-agent"))


def require_roles(*roles: str) -> Callable[..., RequestContext]:
    """Build a dependency that admits only the listed roles."""

    allowed = {role.lower() for role in roles}

    def _checker(ctx: RequestContext = Depends(get_request_context)) -> RequestContext:
        if str(ctx.user.role).lower() not in allowed:
            raise AuthorizationError("Insufficient permissions")
        return ctx

    return _checker
