"""Webhook subscription and delivery log repositories."""

from __future__ import annotations

from sqlalchemy import select

from ledgerdesk.models import Webhook, WebhookLog
from ledgerdesk.repositories.base import Repository
from ledgerdesk.repositories.filters import Criterion, WebhookFilters


class WebhookRepository(Repository[Webhook, WebhookFilters]):
    model = Webhook

    def criteria(self, filters: WebhookFilters) -> list[Criterion]:
        return [
            Criterion(Webhook.company_id, filters.company_id),
            Criterion(Webhook.status, filters.status),
        ]

    def subscribers(self, company_id: str, event: str) -> list[Webhook]:
        """Active subscriptions of ``company_id`` listening to ``event``."""
        candidates = self.list(WebhookFilters(company_id=company_id, status="active"), limit=500)
        return [hook for hook in candidates if event in (hook.events or [])]


class WebhookLogRepository(Repository[WebhookLog, None]):
    model = WebhookLog

    def criteria(self, filters: None) -> list[Criterion]:
        return []

    def recent_for_company(self, company_id: str, *, limit: int = 20) -> list[WebhookLog]:
        stmt = (
            select(WebhookLog)
            .join(Webhook, Webhook.id == WebhookLog.webhook_id)
            .where(Webhook.company_id == company_id)
            .order_by(*self.ordering())
            .limit(limit)
        )
        return list(self.db.scalars(stmt).all())
