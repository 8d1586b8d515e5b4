"""Audit log repository: filtered pages, grouped counts and the retention sweep."""

from __future__ import annotations

import operator
from datetime import datetime

from sqlalchemy import delete, func, select

from ledgerdesk.models import AuditLog
from ledgerdesk.repositories.base import Repository
from ledgerdesk.repositories.filters import AuditLogFilters, Criterion, compose


class AuditLogRepository(Repository[AuditLog, AuditLogFilters]):
    model = AuditLog

    def criteria(self, filters: AuditLogFilters) -> list[Criterion]:
        return [
            Criterion(AuditLog.company_id, filters.company_id),
            Criterion(AuditLog.user_id, filters.user_id),
            Criterion(AuditLog.action, filters.action),
            Criterion(AuditLog.entity_type, filters.entity_type),
            Criterion(AuditLog.entity_id, filters.entity_id),
            Criterion(AuditLog.created_at, filters.start_date, operator.ge),
            Criterion(AuditLog.created_at, filters.end_date, operator.le),
        ]

    def entity_trail(self, company_id: str, entity_type: str, entity_id: str) -> list[AuditLog]:
        filters = AuditLogFilters(company_id=company_id, entity_type=entity_type, entity_id=entity_id)
        stmt = select(AuditLog).where(self.predicate(filters)).order_by(*self.ordering())
        return list(self.db.scalars(stmt).all())

    def action_counts(self, filters: AuditLogFilters) -> list[tuple[str, int]]:
        stmt = (
            select(AuditLog.action, func.count(AuditLog.id))
            .where(self.predicate(filters))
            .group_by(AuditLog.action)
            .order_by(func.count(AuditLog.id).desc(), AuditLog.action)
        )
        return [(action, int(count)) for action, count in self.db.execute(stmt).all()]

    def user_activity(self, filters: AuditLogFilters) -> list[tuple[str | None, str, int]]:
        stmt = (
            select(AuditLog.user_id, AuditLog.action, func.count(AuditLog.id))
            .where(self.predicate(filters))
            .group_by(AuditLog.user_id, AuditLog.action)
            .order_by(func.count(AuditLog.id).desc(), AuditLog.action)
        )
        return [(user_id, action, int(count)) for user_id, action, count in self.db.execute(stmt).all()]

    def purge_batch(self, before: datetime, *, company_id: str | None, batch_size: int) -> int:
        """Delete up to ``batch_size`` entries created strictly before ``before``."""
        predicate = compose(
            [
                Criterion(AuditLog.created_at, before, operator.lt),
                Criterion(AuditLog.company_id, company_id),
            ]
        )
        ids = list(self.db.scalars(select(AuditLog.id).where(predicate).limit(batch_size)).all())
        if not ids:
            return 0
        self.db.execute(delete(AuditLog).where(AuditLog.id.in_(ids)).execution_options(synchronize_session=False))
        return len(ids)
