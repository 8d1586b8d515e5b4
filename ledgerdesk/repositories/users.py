"""User and company repositories."""

from __future__ import annotations

from sqlalchemy import select

from ledgerdesk.models import Company, User
from ledgerdesk.repositories.base import Repository
from ledgerdesk.repositories.filters import Criterion, UserFilters


class UserRepository(Repository[User, UserFilters]):
    model = User

    def criteria(self, filters: UserFilters) -> list[Criterion]:
        return [
            Criterion(User.company_id, filters.company_id),
            Criterion(User.role, filters.role),
            Criterion(User.is_active, filters.is_active),
        ]

    def get_by_email(self, email: str) -> User | None:
        return self.db.scalar(select(User).where(User.email == email).limit(1))

    def list_with_company(self, filters: UserFilters, *, limit: int, offset: int) -> list[tuple[User, str | None]]:
        stmt = (
            select(User, Company.name)
            .outerjoin(Company, Company.id == User.company_id)
            .where(self.predicate(filters))
            .order_by(*self.ordering())
            .limit(limit)
            .offset(offset)
        )
        return [(row[0], row[1]) for row in self.db.execute(stmt).all()]


class CompanyRepository(Repository[Company, None]):
    model = Company

    def criteria(self, filters: None) -> list[Criterion]:
        return []

    def get_by_code(self, code: str) -> Company | None:
        return self.db.scalar(select(Company).where(Company.code == code).limit(1))
