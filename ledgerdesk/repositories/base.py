"""Typed repository base: one subclass per entity, the caller owns the transaction."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from ledgerdesk.db.base import Base
from ledgerdesk.repositories.filters import Criterion, compose

ModelT = TypeVar("ModelT", bound=Base)
FiltersT = TypeVar("FiltersT")


class Repository(Generic[ModelT, FiltersT]):
    """get/list/insert/update/delete over one mapped table.

    Repositories flush but never commit; services decide where a unit of work
    ends so that parent and child rows share one transaction.
    """

    model: ClassVar[type[Any]]

    def __init__(self, db: Session) -> None:
        self.db = db

    def criteria(self, filters: FiltersT) -> list[Criterion]:
        raise NotImplementedError

    def predicate(self, filters: FiltersT) -> ColumnElement[bool]:
        return compose(self.criteria(filters))

    def ordering(self) -> tuple[Any, ...]:
        return (self.model.created_at.desc(), self.model.id.desc())

    def get(self, entity_id: str) -> ModelT | None:
        return self.db.get(self.model, entity_id)

    def list(self, filters: FiltersT, *, limit: int, offset: int = 0) -> list[ModelT]:
        stmt = select(self.model).where(self.predicate(filters)).order_by(*self.ordering()).limit(limit).offset(offset)
        return list(self.db.scalars(stmt).all())

    def count(self, filters: FiltersT) -> int:
        return int(self.db.scalar(select(func.count()).select_from(self.model).where(self.predicate(filters))) or 0)

    def insert(self, entity: ModelT) -> ModelT:
        self.db.add(entity)
        self.db.flush()
        return entity

    def update(self, entity: ModelT, values: Mapping[str, Any]) -> ModelT:
        for key, value in values.items():
            setattr(entity, key, value)
        self.db.flush()
        return entity

    def delete(self, entity: ModelT) -> None:
        self.db.delete(entity)
        self.db.flush()
