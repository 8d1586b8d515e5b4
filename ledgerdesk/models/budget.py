"""Budget ORM models."""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Date, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledgerdesk.db.base import Base, new_id
from ledgerdesk.utils.time import utc_now

BUDGET_PERIODS = ("monthly", "quarterly", "annual")
BUDGET_STATUSES = ("draft", "active", "closed")


class Budget(Base):
    """Spending plan for one period."""

    __tablename__ = "budgets"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    company_id: Mapped[str] = mapped_column(ForeignKey("companies.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    period: Mapped[str] = mapped_column(String(16), nullable=False, default="monthly")
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    total_allocated: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))
    total_spent: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="draft")
    created_by: Mapped[str | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)

    line_items: Mapped[list["BudgetLineItem"]] = relationship(back_populates="budget", cascade="all, delete-orphan")


class BudgetLineItem(Base):
    """Allocation for one category inside a budget."""

    __tablename__ = "budget_line_items"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    budget_id: Mapped[str] = mapped_column(ForeignKey("budgets.id"), nullable=False, index=True)
    category_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    allocated: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))
    spent: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))
    alert_threshold: Mapped[int] = mapped_column(Integer, nullable=False, default=80)

    budget: Mapped[Budget] = relationship(back_populates="line_items")

    @property
    def alert_triggered(self) -> bool:
        """True once spending reached ``alert_threshold`` percent of the allocation."""
        allocated = Decimal(self.allocated or 0)
        if allocated <= 0:
            return False
        return Decimal(self.spent or 0) * 100 >= allocated * (self.alert_threshold or 0)
