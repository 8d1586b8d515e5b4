"""Outbound webhook subscription and delivery log models."""

from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledgerdesk.db.base import Base, new_id
from ledgerdesk.utils.time import utc_now

WEBHOOK_STATUSES = ("active", "paused", "failed")
DELIVERY_STATUSES = ("pending", "delivered", "failed")
WEBHOOK_EVENTS: dict[str, str] = {
    "invoice.created": "Invoice Created",
    "invoice.paid": "Invoice Paid",
    "invoice.overdue": "Invoice Overdue",
    "invoice.viewed": "Invoice Viewed",
    "invoice.cancelled": "Invoice Cancelled",
    "bill.created": "Bill Created",
    "bill.paid": "Bill Paid",
    "bill.overdue": "Bill Overdue",
    "bill.approved": "Bill Approved",
    "bill.cancelled": "Bill Cancelled",
    "transaction.created": "Transaction Created",
    "user.login": "User Login",
    "user.created": "User Created",
    "budget.alert": "Budget Alert",
    "delivery.created": "Delivery Created",
}


class Webhook(Base):
    """Company subscription that receives signed event notifications."""

    __tablename__ = "webhooks"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    company_id: Mapped[str] = mapped_column(ForeignKey("companies.id"), nullable=False, index=True)
    url: Mapped[str] = mapped_column(String(2048), nullable=False)
    events: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    secret: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="active")
    failure_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_triggered: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    last_failed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)

    logs: Mapped[list["WebhookLog"]] = relationship(back_populates="webhook", cascade="all, delete-orphan")


class WebhookLog(Base):
    """One delivery attempt chain for a webhook event."""

    __tablename__ = "webhook_logs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    webhook_id: Mapped[str] = mapped_column(ForeignKey("webhooks.id"), nullable=False, index=True)
    event: Mapped[str] = mapped_column(String(64), nullable=False)
    payload: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="pending")
    response_code: Mapped[int | None] = mapped_column(Integer, nullable=True)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    retry_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)

    webhook: Mapped[Webhook] = relationship(back_populates="logs")
