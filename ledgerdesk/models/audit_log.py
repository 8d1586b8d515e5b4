"""Append-only audit log model and its vocabularies."""

from datetime import datetime
from enum import Enum

from sqlalchemy import JSON, DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from ledgerdesk.db.base import Base, new_id
from ledgerdesk.utils.time import utc_now


class AuditAction(str, Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    LOGIN = "login"
    LOGOUT = "logout"
    APPROVE = "approve"
    REJECT = "reject"
    CANCEL = "cancel"
    EXPORT = "export"
    IMPORT = "import"
    PRINT = "print"
    SEND = "send"
    RECEIVE = "receive"
    UPLOAD = "upload"
    DOWNLOAD = "download"
    SYNC = "sync"
    ARCHIVE = "archive"
    RESTORE = "restore"
    VOID = "void"
    POST = "post"
    UNPOST = "unpost"
    RECONCILE = "reconcile"
    UNRECONCILE = "unreconcile"


class AuditEntityType(str, Enum):
    USER = "user"
    COMPANY = "company"
    CUSTOMER = "customer"
    VENDOR = "vendor"
    INVOICE = "invoice"
    BILL = "bill"
    TRANSACTION = "transaction"
    STOP_ORDER = "stop_order"
    BUDGET = "budget"
    CATEGORY = "category"
    ACCOUNT = "account"
    REPORT = "report"
    WEBHOOK = "webhook"
    INTEGRATION = "integration"
    SETTINGS = "settings"
    NOTIFICATION = "notification"
    SESSION = "session"
    EXPORT = "export"
    IMPORT = "import"
    DELIVERY = "delivery"


class AuditLog(Base):
    """Immutable record of one user or system action.

    Rows are never updated; the retention sweep is the only delete path.
    """

    __tablename__ = "audit_logs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    company_id: Mapped[str] = mapped_column(String(36), nullable=False)
    user_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    action: Mapped[str] = mapped_column(String(32), nullable=False)
    entity_type: Mapped[str] = mapped_column(String(32), nullable=False)
    entity_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(512), nullable=True)
    old_value: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    new_value: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)

    __table_args__ = (
        Index("ix_audit_logs_company_created", "company_id", "created_at"),
        Index("ix_audit_logs_entity", "entity_type", "entity_id"),
        Index("ix_audit_logs_created", "created_at"),
    )
