"""User ORM model."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from ledgerdesk.db.base import Base, new_id
from ledgerdesk.utils.time import utc_now

USER_ROLES = ("admin", "accountant", "clerk", "auditor", "viewer")


def normalize_user_role(role: str | None) -> str:
    """Return canonical lowercase role or raise for unknown values."""
    normalized = str(role or "").strip().lower()
    if normalized not in USER_ROLES:
        raise ValueError(f"Unsupported role: {role}")
    return normalized


class User(Base):
    """Back-office account used for bearer-token login."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str] = mapped_column(String(128), nullable=False)
    last_name: Mapped[str] = mapped_column(String(128), nullable=False)
    role: Mapped[str] = mapped_column(Enum(*USER_ROLES, name="user_role"), nullable=False, default="clerk")
    company_id: Mapped[str | None] = mapped_column(ForeignKey("companies.id"), nullable=True)
    avatar: Mapped[str | None] = mapped_column(String(512), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (Index("ix_users_company_role", "company_id", "role"),)
