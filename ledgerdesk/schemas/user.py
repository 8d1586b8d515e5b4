"""User schemas."""

from datetime import datetime
from typing import Literal

from pydantic import Field

from ledgerdesk.schemas.common import ApiModel, PageMeta

UserRole = Literal["admin", "accountant", "clerk", "auditor", "viewer"]


class UserCreate(ApiModel):
    """Payload for creating a back-office user; the password is hashed before storage."""

    id: str | None = None
    email: str = Field(min_length=3)
    password: str = Field(min_length=8)
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    role: UserRole = "clerk"
    company_id: str | None = None
    avatar: str | None = None


class UserRead(ApiModel):
    id: str
    email: str
    first_name: str
    last_name: str
    role: str
    company_id: str | None
    is_active: bool
    last_login_at: datetime | None
    created_at: datetime


class UserListRow(UserRead):
    company_name: str | None = None


class UserListResponse(ApiModel):
    data: list[UserListRow]
    meta: PageMeta
