"""Shared SQLAlchemy base declarative class and model imports."""

from uuid import uuid4

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for ORM models."""


def new_id() -> str:
    """Server-assigned primary key for rows the client did not name."""
    return str(uuid4())


# Import model modules so metadata is populated before create_all.
from ledgerdesk.models import audit_log as _audit_log  # noqa: E402,F401
from ledgerdesk.models import budget as _budget  # noqa: E402,F401
from ledgerdesk.models import company as _company  # noqa: E402,F401
from ledgerdesk.models import document as _document  # noqa: E402,F401
from ledgerdesk.models import party as _party  # noqa: E402,F401
from ledgerdesk.models import user as _user  # noqa: E402,F401
from ledgerdesk.models import webhook as _webhook  # noqa: E402,F401
