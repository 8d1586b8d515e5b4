"""Database engine and session management."""

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from ledgerdesk.core.config import settings


def build_connect_args(database_url: str, statement_timeout_ms: int) -> dict[str, Any]:
    """Return driver connect args that bound how long one statement may run or wait."""
    if database_url.startswith("sqlite"):
        return {"check_same_thread": False, "timeout": statement_timeout_ms / 1000}
    if database_url.startswith("postgresql"):
        return {"options": f"-c statement_timeout={statement_timeout_ms}"}
    return {}


connect_args: dict[str, Any] = build_connect_args(settings.database_url, settings.statement_timeout_ms)
engine = create_engine(settings.database_url, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield a database session and ensure proper cleanup."""
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()
