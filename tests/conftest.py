"""Shared fixtures: a per-test SQLite file database swapped into the app."""

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from ledgerdesk.core.security import create_access_token, get_password_hash
from ledgerdesk.db import session as db_session
from ledgerdesk.db.base import Base
from ledgerdesk.main import app
from ledgerdesk.models import Company, User

PASSWORD = "secret-pass-123"


@pytest.fixture
def session_local(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[sessionmaker]:
    engine = create_engine(
        f"sqlite:///{tmp_path / 'ledgerdesk_test.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)
    yield testing_session_local
    engine.dispose()


@pytest.fixture
def client(session_local: sessionmaker) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def company_id(session_local: sessionmaker) -> str:
    with session_local() as session:
        company = Company(name="Acme Ltd", code="ACME")
        session.add(company)
        session.commit()
        return company.id


@pytest.fixture
def make_user(session_local: sessionmaker, company_id: str) -> Callable[..., User]:
    def _make_user(role: str = "admin", email: str | None = None, company: str | None = None) -> User:
        with session_local() as session:
            user = User(
                email=email or f"{role}@acme.test",
                password_hash=get_password_hash(PASSWORD),
                first_name=role.title(),
                last_name="Tester",
                role=role,
                company_id=company or company_id,
                is_active=True,
            )
            session.add(user)
            session.commit()
            session.refresh(user)
            session.expunge(user)
            return user

    return _make_user


def headers_for(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(data={'sub': user.id})}"}


@pytest.fixture
def auth_headers() -> Callable[[User], dict[str, str]]:
    return headers_for


@pytest.fixture
def admin_headers(make_user: Callable[..., User]) -> dict[str, str]:
    return headers_for(make_user("admin"))
