from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker

from ledgerdesk.core.config import settings
from ledgerdesk.core.security import verify_password
from ledgerdesk.db.base import Base
from ledgerdesk.db.seed import DEFAULT_COMPANY_CODE, ensure_admin_user, ensure_default_company
from ledgerdesk.models import Company, User


def _build_session_local() -> sessionmaker:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    Base.metadata.create_all(bind=engine)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


def test_admin_seed_is_skipped_without_credentials(monkeypatch) -> None:
    monkeypatch.setattr(settings, "admin_email", "")
    monkeypatch.setattr(settings, "admin_pass", "")
    session_local = _build_session_local()

    with session_local() as session:
        assert ensure_admin_user(session) is None
        assert session.scalars(select(User)).all() == []


def test_ensure_admin_user_is_idempotent(monkeypatch) -> None:
    monkeypatch.setattr(settings, "admin_email", "Owner@Ledger.test")
    monkeypatch.setattr(settings, "admin_pass", "bootstrap-pass")
    session_local = _build_session_local()

    with session_local() as session:
        admin = ensure_admin_user(session)
        assert admin is not None
        assert admin.email == "owner@ledger.test"
        assert admin.company_id == ensure_default_company(session).id

    with session_local() as session:
        ensure_admin_user(session)
        admins = session.scalars(select(User).where(User.email == "owner@ledger.test")).all()
        companies = session.scalars(select(Company)).all()
        assert len(admins) == 1
        assert [company.code for company in companies] == [DEFAULT_COMPANY_CODE]
        assert admins[0].role == "admin"
        assert verify_password("bootstrap-pass", admins[0].password_hash)


def test_ensure_admin_user_reactivates_disabled_account(monkeypatch) -> None:
    monkeypatch.setattr(settings, "admin_email", "owner@ledger.test")
    monkeypatch.setattr(settings, "admin_pass", "bootstrap-pass")
    session_local = _build_session_local()

    with session_local() as session:
        company = ensure_default_company(session)
        session.add(
            User(
                email="owner@ledger.test",
                password_hash="legacy-hash",
                first_name="Old",
                last_name="Owner",
                role="viewer",
                company_id=company.id,
                is_active=False,
            )
        )
        session.commit()

    with session_local() as session:
        admin = ensure_admin_user(session)
        assert admin.is_active is True
        assert admin.role == "admin"
