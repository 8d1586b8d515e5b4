"""The Alembic revision builds the same tables the ORM declares."""

import importlib.util
from pathlib import Path
from types import ModuleType

from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import create_engine, inspect

from ledgerdesk.db.base import Base
import ledgerdesk.models  # noqa: F401

REVISION = Path(__file__).resolve().parents[1] / "alembic" / "versions" / "0001_ledgerdesk_schema.py"


def _load_revision() -> ModuleType:
    spec = importlib.util.spec_from_file_location("ledgerdesk_schema_revision", REVISION)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_upgrade_creates_orm_tables_and_downgrade_drops_them(tmp_path: Path) -> None:
    engine = create_engine(f"sqlite:///{tmp_path / 'migrated.db'}")
    revision = _load_revision()

    with engine.begin() as connection:
        with Operations.context(MigrationContext.configure(connection)):
            revision.upgrade()

    inspector = inspect(engine)
    assert set(Base.metadata.tables) <= set(inspector.get_table_names())
    audit_columns = {column["name"] for column in inspector.get_columns("audit_logs")}
    assert {"company_id", "user_id", "action", "entity_type", "entity_id", "old_value", "new_value", "created_at"} <= audit_columns

    with engine.begin() as connection:
        with Operations.context(MigrationContext.configure(connection)):
            revision.downgrade()

    assert inspect(engine).get_table_names() == []
