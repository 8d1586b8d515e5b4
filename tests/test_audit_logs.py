"""Audit log recording, query, CSV export and retention tests."""

import csv
import io
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient
from sqlalchemy import select, text
from sqlalchemy.orm import sessionmaker

from ledgerdesk.models import AuditLog, User
from ledgerdesk.repositories.filters import AuditLogFilters
from ledgerdesk.services.audit_service import (
    CSV_HEADER,
    format_audit_logs_csv,
    purge_audit_logs,
    query_audit_logs,
    record_action,
)

CUTOFF = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)


def _add_log(session_local: sessionmaker, company_id: str, created_at: datetime, **fields) -> str:
    with session_local() as session:
        log = AuditLog(
            company_id=company_id,
            action=fields.pop("action", "create"),
            entity_type=fields.pop("entity_type", "invoice"),
            created_at=created_at,
            **fields,
        )
        session.add(log)
        session.commit()
        return log.id


def test_record_action_stores_entry(session_local: sessionmaker, company_id: str) -> None:
    with session_local() as session:
        entry = record_action(
            session,
            company_id=company_id,
            action="approve",
            entity_type="bill",
            entity_id="bill-1",
            user_id="user-1",
            ip_address="10.1.1.1",
            new_value={"status": "approved"},
        )
        assert entry is not None

    with session_local() as session:
        stored = session.scalar(select(AuditLog).limit(1))
        assert stored is not None
        assert stored.action == "approve"
        assert stored.entity_type == "bill"
        assert stored.new_value == {"status": "approved"}
        assert stored.created_at is not None


def test_record_action_swallows_storage_errors(session_local: sessionmaker, company_id: str) -> None:
    with session_local() as session:
        session.execute(text("DROP TABLE audit_logs"))
        session.commit()
        assert record_action(session, company_id=company_id, action="create", entity_type="invoice") is None


def test_audit_failure_does_not_fail_business_request(
    client: TestClient,
    session_local: sessionmaker,
    admin_headers: dict[str, str],
) -> None:
    with session_local() as session:
        session.execute(text("DROP TABLE audit_logs"))
        session.commit()

    response = client.post("/api/v1/customers", json={"name": "Initech"}, headers=admin_headers)

    assert response.status_code == 201
    assert response.json()["name"] == "Initech"


def test_oversized_client_headers_are_clipped_not_lost(
    client: TestClient,
    session_local: sessionmaker,
    admin_headers: dict[str, str],
) -> None:
    headers = {**admin_headers, "User-Agent": "A" * 1024, "X-Forwarded-For": "1" * 100 + ", 10.0.0.1"}

    response = client.post("/api/v1/customers", json={"name": "Initech"}, headers=headers)

    assert response.status_code == 201
    with session_local() as session:
        entry = session.scalar(select(AuditLog).where(AuditLog.entity_type == "customer"))
    assert entry is not None
    assert entry.user_agent == "A" * 512
    assert entry.ip_address == "1" * 64


def test_query_is_newest_first_and_paginated(session_local: sessionmaker, company_id: str) -> None:
    for hours in range(5):
        _add_log(session_local, company_id, CUTOFF + timedelta(hours=hours), entity_id=f"e-{hours}")
    _add_log(session_local, "other-company", CUTOFF, entity_id="foreign")

    with session_local() as session:
        page = query_audit_logs(session, AuditLogFilters(company_id=company_id), page=2, limit=2)

    assert page.total == 5
    assert page.page == 2
    assert page.page_count == 3
    assert [log.entity_id for log in page.logs] == ["e-2", "e-1"]


def test_query_filters_combine(session_local: sessionmaker, company_id: str) -> None:
    _add_log(session_local, company_id, CUTOFF, user_id="u1", action="update")
    _add_log(session_local, company_id, CUTOFF + timedelta(days=1), user_id="u1", action="update")
    _add_log(session_local, company_id, CUTOFF, user_id="u2", action="update")

    with session_local() as session:
        filters = AuditLogFilters(
            company_id=company_id,
            user_id="u1",
            action="update",
            start_date=CUTOFF - timedelta(minutes=1),
            end_date=CUTOFF + timedelta(minutes=1),
        )
        page = query_audit_logs(session, filters)

    assert page.total == 1


def test_csv_export_quotes_fields_and_round_trips(session_local: sessionmaker, company_id: str) -> None:
    _add_log(session_local, company_id, CUTOFF, ip_address='10.0.0.1, "proxy"', entity_id="inv-1")
    _add_log(session_local, company_id, CUTOFF - timedelta(hours=1))

    with session_local() as session:
        logs = query_audit_logs(session, AuditLogFilters(company_id=company_id)).logs
        output = format_audit_logs_csv(logs)

    assert output == format_audit_logs_csv(logs)
    rows = list(csv.reader(io.StringIO(output)))
    assert tuple(rows[0]) == CSV_HEADER
    assert rows[1][5] == '10.0.0.1, "proxy"'
    assert rows[1][6] == str(int(CUTOFF.timestamp() * 1000))
    assert rows[2][1] == ""
    assert rows[2][5] == ""


def test_purge_deletes_strictly_older_entries(session_local: sessionmaker, company_id: str) -> None:
    _add_log(session_local, company_id, CUTOFF - timedelta(days=2))
    _add_log(session_local, company_id, CUTOFF - timedelta(seconds=1))
    kept_id = _add_log(session_local, company_id, CUTOFF)
    _add_log(session_local, "other-company", CUTOFF - timedelta(days=3))

    with session_local() as session:
        assert purge_audit_logs(session, CUTOFF, company_id=company_id, batch_size=1) == 2
        assert purge_audit_logs(session, CUTOFF, company_id=company_id, batch_size=1) == 0
        remaining = set(session.scalars(select(AuditLog.id)).all())

    assert kept_id in remaining
    assert len(remaining) == 2


def test_purge_without_company_is_global(session_local: sessionmaker, company_id: str) -> None:
    _add_log(session_local, company_id, CUTOFF - timedelta(days=2))
    _add_log(session_local, "other-company", CUTOFF - timedelta(days=2))

    with session_local() as session:
        assert purge_audit_logs(session, CUTOFF) == 2


def test_audit_log_endpoint_lists_and_exports(
    client: TestClient,
    session_local: sessionmaker,
    company_id: str,
    admin_headers: dict[str, str],
) -> None:
    _add_log(session_local, company_id, CUTOFF, ip_address="1.2.3.4, 5.6.7.8", entity_id="inv-9")

    listing = client.get("/api/v1/audit-logs", params={"entityId": "inv-9"}, headers=admin_headers)
    assert listing.status_code == 200
    body = listing.json()
    assert body["total"] == 1
    assert body["page"] == 1
    assert body["pageCount"] == 1
    assert body["logs"][0]["ipAddress"] == "1.2.3.4, 5.6.7.8"

    export = client.get("/api/v1/audit-logs", params={"entityId": "inv-9", "export": "csv"}, headers=admin_headers)
    assert export.status_code == 200
    assert export.headers["content-type"].startswith("text/csv")
    assert export.headers["content-disposition"].startswith('attachment; filename="audit-logs-')
    rows = list(csv.reader(io.StringIO(export.text)))
    assert rows[1][5] == "1.2.3.4, 5.6.7.8"


def test_audit_log_endpoint_rejects_bad_paging(client: TestClient, admin_headers: dict[str, str]) -> None:
    assert client.get("/api/v1/audit-logs", params={"page": 0}, headers=admin_headers).status_code == 400
    response = client.get("/api/v1/audit-logs", params={"limit": 501}, headers=admin_headers)
    assert response.status_code == 400
    assert "error" in response.json()
    assert client.get("/api/v1/audit-logs", params={"startDate": "yesterday"}, headers=admin_headers).status_code == 400


def test_retention_endpoint_requires_before_date_and_is_idempotent(
    client: TestClient,
    session_local: sessionmaker,
    company_id: str,
    admin_headers: dict[str, str],
) -> None:
    _add_log(session_local, company_id, CUTOFF - timedelta(days=1))
    _add_log(session_local, company_id, CUTOFF + timedelta(days=1))

    missing = client.delete("/api/v1/audit-logs", headers=admin_headers)
    assert missing.status_code == 400
    assert missing.json() == {"error": "beforeDate parameter is required"}

    first = client.delete("/api/v1/audit-logs", params={"beforeDate": CUTOFF.isoformat()}, headers=admin_headers)
    assert first.status_code == 200
    assert first.json()["deletedCount"] == 1
    second = client.delete("/api/v1/audit-logs", params={"beforeDate": CUTOFF.isoformat()}, headers=admin_headers)
    assert second.json()["deletedCount"] == 0


def test_audit_endpoints_enforce_roles(
    client: TestClient,
    make_user: Callable[..., User],
    auth_headers: Callable[[User], dict[str, str]],
) -> None:
    clerk = auth_headers(make_user("clerk"))
    auditor = auth_headers(make_user("auditor"))

    assert client.get("/api/v1/audit-logs", headers=clerk).status_code == 403
    assert client.get("/api/v1/audit-logs", headers=auditor).status_code == 200
    denied = client.delete("/api/v1/audit-logs", params={"beforeDate": "2026-01-01"}, headers=auditor)
    assert denied.status_code == 403
    assert client.get("/api/v1/audit-logs").status_code == 401


def test_entity_trail_and_summary(
    client: TestClient,
    session_local: sessionmaker,
    company_id: str,
    admin_headers: dict[str, str],
) -> None:
    _add_log(session_local, company_id, CUTOFF, entity_type="bill", entity_id="b-1", action="create", user_id="u1")
    _add_log(session_local, company_id, CUTOFF + timedelta(hours=1), entity_type="bill", entity_id="b-1", action="approve", user_id="u2")
    _add_log(session_local, company_id, CUTOFF, entity_type="bill", entity_id="b-2", action="create", user_id="u1")

    trail = client.get("/api/v1/audit-logs/entity/bill/b-1", headers=admin_headers)
    assert trail.status_code == 200
    assert [log["action"] for log in trail.json()["logs"]] == ["approve", "create"]

    summary = client.get("/api/v1/audit-logs/summary", headers=admin_headers).json()
    assert {"action": "create", "count": 2} in summary["actions"]
    assert {"userId": "u1", "action": "create", "count": 2} in summary["users"]
