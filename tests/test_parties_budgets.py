"""Customer, vendor and budget endpoint tests."""

from collections.abc import Callable
from datetime import datetime, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from ledgerdesk.models import Company, User
from ledgerdesk.services import budget_service


def test_customers_create_and_filter(client: TestClient, admin_headers: dict[str, str]) -> None:
    created = client.post(
        "/api/v1/customers",
        json={"name": "Wayne Enterprises", "email": "ap@wayne.test", "creditLimit": "5000"},
        headers=admin_headers,
    )
    assert created.status_code == 201
    body = created.json()
    assert body["paymentTerms"] == 30
    assert Decimal(body["creditLimit"]) == Decimal("5000")
    client.post("/api/v1/customers", json={"name": "Dormant Co", "isActive": False}, headers=admin_headers)

    active = client.get("/api/v1/customers", params={"isActive": "true"}, headers=admin_headers).json()
    assert [row["name"] for row in active["data"]] == ["Wayne Enterprises"]
    assert active["meta"] == {"limit": 100, "offset": 0}

    everyone = client.get("/api/v1/customers", headers=admin_headers).json()
    assert len(everyone["data"]) == 2


def test_vendors_create_and_list(client: TestClient, admin_headers: dict[str, str]) -> None:
    created = client.post(
        "/api/v1/vendors",
        json={"name": "Stark Supplies", "taxId": "12-345", "is1099Eligible": True},
        headers=admin_headers,
    )
    assert created.status_code == 201
    assert created.json()["is1099Eligible"] is True

    listing = client.get("/api/v1/vendors", params={"limit": 10}, headers=admin_headers).json()
    assert listing["data"][0]["taxId"] == "12-345"
    assert listing["meta"] == {"limit": 10, "offset": 0}


def test_lists_are_scoped_to_the_callers_company(
    client: TestClient,
    session_local: sessionmaker,
    make_user: Callable[..., User],
    auth_headers: Callable[[User], dict[str, str]],
    admin_headers: dict[str, str],
) -> None:
    client.post("/api/v1/customers", json={"name": "Acme Customer"}, headers=admin_headers)
    with session_local() as session:
        other = Company(name="Other Ltd", code="OTHER")
        session.add(other)
        session.commit()
        other_id = other.id
    outsider = auth_headers(make_user("clerk", email="clerk@other.test", company=other_id))

    assert client.get("/api/v1/customers", headers=outsider).json()["data"] == []
    assert client.get("/api/v1/customers", params={"companyId": "someone-else"}, headers=outsider).status_code == 403


def test_budget_create_with_line_items(client: TestClient, admin_headers: dict[str, str]) -> None:
    created = client.post(
        "/api/v1/budgets",
        json={
            "name": "Q3 Marketing",
            "period": "quarterly",
            "startDate": "2026-07-01",
            "endDate": "2026-09-30",
            "totalAllocated": "1000",
            "status": "active",
            "lineItems": [
                {"categoryId": "ads", "allocated": "600", "spent": "480"},
                {"categoryId": "events", "allocated": "400", "spent": "100", "alertThreshold": 50},
            ],
        },
        headers=admin_headers,
    )
    assert created.status_code == 201
    lines = {line["categoryId"]: line for line in created.json()["lineItems"]}
    assert lines["ads"]["alertTriggered"] is True
    assert lines["events"]["alertTriggered"] is False

    listing = client.get("/api/v1/budgets", params={"status": "active"}, headers=admin_headers).json()
    assert len(listing["data"]) == 1
    assert len(listing["data"][0]["lineItems"]) == 2
    assert client.get("/api/v1/budgets", params={"status": "closed"}, headers=admin_headers).json()["data"] == []


def test_budget_rejects_inverted_dates(client: TestClient, admin_headers: dict[str, str]) -> None:
    response = client.post(
        "/api/v1/budgets",
        json={"name": "Broken", "startDate": "2026-09-30", "endDate": "2026-07-01"},
        headers=admin_headers,
    )
    assert response.status_code == 400


def test_budget_dates_default_to_the_utc_day(
    client: TestClient,
    admin_headers: dict[str, str],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(budget_service, "utc_now", lambda: datetime(2026, 12, 31, 23, 30, tzinfo=timezone.utc))

    created = client.post("/api/v1/budgets", json={"name": "Year end"}, headers=admin_headers).json()

    assert created["startDate"] == "2026-12-31"
    assert created["endDate"] == "2026-12-31"
