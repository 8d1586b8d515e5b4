"""Integration catalogue, sync and inbound webhook tests."""

import asyncio

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from ledgerdesk.api.v1.endpoints import integrations as integrations_endpoint
from ledgerdesk.core.config import settings
from ledgerdesk.models import AuditLog, Customer
from ledgerdesk.services.signatures import sign_payload


def test_catalogue_lists_connection_state(client: TestClient, admin_headers: dict[str, str]) -> None:
    response = client.get("/api/v1/integrations", headers=admin_headers)
    assert response.status_code == 200
    integrations = {item["id"]: item for item in response.json()["integrations"]}
    assert set(integrations) == {"quickbooks", "xero", "stripe", "paypal"}
    assert integrations["quickbooks"]["status"] == "connected"
    assert integrations["quickbooks"]["lastSync"] is not None
    assert integrations["xero"]["status"] == "disconnected"
    assert integrations["xero"]["lastSync"] is None
    assert "payments" in integrations["stripe"]["features"]


def test_configure_acknowledges_known_integrations(client: TestClient, admin_headers: dict[str, str]) -> None:
    response = client.post(
        "/api/v1/integrations",
        json={"integration": "xero", "credentials": {"apiKey": "k-123"}},
        headers=admin_headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["integration"]["id"] == "xero"
    assert body["integration"]["status"] == "configured"
    assert "k-123" not in response.text

    unknown = client.post("/api/v1/integrations", json={"integration": "sage"}, headers=admin_headers)
    assert unknown.status_code == 400


def test_quickbooks_sync_counts_company_invoices(
    client: TestClient,
    session_local: sessionmaker,
    company_id: str,
    admin_headers: dict[str, str],
) -> None:
    with session_local() as session:
        customer = Customer(company_id=company_id, name="Globex")
        session.add(customer)
        session.commit()
        customer_id = customer.id
    for number in ("INV-1", "INV-2"):
        client.post(
            "/api/v1/invoices",
            json={
                "invoiceNumber": number,
                "customerId": customer_id,
                "issueDate": "2026-05-01",
                "dueDate": "2026-05-31",
                "subtotal": "10",
            },
            headers=admin_headers,
        )

    outbound = client.put(
        "/api/v1/integrations",
        json={"integration": "quickbooks", "direction": "outbound", "entityType": "invoice", "filters": {"companyId": company_id}},
        headers=admin_headers,
    )
    assert outbound.status_code == 200
    assert outbound.json()["synced"] == 2

    inbound = client.put(
        "/api/v1/integrations",
        json={"integration": "quickbooks", "direction": "inbound", "entityType": "invoice"},
        headers=admin_headers,
    )
    assert inbound.json()["imported"] == 0

    unsupported = client.put(
        "/api/v1/integrations",
        json={"integration": "stripe", "direction": "outbound"},
        headers=admin_headers,
    )
    assert unsupported.status_code == 400
    assert unsupported.json() == {"error": "Unknown integration or direction"}


def test_inbound_webhook_signature_is_verified(
    client: TestClient,
    session_local: sessionmaker,
    company_id: str,
) -> None:
    body = b'{"type":"payment.succeeded","amount":4200}'
    signature = sign_payload(body, settings.integration_webhook_secret)

    rejected = client.post(
        "/api/v1/integrations/stripe/webhook",
        content=body,
        headers={"X-Webhook-Signature": "0" * len(signature)},
    )
    assert rejected.status_code == 401
    assert rejected.json() == {"error": "Invalid webhook signature"}
    assert client.post("/api/v1/integrations/stripe/webhook", content=body).status_code == 401

    accepted = client.post(
        "/api/v1/integrations/stripe/webhook",
        params={"companyId": company_id},
        content=body,
        headers={"X-Webhook-Signature": signature},
    )
    assert accepted.status_code == 200
    assert accepted.json() == {"received": True}

    with session_local() as session:
        entry = session.scalar(select(AuditLog).where(AuditLog.action == "receive"))
    assert entry is not None
    assert entry.entity_type == "webhook"
    assert entry.entity_id == "stripe"


def test_inbound_webhook_audit_runs_off_the_event_loop(
    client: TestClient,
    company_id: str,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    calls: list[bool] = []

    def fake_record_action(db, **fields) -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            calls.append(True)
        else:
            calls.append(False)

    monkeypatch.setattr(integrations_endpoint, "record_action", fake_record_action)
    body = b'{"type":"invoice.paid"}'

    response = client.post(
        "/api/v1/integrations/quickbooks/webhook",
        params={"companyId": company_id},
        content=body,
        headers={"X-Webhook-Signature": sign_payload(body, settings.integration_webhook_secret)},
    )

    assert response.status_code == 200
    assert calls == [True]
