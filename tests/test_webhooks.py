"""Outbound webhook subscription and delivery tests."""

import json
from collections.abc import Callable

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from ledgerdesk.models import Webhook, WebhookLog
from ledgerdesk.services import webhook_service
from ledgerdesk.services.signatures import verify_signature


def _subscribe(session_local: sessionmaker, company_id: str, events: list[str], status: str = "active") -> str:
    with session_local() as session:
        webhook = Webhook(
            company_id=company_id,
            url="https://hooks.example.test/ledger",
            events=events,
            secret="hook-secret",
            status=status,
        )
        session.add(webhook)
        session.commit()
        return webhook.id


def _client_returning(statuses: list[int], seen: list[httpx.Request]) -> httpx.Client:
    responses = iter(statuses)

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(next(responses))

    return httpx.Client(transport=httpx.MockTransport(handler))


@pytest.fixture
def no_sleep() -> Callable[[float], None]:
    delays: list[float] = []

    def _sleep(seconds: float) -> None:
        delays.append(seconds)

    _sleep.delays = delays  # type: ignore[attr-defined]
    return _sleep


def test_dispatch_signs_and_delivers(session_local: sessionmaker, company_id: str, no_sleep) -> None:
    webhook_id = _subscribe(session_local, company_id, ["invoice.created"])
    _subscribe(session_local, company_id, ["bill.created"])
    _subscribe(session_local, company_id, ["invoice.created"], status="paused")
    seen: list[httpx.Request] = []

    attempted = webhook_service.dispatch_event(
        company_id,
        "invoice.created",
        {"id": "inv-1"},
        client=_client_returning([200], seen),
        sleep=no_sleep,
    )

    assert attempted == 1
    request = seen[0]
    body = request.content
    assert json.loads(body)["data"] == {"id": "inv-1"}
    assert request.headers["X-Webhook-Event"] == "invoice.created"
    assert verify_signature(body, request.headers["X-Webhook-Signature"], "hook-secret")
    with session_local() as session:
        webhook = session.get(Webhook, webhook_id)
        log = session.scalar(select(WebhookLog).where(WebhookLog.webhook_id == webhook_id))
        assert log.status == "delivered"
        assert log.response_code == 200
        assert request.headers["X-Webhook-Delivery"] == log.id
        assert webhook.last_triggered is not None
        assert webhook.failure_count == 0


def test_server_errors_are_retried_with_backoff(session_local: sessionmaker, company_id: str, no_sleep) -> None:
    webhook_id = _subscribe(session_local, company_id, ["bill.paid"])
    seen: list[httpx.Request] = []

    webhook_service.dispatch_event(company_id, "bill.paid", {}, client=_client_returning([500, 502, 200], seen), sleep=no_sleep)

    assert len(seen) == 3
    assert no_sleep.delays == [1, 2]
    with session_local() as session:
        log = session.scalar(select(WebhookLog).where(WebhookLog.webhook_id == webhook_id))
        assert log.status == "delivered"
        assert log.retry_count == 2


def test_exhausted_retries_mark_webhook_failed(session_local: sessionmaker, company_id: str, no_sleep) -> None:
    webhook_id = _subscribe(session_local, company_id, ["bill.paid"])
    seen: list[httpx.Request] = []

    webhook_service.dispatch_event(company_id, "bill.paid", {}, client=_client_returning([503] * 4, seen), sleep=no_sleep)

    assert len(seen) == 4
    assert no_sleep.delays == [1, 2, 4]
    with session_local() as session:
        webhook = session.get(Webhook, webhook_id)
        log = session.scalar(select(WebhookLog).where(WebhookLog.webhook_id == webhook_id))
        assert webhook.status == "failed"
        assert webhook.failure_count == 1
        assert webhook.last_failed_at is not None
        assert log.status == "failed"
        assert log.retry_count == 3
        assert log.response_code == 503


def test_client_errors_are_not_retried(session_local: sessionmaker, company_id: str, no_sleep) -> None:
    webhook_id = _subscribe(session_local, company_id, ["bill.paid"])
    seen: list[httpx.Request] = []

    webhook_service.dispatch_event(company_id, "bill.paid", {}, client=_client_returning([404, 200], seen), sleep=no_sleep)

    assert len(seen) == 1
    assert no_sleep.delays == []
    with session_local() as session:
        webhook = session.get(Webhook, webhook_id)
        log = session.scalar(select(WebhookLog).where(WebhookLog.webhook_id == webhook_id))
        assert log.status == "failed"
        assert log.error_message.startswith("Client error")
        assert webhook.failure_count == 1
        assert webhook.status == "active"


def test_transport_errors_are_retried(session_local: sessionmaker, company_id: str, no_sleep) -> None:
    _subscribe(session_local, company_id, ["user.created"])
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if len(calls) == 1:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(204)

    client = httpx.Client(transport=httpx.MockTransport(handler))
    webhook_service.dispatch_event(company_id, "user.created", {}, client=client, sleep=no_sleep)

    assert len(calls) == 2
    with session_local() as session:
        assert session.scalar(select(WebhookLog.status)) == "delivered"


def test_subscription_management_endpoints(client: TestClient, admin_headers: dict[str, str]) -> None:
    created = client.post(
        "/api/v1/webhooks",
        json={"url": "https://hooks.example.test/a", "events": ["invoice.created", "invoice.paid"], "description": "ERP"},
        headers=admin_headers,
    )
    assert created.status_code == 201
    webhook = created.json()
    assert len(webhook["secret"]) == 64
    assert webhook["status"] == "active"

    listing = client.get("/api/v1/webhooks", params={"includeLogs": "true"}, headers=admin_headers).json()
    assert [hook["id"] for hook in listing["webhooks"]] == [webhook["id"]]
    assert "secret" not in listing["webhooks"][0]
    assert listing["recentLogs"] == []

    updated = client.put("/api/v1/webhooks", json={"id": webhook["id"], "status": "paused"}, headers=admin_headers)
    assert updated.status_code == 200
    assert updated.json()["status"] == "paused"
    assert client.put("/api/v1/webhooks", json={"id": "missing", "status": "paused"}, headers=admin_headers).status_code == 404

    deleted = client.delete("/api/v1/webhooks", params={"id": webhook["id"]}, headers=admin_headers)
    assert deleted.json() == {"deleted": True}
    assert client.get("/api/v1/webhooks", headers=admin_headers).json()["webhooks"] == []


def test_subscription_validation(client: TestClient, admin_headers: dict[str, str]) -> None:
    bad_url = client.post("/api/v1/webhooks", json={"url": "ftp://files.test", "events": ["invoice.paid"]}, headers=admin_headers)
    assert bad_url.status_code == 400
    assert bad_url.json() == {"error": "Invalid URL format"}
    no_events = client.post("/api/v1/webhooks", json={"url": "https://ok.test", "events": []}, headers=admin_headers)
    assert no_events.status_code == 400
    unknown = client.post("/api/v1/webhooks", json={"url": "https://ok.test", "events": ["nope"]}, headers=admin_headers)
    assert unknown.status_code == 400


def test_retry_endpoint_redelivers_stored_payload(
    client: TestClient,
    session_local: sessionmaker,
    company_id: str,
    admin_headers: dict[str, str],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    webhook_id = _subscribe(session_local, company_id, ["invoice.paid"])
    with session_local() as session:
        log = WebhookLog(webhook_id=webhook_id, event="invoice.paid", payload='{"event":"invoice.paid"}', status="failed", retry_count=3)
        session.add(log)
        session.commit()
        log_id = log.id

    seen: list[httpx.Request] = []
    original_client = httpx.Client
    monkeypatch.setattr(
        webhook_service.httpx,
        "Client",
        lambda **kwargs: original_client(transport=httpx.MockTransport(lambda request: seen.append(request) or httpx.Response(200))),
    )

    response = client.patch("/api/v1/webhooks", json={"webhookId": webhook_id, "logId": log_id}, headers=admin_headers)

    assert response.status_code == 200
    assert response.json() == {"success": True, "responseCode": 200}
    assert seen[0].headers["X-Webhook-Retry"] == "4"
    with session_local() as session:
        assert session.get(WebhookLog, log_id).status == "delivered"
