"""Outbound webhook subscriptions, signed delivery and retry bookkeeping."""

from __future__ import annotations

import json
import logging
import secrets
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import httpx
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ledgerdesk.core.config import settings
from ledgerdesk.core.errors import NotFoundError, PersistenceError, ValidationError
from ledgerdesk.db import session as db_session
from ledgerdesk.models import Webhook, WebhookLog
from ledgerdesk.models.webhook import WEBHOOK_EVENTS
from ledgerdesk.repositories.filters import WebhookFilters
from ledgerdesk.repositories.webhooks import WebhookLogRepository, WebhookRepository
from ledgerdesk.schemas.webhook import WebhookCreate, WebhookUpdate
from ledgerdesk.services.signatures import sign_payload
from ledgerdesk.utils.time import utc_now

logger = logging.getLogger(__name__)

Sleep = Callable[[float], None]


@dataclass(frozen=True)
class DeliveryResult:
    success: bool
    response_code: int | None = None
    error: str | None = None


def retry_delay(attempt: int) -> float:
    """Exponential backoff for the ``attempt``-th retry (0-based), capped."""
    delay = settings.webhook_initial_delay_seconds * settings.webhook_backoff_multiplier**attempt
    return min(delay, settings.webhook_max_delay_seconds)


def validate_url(url: str) -> str:
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as exc:
        raise ValidationError("Invalid URL format") from exc
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise ValidationError("Invalid URL format")
    return url


def validate_events(events: list[str]) -> list[str]:
    unknown = [event for event in events if event not in WEBHOOK_EVENTS]
    if unknown:
        raise ValidationError(f"Unknown webhook event: {unknown[0]}")
    return list(dict.fromkeys(events))


def list_webhooks(db: Session, filters: WebhookFilters) -> list[Webhook]:
    return WebhookRepository(db).list(filters, limit=500)


def recent_logs(db: Session, company_id: str, *, limit: int = 50) -> list[WebhookLog]:
    return WebhookLogRepository(db).recent_for_company(company_id, limit=limit)


def get_webhook(db: Session, webhook_id: str, company_id: str) -> Webhook:
    webhook = WebhookRepository(db).get(webhook_id)
    if webhook is None or webhook.company_id != company_id:
        raise NotFoundError("Webhook not found")
    return webhook


def _commit(db: Session, action: str, company_id: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("[WEBHOOK] Failed to %s webhook for company_id=%s", action, company_id)
        raise PersistenceError(f"Failed to {action} webhook") from exc


def create_webhook(db: Session, payload: WebhookCreate, *, company_id: str) -> Webhook:
    """Create a subscription with a freshly generated signing secret."""
    webhook = Webhook(
        company_id=company_id,
        url=validate_url(payload.url),
        events=validate_events(payload.events),
        secret=secrets.token_hex(32),
        description=payload.description,
        status="active" if payload.active else "paused",
        failure_count=0,
    )
    WebhookRepository(db).insert(webhook)
    _commit(db, "create", company_id)
    db.refresh(webhook)
    return webhook


def update_webhook(db: Session, payload: WebhookUpdate, *, company_id: str) -> Webhook:
    webhook = get_webhook(db, payload.id, company_id)
    changes: dict[str, Any] = {"updated_at": utc_now()}
    if payload.url is not None:
        changes["url"] = validate_url(payload.url)
    if payload.events is not None:
        changes["events"] = validate_events(payload.events)
    if "description" in payload.model_fields_set:
        changes["description"] = payload.description
    if payload.status is not None:
        changes["status"] = payload.status
    WebhookRepository(db).update(webhook, changes)
    _commit(db, "update", company_id)
    db.refresh(webhook)
    return webhook


def delete_webhook(db: Session, webhook_id: str, *, company_id: str) -> dict[str, Any]:
    """Remove a subscription and its delivery logs; returns what was removed."""
    webhook = get_webhook(db, webhook_id, company_id)
    removed = {"url": webhook.url, "events": list(webhook.events or [])}
    WebhookRepository(db).delete(webhook)
    _commit(db, "delete", company_id)
    return removed


def _post(client: httpx.Client, webhook: Webhook, log: WebhookLog, headers: dict[str, str] | None = None) -> httpx.Response:
    return client.post(
        webhook.url,
        content=log.payload or "",
        headers={
            "Content-Type": "application/json",
            "X-Webhook-Signature": sign_payload(log.payload or "", webhook.secret),
            "X-Webhook-Event": log.event,
            "X-Webhook-Delivery": log.id,
            **(headers or {}),
        },
    )


def deliver(db: Session, client: httpx.Client, webhook: Webhook, log: WebhookLog, *, sleep: Sleep = time.sleep) -> DeliveryResult:
    """POST one stored payload, retrying server errors and transport failures.

    Client errors (4xx) end the attempt immediately. Only ``log`` is updated,
    never other logs of the same subscription.
    """
    retry_count = 0
    response_code: int | None = None
    last_error: str | None = None
    while True:
        try:
            response = _post(client, webhook, log)
        except httpx.HTTPError as exc:
            response_code = None
            last_error = str(exc) or exc.__class__.__name__
        else:
            response_code = response.status_code
            if response.is_success:
                now = utc_now()
                log.status = "delivered"
                log.response_code = response_code
                log.retry_count = retry_count
                log.error_message = None
                webhook.failure_count = 0
                webhook.status = "active"
                webhook.last_triggered = now
                webhook.updated_at = now
                db.commit()
                logger.info("[WEBHOOK] Delivered %s to webhook_id=%s (retries=%s)", log.event, webhook.id, retry_count)
                return DeliveryResult(success=True, response_code=response_code)
            last_error = f"{'Client' if response.is_client_error else 'Server'} error: {response.reason_phrase}"
            if response.is_client_error:
                break
        if retry_count >= settings.webhook_max_retries:
            break
        sleep(retry_delay(retry_count))
        retry_count += 1

    now = utc_now()
    log.status = "failed"
    log.response_code = response_code
    log.retry_count = retry_count
    log.error_message = last_error
    webhook.failure_count = (webhook.failure_count or 0) + 1
    webhook.last_failed_at = now
    webhook.status = "failed" if retry_count >= settings.webhook_max_retries else "active"
    webhook.updated_at = now
    db.commit()
    logger.warning("[WEBHOOK] Delivery of %s to webhook_id=%s failed: %s", log.event, webhook.id, last_error)
    return DeliveryResult(success=False, response_code=response_code, error=last_error)


def dispatch_event(
    company_id: str,
    event: str,
    data: dict[str, Any],
    *,
    client: httpx.Client | None = None,
    sleep: Sleep = time.sleep,
) -> int:
    """Fan ``event`` out to every active subscription of the company.

    Runs as a background task with its own session; errors are logged and
    never raised. Returns the number of subscriptions attempted.
    """
    owns_client = client is None
    http = client or httpx.Client(timeout=settings.webhook_timeout_seconds)
    db = db_session.SessionLocal()
    attempted = 0
    try:
        for webhook in WebhookRepository(db).subscribers(company_id, event):
            payload = json.dumps({"event": event, "timestamp": utc_now().isoformat(), "data": data}, default=str)
            log = WebhookLog(webhook_id=webhook.id, event=event, payload=payload, status="pending", retry_count=0)
            WebhookLogRepository(db).insert(log)
            db.commit()
            attempted += 1
            deliver(db, http, webhook, log, sleep=sleep)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("[WEBHOOK] Failed to dispatch %s for company_id=%s", event, company_id)
    finally:
        db.close()
        if owns_client:
            http.close()
    return attempted


def retry_delivery(
    db: Session,
    *,
    company_id: str,
    webhook_id: str,
    log_id: str,
    client: httpx.Client | None = None,
) -> DeliveryResult:
    """Re-send one stored delivery once, outside the backoff loop."""
    webhook = get_webhook(db, webhook_id, company_id)
    log = WebhookLogRepository(db).get(log_id)
    if log is None or log.webhook_id != webhook.id:
        raise NotFoundError("Log not found")
    if not log.payload:
        raise ValidationError("No payload found in log")

    owns_client = client is None
    http = client or httpx.Client(timeout=settings.webhook_timeout_seconds)
    try:
        response = _post(http, webhook, log, {"X-Webhook-Retry": str(log.retry_count + 1)})
    except httpx.HTTPError as exc:
        log.status = "failed"
        log.error_message = str(exc) or exc.__class__.__name__
        log.retry_count += 1
        db.commit()
        return DeliveryResult(success=False, error=log.error_message)
    finally:
        if owns_client:
            http.close()

    log.status = "delivered" if response.is_success else "failed"
    log.response_code = response.status_code
    log.retry_count += 1
    if response.is_success:
        now = utc_now()
        webhook.failure_count = 0
        webhook.status = "active"
        webhook.last_triggered = now
        webhook.updated_at = now
    db.commit()
    return DeliveryResult(success=response.is_success, response_code=response.status_code)
