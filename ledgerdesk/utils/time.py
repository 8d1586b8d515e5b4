"""UTC time helpers shared by models, filters and exports."""

from __future__ import annotations

from datetime import date, datetime, timezone

from ledgerdesk.core.errors import ValidationError


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Return an aware UTC datetime; naive values are taken to be UTC already.

    SQLite hands back naive timestamps even for ``DateTime(timezone=True)``
    columns, so every comparison and export goes through this helper.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def epoch_millis(value: datetime) -> int:
    return int(as_utc(value).timestamp() * 1000)


def parse_datetime_param(value: str | None, name: str) -> datetime | None:
    """Parse an ISO date or datetime query parameter into aware UTC."""
    if value is None or not value.strip():
        return None
    raw = value.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError as exc:
        raise ValidationError(f"Invalid {name} parameter") from exc
    return as_utc(parsed)


def parse_date_param(value: str | None, name: str) -> date | None:
    """Parse an ISO date query parameter; datetimes are truncated to their date."""
    parsed = parse_datetime_param(value, name)
    return parsed.date() if parsed is not None else None

