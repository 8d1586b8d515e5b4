"""HMAC signing and constant-time verification for webhook payloads."""

from __future__ import annotations

import hmac


def _as_bytes(value: str | bytes) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else value


def sign_payload(payload: str | bytes, secret: str | bytes, algorithm: str = "sha256") -> str:
    """Return the lowercase hex HMAC digest of ``payload``."""
    return hmac.new(_as_bytes(secret), _as_bytes(payload), algorithm).hexdigest()


def verify_signature(payload: str | bytes, signature: object, secret: str | bytes, algorithm: str = "sha256") -> bool:
    """Compare ``signature`` against the expected digest without leaking timing.

    Any malformed input yields ``False``; this function never raises.
    """
    if not isinstance(signature, str) or not signature.isascii():
        return False
    try:
        expected = sign_payload(payload, secret, algorithm)
    except (ValueError, TypeError):
        return False
    if len(signature) != len(expected):
        return False
    return hmac.compare_digest(signature.lower(), expected)
