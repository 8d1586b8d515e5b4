"""HMAC webhook signature tests."""

import hashlib
import hmac

from ledgerdesk.services.signatures import sign_payload, verify_signature

SECRET = "whsec_test"
PAYLOAD = '{"event":"invoice.paid","data":{"id":"inv-1"}}'


def _flip_bit(value: str, index: int) -> str:
    raw = bytearray(value.encode("utf-8"))
    raw[index] ^= 0x01
    return raw.decode("utf-8")


def test_sign_matches_stdlib_hmac() -> None:
    expected = hmac.new(SECRET.encode(), PAYLOAD.encode(), hashlib.sha256).hexdigest()
    assert sign_payload(PAYLOAD, SECRET) == expected
    assert sign_payload(PAYLOAD.encode(), SECRET.encode()) == expected


def test_valid_signature_verifies() -> None:
    signature = sign_payload(PAYLOAD, SECRET)
    assert verify_signature(PAYLOAD, signature, SECRET) is True
    assert verify_signature(PAYLOAD.encode(), signature.upper(), SECRET) is True


def test_any_single_bit_change_in_payload_fails() -> None:
    signature = sign_payload(PAYLOAD, SECRET)
    for index in range(len(PAYLOAD)):
        assert verify_signature(_flip_bit(PAYLOAD, index), signature, SECRET) is False


def test_any_single_bit_change_in_signature_fails() -> None:
    signature = sign_payload(PAYLOAD, SECRET)
    for index in range(len(signature)):
        assert verify_signature(PAYLOAD, _flip_bit(signature, index), SECRET) is False


def test_malformed_signatures_return_false_without_raising() -> None:
    signature = sign_payload(PAYLOAD, SECRET)
    assert verify_signature(PAYLOAD, signature[:-1], SECRET) is False
    assert verify_signature(PAYLOAD, signature + "0", SECRET) is False
    assert verify_signature(PAYLOAD, "", SECRET) is False
    assert verify_signature(PAYLOAD, None, SECRET) is False
    assert verify_signature(PAYLOAD, 12345, SECRET) is False
    assert verify_signature(PAYLOAD, "é" * len(signature), SECRET) is False


def test_unknown_algorithm_returns_false() -> None:
    signature = sign_payload(PAYLOAD, SECRET)
    assert verify_signature(PAYLOAD, signature, SECRET, algorithm="not-a-hash") is False


def test_other_algorithms_are_supported() -> None:
    signature = sign_payload(PAYLOAD, SECRET, algorithm="sha512")
    assert len(signature) == 128
    assert verify_signature(PAYLOAD, signature, SECRET, algorithm="sha512") is True
    assert verify_signature(PAYLOAD, signature, SECRET) is False
