import hashlib
import hmac

import pytest

from app.core.security import (
    SignatureVerificationError,
    build_stripe_signature,
    parse_signature_header,
    verify_stripe_signature,
)

SECRET = "whsec_test"
PAYLOAD = b'{"type":"checkout.session.completed"}'
NOW = 1_700_000_000


def test_signature_matches_stripe_scheme():
    header = build_stripe_signature(PAYLOAD, SECRET, timestamp=NOW)
    expected = hmac.new(SECRET.encode(), f"{NOW}.".encode() + PAYLOAD, hashlib.sha256).hexdigest()

    assert header == f"t={NOW},v1={expected}"
    assert verify_stripe_signature(PAYLOAD, header, SECRET, now=NOW) == NOW


def test_any_v1_signature_may_match():
    good = build_stripe_signature(PAYLOAD, SECRET, timestamp=NOW).split("v1=")[1]
    header = f"t={NOW},v1={'0' * 64},v1={good},v0=legacy"

    assert verify_stripe_signature(PAYLOAD, header, SECRET, now=NOW) == NOW


def test_str_and_bytes_payloads_agree():
    header = build_stripe_signature(PAYLOAD.decode(), SECRET, timestamp=NOW)

    verify_stripe_signature(PAYLOAD, header, SECRET, now=NOW)


@pytest.mark.parametrize(
    ("header", "message"),
    [
        (None, "Missing"),
        ("", "Missing"),
        ("v1=abc", "no timestamp"),
        ("t=abc,v1=abc", "Invalid timestamp"),
        (f"t={NOW}", "no v1"),
        (f"t={NOW},v1=deadbeef", "No signature matches"),
    ],
)
def test_rejects_bad_headers(header, message):
    with pytest.raises(SignatureVerificationError, match=message):
        verify_stripe_signature(PAYLOAD, header, SECRET, now=NOW)


def test_rejects_timestamp_outside_tolerance():
    header = build_stripe_signature(PAYLOAD, SECRET, timestamp=NOW)

    with pytest.raises(SignatureVerificationError, match="tolerance"):
        verify_stripe_signature(PAYLOAD, header, SECRET, tolerance=300, now=NOW + 301)

    assert verify_stripe_signature(PAYLOAD, header, SECRET, tolerance=0, now=NOW + 10_000) == NOW


def test_parse_signature_header_ignores_unknown_parts():
    assert parse_signature_header(f" t={NOW} , v1=aa, junk ,v1=bb") == (NOW, ["aa", "bb"])
