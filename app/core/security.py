import hashlib
import hmac
import time
from typing import List, Optional, Tuple, Union

DEFAULT_TOLERANCE_SECONDS = 300
SIGNATURE_SCHEME = "v1"


class SignatureVerificationError(ValueError):
    pass


def _as_bytes(payload: Union[bytes, str]) -> bytes:
    if isinstance(payload, str):
        return payload.encode("utf-8")
    return payload


def compute_signature(payload: Union[bytes, str], timestamp: int, secret: str) -> str:
    signed_payload = f"{timestamp}.".encode("utf-8") + _as_bytes(payload)
    return hmac.new(
        secret.encode("utf-8"),
        signed_payload,
        hashlib.sha256,
    ).hexdigest()


def build_stripe_signature(payload: Union[bytes, str], secret: str, timestamp: Optional[int] = None) -> str:
    """
    Produces a ``stripe-signature`` header value for the given body.
    """
    if timestamp is None:
        timestamp = int(time.time())
    signature = compute_signature(payload, timestamp, secret)
    return f"t={timestamp},{SIGNATURE_SCHEME}={signature}"


def parse_signature_header(header: str) -> Tuple[int, List[str]]:
    timestamp = None
    signatures = []
    for item in header.split(","):
        key, sep, value = item.strip().partition("=")
        if not sep:
            continue
        if key == "t":
            try:
                timestamp = int(value)
            except ValueError:
                raise SignatureVerificationError("Invalid timestamp in signature header")
        elif key == SIGNATURE_SCHEME:
            signatures.append(value)

    if timestamp is None:
        raise SignatureVerificationError("Signature header has no timestamp")
    if not signatures:
        raise SignatureVerificationError(f"Signature header has no {SIGNATURE_SCHEME} signature")
    return timestamp, signatures


def verify_stripe_signature(
    payload: Union[bytes, str],
    header: Optional[str],
    secret: str,
    tolerance: int = DEFAULT_TOLERANCE_SECONDS,
    now: Optional[float] = None,
) -> int:
    """
    Verifies a Stripe webhook signature header against the raw request body.

    The header looks like ``t=1700000000,v1=<hex>``; the expected signature is
    HMAC-SHA256 of ``"<t>.<body>"`` keyed with the endpoint secret. Any ``v1``
    entry may match. Returns the signed timestamp.
    """
    if not header:
        raise SignatureVerificationError("Missing signature header")

    timestamp, signatures = parse_signature_header(header)
    expected = compute_signature(payload, timestamp, secret)

    if not any(hmac.compare_digest(expected, candidate) for candidate in signatures):
        raise SignatureVerificationError("No signature matches the expected signature for the payload")

    if tolerance > 0:
        current = time.time() if now is None else now
        if abs(current - timestamp) > tolerance:
            raise SignatureVerificationError("Timestamp outside the tolerance zone")

    return timestamp
