"""Webhooks – HMAC-SHA256 signature verification for inbound deliveries.

Deliveries carry a header of the form ``t=<unix-seconds>,v1=<hex>`` where
``v1`` is the HMAC-SHA256 of ``"<t>.<raw body>"`` keyed by the subscription
secret.  Verification checks the timestamp window first, then compares
signatures in constant time, then decodes the body.
"""
from __future__ import annotations

import dataclasses
import hashlib
import hmac

from rynko.kernel.errors import WebhookSignatureError
from rynko.kernel.time import Clock, SystemClock
from rynko.webhooks.events import WebhookEvent

SIGNATURE_HEADER = "X-Rynko-Signature"
DEFAULT_TOLERANCE_SECONDS = 300


@dataclasses.dataclass(frozen=True)
class SignatureHeader:
    timestamp: int
    signature: str


def parse_signature_header(header: str) -> SignatureHeader:
    """Split a ``t=…,v1=…`` header into its parts.

    Unknown keys are ignored.  Raises :class:`WebhookSignatureError` when
    ``t`` or ``v1`` is missing or ``t`` is not an integer.
    """
    timestamp: int | None = None
    signature: str | None = None

    for part in (header or "").split(","):
        key, sep, value = part.strip().partition("=")
        if not sep:
            continue
        if key == "t":
            try:
                timestamp = int(value)
            except ValueError:
                timestamp = None
        elif key == "v1":
            signature = value or None

    if timestamp is None or signature is None:
        raise WebhookSignatureError("Invalid signature header format")
    return SignatureHeader(timestamp=timestamp, signature=signature)


def compute_signature(timestamp: int, payload: str | bytes, secret: str) -> str:
    """Hex HMAC-SHA256 of ``"<timestamp>.<payload>"`` keyed by *secret*."""
    body = payload.encode("utf-8") if isinstance(payload, str) else payload
    signed = f"{timestamp}.".encode() + body
    return hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()


def _signatures_match(claimed: str, expected: str) -> bool:
    try:
        claimed_bytes = bytes.fromhex(claimed)
    except ValueError:
        return False
    expected_bytes = bytes.fromhex(expected)
    if len(claimed_bytes) != len(expected_bytes):
        return False
    return hmac.compare_digest(claimed_bytes, expected_bytes)


def verify_webhook_signature(
    payload: str | bytes,
    signature: str,
    secret: str,
    tolerance: int = DEFAULT_TOLERANCE_SECONDS,
    *,
    clock: Clock | None = None,
) -> WebhookEvent:
    """Verify a delivery and return its parsed event.

    Args:
        payload: Raw request body, exactly as received.
        signature: Value of the ``X-Rynko-Signature`` header.
        secret: Secret of the webhook subscription.
        tolerance: Allowed distance in seconds between the signed timestamp
            and now, in either direction.
        clock: Time source, for tests.

    Raises:
        WebhookSignatureError: On any failed check; reject the request.
    """
    header = parse_signature_header(signature)

    now = int((clock or SystemClock()).timestamp())
    if abs(now - header.timestamp) > tolerance:
        raise WebhookSignatureError("Webhook timestamp outside tolerance window")

    expected = compute_signature(header.timestamp, payload, secret)
    if not _signatures_match(header.signature, expected):
        raise WebhookSignatureError("Invalid signature")

    try:
        return WebhookEvent.from_json(payload)
    except (ValueError, TypeError) as exc:
        raise WebhookSignatureError("Invalid webhook payload", cause=exc) from exc


__all__ = [
    "DEFAULT_TOLERANCE_SECONDS",
    "SIGNATURE_HEADER",
    "SignatureHeader",
    "compute_signature",
    "parse_signature_header",
    "verify_webhook_signature",
]
