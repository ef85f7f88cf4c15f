"""Webhooks – signature verification and event types."""
from rynko.webhooks.events import (
    BatchWebhookData,
    DocumentWebhookData,
    MetadataValue,
    WebhookEvent,
    WebhookEventType,
)
from rynko.webhooks.signature import (
    DEFAULT_TOLERANCE_SECONDS,
    SIGNATURE_HEADER,
    SignatureHeader,
    compute_signature,
    parse_signature_header,
    verify_webhook_signature,
)

__all__ = [
    "DEFAULT_TOLERANCE_SECONDS",
    "SIGNATURE_HEADER",
    "BatchWebhookData",
    "DocumentWebhookData",
    "MetadataValue",
    "SignatureHeader",
    "WebhookEvent",
    "WebhookEventType",
    "compute_signature",
    "parse_signature_header",
    "verify_webhook_signature",
]
