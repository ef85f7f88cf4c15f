"""Webhook verification errors."""

from __future__ import annotations

from rynko.kernel.errors.base import BaseError


class WebhookSignatureError(BaseError):
    """A webhook delivery failed verification and must be rejected.

    Raised for every rejection path; the message says which check failed but
    callers should treat them all alike.
    """

    default_code = "WebhookSignatureError"


__all__ = ["WebhookSignatureError"]
