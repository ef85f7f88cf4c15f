"""
rynko – Python SDK for the Rynko document generation API.

Import path convention::

    from rynko import Rynko, RynkoError
    from rynko.webhooks import verify_webhook_signature
    from rynko.resilience.retry import RetryPolicy
"""

from rynko._version import __version__
from rynko.client import Rynko, create_client
from rynko.config import ClientSettings, ConfigError, MissingRequiredSettingError
from rynko.kernel.errors import (
    ApiError,
    JobTimeoutError,
    NetworkError,
    RequestTimeoutError,
    RetryExhaustedError,
    RynkoError,
    UnknownError,
    ValidationError,
    WebhookSignatureError,
)
from rynko.resilience.retry import RetryPolicy
from rynko.resources import Page, PaginationMeta
from rynko.webhooks import (
    WebhookEvent,
    WebhookEventType,
    compute_signature,
    parse_signature_header,
    verify_webhook_signature,
)

__all__ = [
    "ApiError",
    "ClientSettings",
    "ConfigError",
    "JobTimeoutError",
    "MissingRequiredSettingError",
    "NetworkError",
    "Page",
    "PaginationMeta",
    "RequestTimeoutError",
    "RetryExhaustedError",
    "RetryPolicy",
    "Rynko",
    "RynkoError",
    "UnknownError",
    "ValidationError",
    "WebhookEvent",
    "WebhookEventType",
    "WebhookSignatureError",
    "__version__",
    "compute_signature",
    "create_client",
    "parse_signature_header",
    "verify_webhook_signature",
]
