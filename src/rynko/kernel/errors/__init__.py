"""Kernel error hierarchy: public re-export surface.

Hierarchy::

    BaseError
    ├── RynkoError               (transport.py)
    │   ├── RequestTimeoutError  code "TimeoutError", 408
    │   ├── NetworkError         code "NetworkError", 0
    │   ├── UnknownError         code "UnknownError", 0
    │   ├── ApiError             code from server, HTTP status
    │   ├── RetryExhaustedError  code "RetryExhausted", 0
    │   └── JobTimeoutError      code "JobTimeout", 0
    ├── WebhookSignatureError    (webhooks.py)
    └── ValidationError          (domain.py)
"""

from rynko.kernel.errors.base import BaseError
from rynko.kernel.errors.domain import ValidationError
from rynko.kernel.errors.transport import (
    ApiError,
    JobTimeoutError,
    NetworkError,
    RequestTimeoutError,
    RetryExhaustedError,
    RynkoError,
    UnknownError,
)
from rynko.kernel.errors.webhooks import WebhookSignatureError

__all__ = [
    "ApiError",
    "BaseError",
    "JobTimeoutError",
    "NetworkError",
    "RequestTimeoutError",
    "RetryExhaustedError",
    "RynkoError",
    "UnknownError",
    "ValidationError",
    "WebhookSignatureError",
]
