"""Observability – JSON logging setup for applications embedding the SDK."""
from __future__ import annotations

import logging
from typing import Any

import structlog

from rynko.observability.logging.filters import SensitiveFieldsFilter


def configure_logging(level: int = logging.INFO, sensitive_fields: frozenset[str] | None = None) -> None:
    """Route structlog through stdlib logging with JSON output.

    Sensitive keys (API keys, secrets, signatures) are always redacted.  The
    SDK never calls this itself; it is for applications that want the SDK's
    retry logs rendered the same way as their own.
    """
    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        SensitiveFieldsFilter(sensitive_fields),
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.JSONRenderer(),
        ],
    )
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


__all__ = ["configure_logging"]
