"""Observability – credential redaction for log events."""
from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

DEFAULT_SENSITIVE_FIELDS: frozenset[str] = frozenset({
    "api_key", "apikey", "authorization", "password", "secret", "signature", "token",
    "x_rynko_signature",
})

REDACTED = "[REDACTED]"

_BEARER = re.compile(r"(Bearer\s+)\S+", re.IGNORECASE)


class SensitiveFieldsFilter:
    """structlog processor that hides credentials before an event is rendered.

    Values under a sensitive key are replaced wholesale at any depth, so a
    logged header mapping loses its ``Authorization`` entry.  Bearer tokens
    quoted inside other strings, such as an exception message, are masked in
    place.  Keys match case-insensitively with ``-`` read as ``_``.
    """

    def __init__(self, sensitive_fields: frozenset[str] | None = None) -> None:
        fields = sensitive_fields or DEFAULT_SENSITIVE_FIELDS
        self._fields = frozenset(self._normalise(name) for name in fields)

    @staticmethod
    def _normalise(key: str) -> str:
        return key.lower().replace("-", "_")

    def is_sensitive(self, key: Any) -> bool:
        return isinstance(key, str) and self._normalise(key) in self._fields

    def scrub(self, value: Any) -> Any:
        if isinstance(value, Mapping):
            return {k: REDACTED if self.is_sensitive(k) else self.scrub(v) for k, v in value.items()}
        if isinstance(value, list):
            return [self.scrub(item) for item in value]
        if isinstance(value, tuple):
            return tuple(self.scrub(item) for item in value)
        if isinstance(value, str):
            return _BEARER.sub(rf"\g<1>{REDACTED}", value)
        return value

    def __call__(
        self,
        logger: Any,  # noqa: ARG002
        method_name: str,  # noqa: ARG002
        event_dict: dict[str, Any],
    ) -> dict[str, Any]:
        return self.scrub(event_dict)


__all__ = ["DEFAULT_SENSITIVE_FIELDS", "REDACTED", "SensitiveFieldsFilter"]
