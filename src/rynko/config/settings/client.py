"""Config settings – ClientSettings for the Rynko API client."""
from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any, Literal

from rynko.config.settings.base import Settings
from rynko.config.validation import InvalidSettingValueError, MissingRequiredSettingError
from rynko.resilience.retry import RetryPolicy

DEFAULT_BASE_URL = "https://api.rynko.dev"
DEFAULT_TIMEOUT_MS = 30_000


@dataclasses.dataclass
class ClientSettings(Settings):
    """Everything the client reads at construction time.

    ``retry`` accepts a :class:`RetryPolicy`, a mapping of field overrides
    merged over the defaults, ``None`` for the defaults, or ``False`` to turn
    retries off.  After validation it is either a ``RetryPolicy`` or ``None``.
    """

    _prefix: dataclasses.ClassVar[str] = "RYNKO"

    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    headers: dict[str, str] = dataclasses.field(default_factory=dict)
    retry: RetryPolicy | Mapping[str, Any] | Literal[False] | None = None

    def _validate(self) -> None:
        if not self.api_key:
            raise MissingRequiredSettingError("api_key")
        if not self.base_url:
            self.base_url = DEFAULT_BASE_URL
        if self.timeout_ms <= 0:
            raise InvalidSettingValueError("timeout_ms", self.timeout_ms, "must be positive")
        self.retry = _resolve_retry(self.retry)

    @property
    def retry_policy(self) -> RetryPolicy | None:
        """The active policy, or ``None`` when retries are disabled."""
        return self.retry  # type: ignore[return-value]


def _resolve_retry(value: Any) -> RetryPolicy | None:
    if value is False:
        return None
    if value is None:
        return RetryPolicy()
    if isinstance(value, RetryPolicy):
        return value
    if isinstance(value, Mapping):
        return RetryPolicy.from_overrides(value)
    raise InvalidSettingValueError("retry", value, "expected a RetryPolicy, a mapping or False")


__all__ = ["DEFAULT_BASE_URL", "DEFAULT_TIMEOUT_MS", "ClientSettings"]
