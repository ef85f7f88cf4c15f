"""Resilience – RetryPolicy."""
from __future__ import annotations

import dataclasses
import random
from collections.abc import Mapping
from typing import Any

from rynko.kernel.errors import ValidationError
from rynko.resilience.retry.backoff import ExponentialBackoff
from rynko.resilience.retry.jitter import AdditiveJitter, JitterStrategy, NoJitter

DEFAULT_RETRYABLE_STATUSES: frozenset[int] = frozenset({429, 503, 504})


@dataclasses.dataclass(frozen=True)
class RetryPolicy:
    """How a failed request is retried.

    Delays are in milliseconds.  ``max_attempts`` counts the first attempt,
    so ``1`` disables retrying altogether.
    """

    max_attempts: int = 5
    initial_delay_ms: float = 1000.0
    max_delay_ms: float = 30_000.0
    max_jitter_ms: float = 1000.0
    retryable_statuses: frozenset[int] = DEFAULT_RETRYABLE_STATUSES

    def __post_init__(self) -> None:
        object.__setattr__(self, "retryable_statuses", frozenset(self.retryable_statuses))
        problems = []
        if self.max_attempts < 1:
            problems.append({"field": "max_attempts", "reason": "must be >= 1"})
        for name in ("initial_delay_ms", "max_delay_ms", "max_jitter_ms"):
            if getattr(self, name) < 0:
                problems.append({"field": name, "reason": "must be >= 0"})
        if problems:
            raise ValidationError("Invalid retry policy", errors=problems)

    @classmethod
    def from_overrides(cls, overrides: Mapping[str, Any]) -> "RetryPolicy":
        """Merge *overrides* over the defaults; unknown keys are rejected."""
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ValidationError(
                "Invalid retry policy",
                errors=[{"field": name, "reason": "unknown option"} for name in unknown],
            )
        return cls(**dict(overrides))

    def is_retryable(self, status_code: int) -> bool:
        return status_code in self.retryable_statuses

    def has_attempts_left(self, attempt: int) -> bool:
        """Whether another attempt may follow the zero-based *attempt*."""
        return attempt < self.max_attempts - 1

    def compute_delay(
        self,
        attempt: int,
        retry_after_ms: float | None = None,
        rng: random.Random | None = None,
    ) -> float:
        """Milliseconds to wait after the zero-based *attempt* failed.

        A server-supplied ``Retry-After`` replaces exponential backoff.  Jitter
        is added in both cases and the sum never exceeds ``max_delay_ms``.
        """
        jitter: JitterStrategy = (
            AdditiveJitter(self.max_jitter_ms, rng) if self.max_jitter_ms > 0 else NoJitter()
        )
        if retry_after_ms is not None:
            base = retry_after_ms
        else:
            base = ExponentialBackoff(self.initial_delay_ms, self.max_delay_ms).compute(attempt)
        return min(jitter.apply(base), self.max_delay_ms)


__all__ = ["DEFAULT_RETRYABLE_STATUSES", "RetryPolicy"]
