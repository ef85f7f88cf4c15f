"""Resilience – retry policy with exponential backoff and jitter."""
from rynko.resilience.retry.backoff import BackoffStrategy, ExponentialBackoff
from rynko.resilience.retry.jitter import AdditiveJitter, JitterStrategy, NoJitter
from rynko.resilience.retry.policy import DEFAULT_RETRYABLE_STATUSES, RetryPolicy
from rynko.resilience.retry.retry_after import parse_retry_after

__all__ = [
    "DEFAULT_RETRYABLE_STATUSES",
    "AdditiveJitter",
    "BackoffStrategy",
    "ExponentialBackoff",
    "JitterStrategy",
    "NoJitter",
    "RetryPolicy",
    "parse_retry_after",
]
