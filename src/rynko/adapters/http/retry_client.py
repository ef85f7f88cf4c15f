"""HTTP adapter – RetryingHttpClient."""
from __future__ import annotations

import asyncio
import random
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from rynko.adapters.http.client import HttpxHttpClient, QueryValue
from rynko.kernel.errors import NetworkError, RequestTimeoutError, RetryExhaustedError, RynkoError
from rynko.kernel.time import Clock
from rynko.observability.logging import get_logger
from rynko.resilience.retry import RetryPolicy, parse_retry_after

logger = get_logger(__name__)

Sleep = Callable[[float], Awaitable[Any]]


class RetryingHttpClient(HttpxHttpClient):
    """HTTP client with automatic retry on transient failures.

    Timeouts, network failures and responses whose status the policy marks
    retryable are retried while attempts remain, sleeping between attempts
    for the server's ``Retry-After`` or an exponential backoff, plus jitter.
    Any other failure is raised at once.  ``retry=None`` sends exactly one
    attempt.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        retry: RetryPolicy | None = None,
        sleep: Sleep | None = None,
        clock: Clock | None = None,
        rng: random.Random | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(base_url, api_key, **kwargs)
        self._retry = retry
        self._sleep = sleep or asyncio.sleep
        self._clock = clock
        self._rng = rng

    @property
    def retry_policy(self) -> RetryPolicy | None:
        return self._retry

    async def execute(
        self,
        method: str,
        path: str,
        *,
        body: Any = None,
        query: Mapping[str, QueryValue] | None = None,
    ) -> Any:
        url = self.build_url(path, query)
        policy = self._retry
        if policy is None or policy.max_attempts == 1:
            return self._decode(await self._attempt(method, url, body))

        for attempt in range(policy.max_attempts):
            retry_after_ms: float | None = None
            try:
                response = await self._attempt(method, url, body)
            except (RequestTimeoutError, NetworkError) as exc:
                if not policy.has_attempts_left(attempt):
                    raise
                error: RynkoError = exc
            else:
                if response.is_success or not policy.is_retryable(response.status_code):
                    return self._decode(response)
                error = self._error_from(response)
                if not policy.has_attempts_left(attempt):
                    raise error
                retry_after_ms = parse_retry_after(response.headers.get("Retry-After"), self._clock)

            delay_ms = policy.compute_delay(attempt, retry_after_ms, self._rng)
            logger.warning(
                "retrying request",
                method=method,
                path=url.path,
                attempt=attempt + 1,
                max_attempts=policy.max_attempts,
                delay_ms=round(delay_ms),
                error_code=error.code,
                status_code=error.status_code,
            )
            await self._sleep(delay_ms / 1000)

        # The final attempt always returns or raises above.
        raise RetryExhaustedError()


__all__ = ["RetryingHttpClient"]
