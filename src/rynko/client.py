"""Rynko client – configuration, transport and resources wired together."""
from __future__ import annotations

import random
from collections.abc import Mapping
from typing import Any, Literal

from rynko.adapters.http import RetryingHttpClient
from rynko.adapters.http.retry_client import Sleep
from rynko.config.settings import (
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT_MS,
    ClientSettings,
    DotenvSettingsLoader,
    EnvSettingsLoader,
)
from rynko.kernel.errors import RynkoError
from rynko.kernel.time import Clock
from rynko.observability.logging import get_logger
from rynko.resilience.retry import RetryPolicy
from rynko.resources import DocumentsResource, TemplatesResource, WebhooksResource

logger = get_logger(__name__)


class Rynko:
    """Async client for the Rynko document generation API.

    Usage::

        async with Rynko(api_key=os.environ["RYNKO_API_KEY"]) as rynko:
            job = await rynko.documents.generate_pdf(
                "tmpl_invoice", variables={"invoiceNumber": "INV-001"}
            )
            done = await rynko.documents.wait_for_completion(job["jobId"])

    ``retry`` takes a :class:`RetryPolicy`, a mapping of overrides
    (``{"max_attempts": 3}``) or ``False``.  Extra keyword arguments
    (``transport=``, ``proxy=``, …) are passed to :class:`httpx.AsyncClient`.
    """

    def __init__(
        self,
        api_key: str = "",
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        headers: Mapping[str, str] | None = None,
        retry: RetryPolicy | Mapping[str, Any] | Literal[False] | None = None,
        sleep: Sleep | None = None,
        clock: Clock | None = None,
        rng: random.Random | None = None,
        **httpx_kwargs: Any,
    ) -> None:
        self.settings = ClientSettings(
            api_key=api_key,
            base_url=base_url,
            timeout_ms=timeout_ms,
            headers=dict(headers or {}),
            retry=retry,
        )
        self._http = RetryingHttpClient(
            self.settings.base_url,
            self.settings.api_key,
            timeout_ms=self.settings.timeout_ms,
            headers=self.settings.headers,
            retry=self.settings.retry_policy,
            sleep=sleep,
            clock=clock,
            rng=rng,
            **httpx_kwargs,
        )
        self.documents = DocumentsResource(self._http, sleep=sleep)
        self.templates = TemplatesResource(self._http)
        self.webhooks = WebhooksResource(self._http)

    @classmethod
    def from_settings(cls, settings: ClientSettings, **kwargs: Any) -> "Rynko":
        return cls(
            settings.api_key,
            base_url=settings.base_url,
            timeout_ms=settings.timeout_ms,
            headers=settings.headers,
            retry=settings.retry_policy or False,
            **kwargs,
        )

    @classmethod
    def from_env(cls, env_file: str | None = None, **kwargs: Any) -> "Rynko":
        """Build a client from ``RYNKO_API_KEY`` / ``RYNKO_BASE_URL`` / ``RYNKO_TIMEOUT_MS``.

        With *env_file*, that dotenv file is loaded first.
        """
        loader = DotenvSettingsLoader(env_file) if env_file else EnvSettingsLoader()
        return cls.from_settings(loader.load(ClientSettings), **kwargs)

    @property
    def http(self) -> RetryingHttpClient:
        return self._http

    async def __aenter__(self) -> "Rynko":
        await self._http.__aenter__()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self._http.__aexit__(*args)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def me(self) -> dict[str, Any]:
        """The user owning the API key."""
        response = await self._http.get("/api/auth/verify")
        return response["data"]

    async def verify_api_key(self) -> bool:
        """``True`` if :meth:`me` succeeds, ``False`` on any API error."""
        try:
            await self.me()
        except RynkoError as exc:
            logger.info("api key verification failed", error_code=exc.code, status_code=exc.status_code)
            return False
        return True


def create_client(api_key: str = "", **kwargs: Any) -> Rynko:
    return Rynko(api_key, **kwargs)


__all__ = ["Rynko", "create_client"]
