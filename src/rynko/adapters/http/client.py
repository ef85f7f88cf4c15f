"""HTTP adapter – HttpxHttpClient.

One attempt per call: builds the request, enforces the per-attempt timeout
and maps every failure onto the :class:`~rynko.kernel.errors.RynkoError`
taxonomy.  Retrying lives in :mod:`rynko.adapters.http.retry_client`.
"""
from __future__ import annotations

import asyncio
import enum
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

import httpx

from rynko._version import __version__
from rynko.kernel.errors import ApiError, NetworkError, RequestTimeoutError, UnknownError

USER_AGENT = f"rynko-python/{__version__}"

QueryValue = str | int | float | bool | date | datetime | enum.Enum | None


def build_headers(api_key: str, custom: Mapping[str, str | None] | None = None) -> httpx.Headers:
    """Default headers with caller headers layered on top.

    A caller may replace a default's value but never remove it: ``None`` or
    empty values are skipped, so ``Authorization`` is always sent.
    """
    headers = httpx.Headers({
        "Content-Type": "application/json",
        "Authorization": f"Bearer {api_key}",
        "User-Agent": USER_AGENT,
    })
    for name, value in (custom or {}).items():
        if value:
            headers[name] = value
    return headers


def encode_query_value(value: QueryValue) -> str:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, enum.Enum):
        return str(value.value)
    return str(value)


def encode_query(query: Mapping[str, QueryValue] | None) -> list[tuple[str, str]]:
    """Render *query* as ordered pairs, dropping ``None`` entries."""
    if not query:
        return []
    return [(key, encode_query_value(value)) for key, value in query.items() if value is not None]


class HttpxHttpClient:
    """Thin async httpx wrapper with structured error mapping."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        timeout_ms: float = 30_000,
        headers: Mapping[str, str | None] | None = None,
        **kwargs: Any,
    ) -> None:
        self._base_url = httpx.URL(base_url)
        self._timeout = timeout_ms / 1000
        self._client = httpx.AsyncClient(
            headers=build_headers(api_key, headers),
            timeout=self._timeout,
            **kwargs,
        )

    async def __aenter__(self) -> "HttpxHttpClient":
        await self._client.__aenter__()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self._client.__aexit__(*args)

    async def aclose(self) -> None:
        await self._client.aclose()

    @property
    def headers(self) -> httpx.Headers:
        return self._client.headers

    def build_url(self, path: str, query: Mapping[str, QueryValue] | None = None) -> httpx.URL:
        """Resolve *path* against the base URL and append the defined query entries."""
        url = self._base_url.join(path)
        params = encode_query(query)
        if params:
            url = url.copy_merge_params(params)
        return url

    async def get(self, path: str, query: Mapping[str, QueryValue] | None = None) -> Any:
        return await self.execute("GET", path, query=query)

    async def post(self, path: str, body: Any = None) -> Any:
        return await self.execute("POST", path, body=body)

    async def put(self, path: str, body: Any = None) -> Any:
        return await self.execute("PUT", path, body=body)

    async def patch(self, path: str, body: Any = None) -> Any:
        return await self.execute("PATCH", path, body=body)

    async def delete(self, path: str) -> Any:
        return await self.execute("DELETE", path)

    async def execute(
        self,
        method: str,
        path: str,
        *,
        body: Any = None,
        query: Mapping[str, QueryValue] | None = None,
    ) -> Any:
        """Send one request and return the decoded JSON body verbatim."""
        response = await self._attempt(method, self.build_url(path, query), body)
        return self._decode(response)

    async def _attempt(self, method: str, url: httpx.URL, body: Any) -> httpx.Response:
        kwargs: dict[str, Any] = {}
        if body is not None:
            kwargs["json"] = body
        try:
            return await asyncio.wait_for(
                self._client.request(method, url, **kwargs), timeout=self._timeout
            )
        except (TimeoutError, httpx.TimeoutException) as exc:
            raise RequestTimeoutError(cause=exc) from exc
        except (httpx.HTTPError, OSError) as exc:
            raise NetworkError(str(exc) or type(exc).__name__, cause=exc) from exc
        except Exception as exc:  # noqa: BLE001
            raise UnknownError(cause=exc) from exc

    def _decode(self, response: httpx.Response) -> Any:
        if not response.is_success:
            raise self._error_from(response)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise NetworkError(
                f"Invalid JSON in response from {response.request.method} {response.request.url.path}",
                cause=exc,
            ) from exc

    @staticmethod
    def _error_from(response: httpx.Response) -> ApiError:
        try:
            body = response.json()
        except ValueError:
            body = {}
        return ApiError.from_body(response.status_code, body)


HttpClient = HttpxHttpClient

__all__ = ["USER_AGENT", "HttpClient", "HttpxHttpClient", "build_headers", "encode_query"]
