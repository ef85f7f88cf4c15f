"""Webhook subscriptions resource."""
from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from rynko.adapters.http import HttpxHttpClient
from rynko.resources._validation import compact
from rynko.resources.pagination import Page, PaginationMeta
from rynko.webhooks.events import WebhookEventType

_BASE_PATH = "/api/v1/webhook-subscriptions"


def _event_names(events: Iterable[WebhookEventType | str] | None) -> list[str] | None:
    if events is None:
        return None
    return [e.value if isinstance(e, WebhookEventType) else e for e in events]


class WebhooksResource:
    """``client.webhooks``.

    The subscription returned by :meth:`create` carries the ``secret`` to pass
    to :func:`~rynko.webhooks.verify_webhook_signature`; it is not shown again.
    """

    def __init__(self, http: HttpxHttpClient) -> None:
        self._http = http

    async def create(
        self,
        url: str,
        events: Iterable[WebhookEventType | str],
        *,
        description: str | None = None,
    ) -> dict[str, Any]:
        body = compact(url=url, events=_event_names(events), description=description)
        return await self._http.post(_BASE_PATH, body)

    async def get(self, subscription_id: str) -> dict[str, Any]:
        return await self._http.get(f"{_BASE_PATH}/{subscription_id}")

    async def list(self) -> Page[dict[str, Any]]:
        response = await self._http.get(_BASE_PATH)
        data = list(response.get("data", []))
        return Page(
            data=data,
            meta=PaginationMeta(
                total=response.get("total", len(data)), page=1, limit=len(data), total_pages=1
            ),
        )

    async def update(
        self,
        subscription_id: str,
        *,
        url: str | None = None,
        events: Iterable[WebhookEventType | str] | None = None,
        description: str | None = None,
        is_active: bool | None = None,
    ) -> dict[str, Any]:
        body = compact(url=url, events=_event_names(events), description=description, isActive=is_active)
        return await self._http.patch(f"{_BASE_PATH}/{subscription_id}", body)

    async def delete(self, subscription_id: str) -> None:
        await self._http.delete(f"{_BASE_PATH}/{subscription_id}")


__all__ = ["WebhooksResource"]
