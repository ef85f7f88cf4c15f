"""Templates resource."""
from __future__ import annotations

from typing import Any

from rynko.adapters.http import HttpxHttpClient
from rynko.resources.pagination import Page, PaginationMeta


def _has_format(template: dict[str, Any], *formats: str) -> bool:
    return any(fmt in (template.get("outputFormats") or ()) for fmt in formats)


class TemplatesResource:
    """``client.templates``."""

    def __init__(self, http: HttpxHttpClient) -> None:
        self._http = http

    async def get(self, template_id: str) -> dict[str, Any]:
        return await self._http.get(f"/api/templates/{template_id}")

    async def list(
        self,
        *,
        limit: int | None = None,
        page: int | None = None,
        search: str | None = None,
    ) -> Page[dict[str, Any]]:
        response = await self._http.get(
            "/api/templates/attachment",
            {"limit": limit, "page": page, "search": search},
        )
        return Page(
            data=list(response.get("data", [])),
            meta=PaginationMeta(
                total=response.get("total", 0),
                page=response.get("page", page if page is not None else 1),
                limit=response.get("limit", limit if limit is not None else 0),
                total_pages=response.get("totalPages", 0),
            ),
        )

    async def list_pdf(self, **options: Any) -> Page[dict[str, Any]]:
        """Templates that can render PDF (filtered client-side)."""
        return (await self.list(**options)).filter(lambda t: _has_format(t, "pdf"))

    async def list_excel(self, **options: Any) -> Page[dict[str, Any]]:
        """Templates that can render Excel (filtered client-side)."""
        return (await self.list(**options)).filter(lambda t: _has_format(t, "xlsx", "excel"))


__all__ = ["TemplatesResource"]
