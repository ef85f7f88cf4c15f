"""Documents resource – generation requests and job polling."""
from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any

from tenacity import AsyncRetrying, RetryError, retry_if_result, stop_after_delay, wait_fixed

from rynko.adapters.http import HttpxHttpClient
from rynko.kernel.errors import JobTimeoutError, ValidationError
from rynko.resources._validation import compact, validate_format, validate_metadata
from rynko.resources.pagination import Page, PaginationMeta

TERMINAL_JOB_STATUSES = frozenset({"completed", "failed"})
DEFAULT_PAGE_SIZE = 20


def _is_pending(job: Mapping[str, Any]) -> bool:
    return job.get("status") not in TERMINAL_JOB_STATUSES


class DocumentsResource:
    """``client.documents``.

    Generation is asynchronous on the server: ``generate`` queues a job and
    returns its id; poll with :meth:`get_job` or :meth:`wait_for_completion`.
    These endpoints answer with unwrapped bodies, which are returned as-is.
    """

    def __init__(
        self,
        http: HttpxHttpClient,
        sleep: Callable[[float], Awaitable[Any]] | None = None,
    ) -> None:
        self._http = http
        self._sleep = sleep

    async def generate(
        self,
        template_id: str,
        format: str,
        *,
        variables: Mapping[str, Any] | None = None,
        filename: str | None = None,
        webhook_url: str | None = None,
        metadata: Mapping[str, Any] | None = None,
        use_draft: bool | None = None,
        use_credit: bool | None = None,
    ) -> dict[str, Any]:
        """Queue one document; returns ``{jobId, status, statusUrl, estimatedWaitSeconds}``."""
        body = compact(
            templateId=template_id,
            format=validate_format(format),
            variables=dict(variables) if variables is not None else None,
            filename=filename,
            webhookUrl=webhook_url,
            metadata=validate_metadata(metadata),
            useDraft=use_draft,
            useCredit=use_credit,
        )
        return await self._http.post("/api/v1/documents/generate", body)

    async def generate_pdf(self, template_id: str, **options: Any) -> dict[str, Any]:
        return await self.generate(template_id, "pdf", **options)

    async def generate_excel(self, template_id: str, **options: Any) -> dict[str, Any]:
        return await self.generate(template_id, "excel", **options)

    async def generate_batch(
        self,
        template_id: str,
        format: str,
        documents: Sequence[Mapping[str, Any]],
        *,
        webhook_url: str | None = None,
        metadata: Mapping[str, Any] | None = None,
        use_draft: bool | None = None,
        use_credit: bool | None = None,
    ) -> dict[str, Any]:
        """Queue several documents from one template.

        Each entry of *documents* holds ``variables`` and optionally
        ``filename`` and ``metadata``.
        """
        if not documents:
            raise ValidationError(
                "At least one document is required",
                errors=[{"field": "documents", "reason": "must not be empty"}],
            )
        specs = [
            compact(
                variables=dict(doc.get("variables") or {}),
                filename=doc.get("filename"),
                metadata=validate_metadata(doc.get("metadata"), f"documents[{index}].metadata"),
            )
            for index, doc in enumerate(documents)
        ]
        body = compact(
            templateId=template_id,
            format=validate_format(format),
            documents=specs,
            webhookUrl=webhook_url,
            metadata=validate_metadata(metadata),
            useDraft=use_draft,
            useCredit=use_credit,
        )
        return await self._http.post("/api/v1/documents/generate/batch", body)

    async def get_job(self, job_id: str) -> dict[str, Any]:
        return await self._http.get(f"/api/v1/documents/jobs/{job_id}")

    async def list_jobs(
        self,
        *,
        status: str | None = None,
        template_id: str | None = None,
        workspace_id: str | None = None,
        limit: int | None = None,
        page: int | None = None,
        offset: int | None = None,
    ) -> Page[dict[str, Any]]:
        """List jobs; the server's ``{jobs, total}`` is reshaped into a :class:`Page`."""
        size = limit if limit is not None else DEFAULT_PAGE_SIZE
        page_number = page if page is not None else 1
        response = await self._http.get(
            "/api/v1/documents/jobs",
            {
                "status": status,
                "templateId": template_id,
                "workspaceId": workspace_id,
                "limit": limit,
                "offset": offset if offset is not None else (page_number - 1) * size,
            },
        )
        total = response.get("total", 0)
        return Page(
            data=list(response.get("jobs", [])),
            meta=PaginationMeta.compute(total, page_number, size),
        )

    async def wait_for_completion(
        self,
        job_id: str,
        *,
        poll_interval_ms: float = 1000,
        timeout_ms: float = 30_000,
    ) -> dict[str, Any]:
        """Poll :meth:`get_job` until the job is ``completed`` or ``failed``.

        Errors from ``get_job`` propagate immediately.  Raises
        :class:`JobTimeoutError` once *timeout_ms* has elapsed.
        """
        kwargs: dict[str, Any] = {}
        if self._sleep is not None:
            kwargs["sleep"] = self._sleep
        retrying = AsyncRetrying(
            retry=retry_if_result(_is_pending),
            wait=wait_fixed(poll_interval_ms / 1000),
            stop=stop_after_delay(timeout_ms / 1000),
            **kwargs,
        )
        try:
            return await retrying(self.get_job, job_id)
        except RetryError as exc:
            raise JobTimeoutError(job_id, cause=exc) from exc


__all__ = ["DocumentsResource", "TERMINAL_JOB_STATUSES"]
