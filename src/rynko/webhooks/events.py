"""Webhook events – the payload handed back by signature verification."""
from __future__ import annotations

import dataclasses
import enum
import json
from typing import Any

MetadataValue = str | int | float | bool | None


class WebhookEventType(str, enum.Enum):
    DOCUMENT_GENERATED = "document.generated"
    DOCUMENT_COMPLETED = "document.completed"
    DOCUMENT_FAILED = "document.failed"
    BATCH_COMPLETED = "batch.completed"

    @property
    def is_document_event(self) -> bool:
        return self.value.startswith("document.")


@dataclasses.dataclass(frozen=True)
class DocumentWebhookData:
    job_id: str
    status: str | None = None
    template_id: str | None = None
    format: str | None = None
    download_url: str | None = None
    file_size: int | None = None
    error_message: str | None = None
    error_code: str | None = None
    metadata: dict[str, MetadataValue] | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DocumentWebhookData":
        return cls(
            job_id=data["jobId"],
            status=data.get("status"),
            template_id=data.get("templateId"),
            format=data.get("format"),
            download_url=data.get("downloadUrl"),
            file_size=data.get("fileSize"),
            error_message=data.get("errorMessage"),
            error_code=data.get("errorCode"),
            metadata=data.get("metadata"),
        )


@dataclasses.dataclass(frozen=True)
class BatchWebhookData:
    batch_id: str
    status: str | None = None
    template_id: str | None = None
    format: str | None = None
    total_jobs: int = 0
    completed_jobs: int = 0
    failed_jobs: int = 0
    metadata: dict[str, MetadataValue] | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BatchWebhookData":
        return cls(
            batch_id=data["batchId"],
            status=data.get("status"),
            template_id=data.get("templateId"),
            format=data.get("format"),
            total_jobs=data.get("totalJobs", 0),
            completed_jobs=data.get("completedJobs", 0),
            failed_jobs=data.get("failedJobs", 0),
            metadata=data.get("metadata"),
        )


@dataclasses.dataclass(frozen=True)
class WebhookEvent:
    """A verified webhook delivery.

    ``type`` is a :class:`WebhookEventType` for known events.  Event types
    this SDK does not know yet keep their raw string, and their ``data`` stays
    as decoded.  The same holds when a known event lacks the fields its typed
    data needs (``jobId`` or ``batchId``): the delivery is authentic, so it is
    handed back untyped rather than rejected.
    """

    id: str
    type: WebhookEventType | str
    timestamp: str
    data: DocumentWebhookData | BatchWebhookData | Any
    raw: dict[str, Any] = dataclasses.field(repr=False, compare=False, default_factory=dict)

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "WebhookEvent":
        if not isinstance(payload, dict):
            raise TypeError(f"webhook payload must be a JSON object, got {type(payload).__name__}")
        data = payload.get("data")
        raw_type = payload.get("type")

        try:
            event_type: WebhookEventType | str = WebhookEventType(raw_type)
        except ValueError:
            event_type = raw_type if isinstance(raw_type, str) else ""

        parsed: DocumentWebhookData | BatchWebhookData | Any = data
        if isinstance(event_type, WebhookEventType) and isinstance(data, dict):
            typed = DocumentWebhookData if event_type.is_document_event else BatchWebhookData
            try:
                parsed = typed.from_dict(data)
            except KeyError:
                parsed = data

        return cls(
            id=str(payload.get("id") or ""),
            type=event_type,
            timestamp=str(payload.get("timestamp") or ""),
            data=parsed,
            raw=payload,
        )

    @classmethod
    def from_json(cls, text: str | bytes) -> "WebhookEvent":
        return cls.from_dict(json.loads(text))


__all__ = [
    "BatchWebhookData",
    "DocumentWebhookData",
    "MetadataValue",
    "WebhookEvent",
    "WebhookEventType",
]
