"""Transport errors: every failure surfaced by the HTTP engine.

``code`` is the discriminant callers branch on; ``status_code`` is the HTTP
status, ``0`` for failures that never produced a response.
"""

from __future__ import annotations

from typing import Any

from rynko.kernel.errors.base import BaseError


class RynkoError(BaseError):
    """A failed API call."""

    default_code = "ApiError"
    default_status_code = 0

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        status_code: int | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, code=code, **kwargs)
        self.status_code = self.default_status_code if status_code is None else status_code

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["status_code"] = self.status_code
        return base

    def _repr_fields(self) -> list[tuple[str, Any]]:
        return [("code", self.code), ("status_code", self.status_code), ("message", self.message)]


class RequestTimeoutError(RynkoError):
    """No response arrived within the per-attempt timeout."""

    default_code = "TimeoutError"
    default_status_code = 408

    def __init__(self, message: str = "Request timeout", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class NetworkError(RynkoError):
    """The request failed below HTTP (DNS, connection reset, TLS, …)."""

    default_code = "NetworkError"


class UnknownError(RynkoError):
    """Something other than a transport failure escaped the attempt."""

    default_code = "UnknownError"

    def __init__(self, message: str = "Unknown error", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class ApiError(RynkoError):
    """The API answered with an error status.

    ``code`` carries the server's ``error`` field when present.
    """

    default_code = "ApiError"

    @classmethod
    def from_body(cls, status_code: int, body: Any) -> "ApiError":
        """Build from a decoded error body, falling back on missing fields."""
        fields = body if isinstance(body, dict) else {}
        return cls(
            fields.get("message") or f"HTTP {status_code}",
            code=fields.get("error") or cls.default_code,
            status_code=status_code,
            detail={k: v for k, v in fields.items() if k not in ("message", "error")},
        )


class RetryExhaustedError(RynkoError):
    """Every attempt failed without recording a concrete error."""

    default_code = "RetryExhausted"

    def __init__(self, message: str = "Request failed after retries", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class JobTimeoutError(RynkoError):
    """A document job did not reach a terminal status in time."""

    default_code = "JobTimeout"

    def __init__(self, job_id: str, **kwargs: Any) -> None:
        super().__init__(f"Timeout waiting for job {job_id} to complete", **kwargs)
        self.job_id = job_id


__all__ = [
    "ApiError",
    "JobTimeoutError",
    "NetworkError",
    "RequestTimeoutError",
    "RetryExhaustedError",
    "RynkoError",
    "UnknownError",
]
