"""Resilience – ``Retry-After`` header parsing."""
from __future__ import annotations

from datetime import UTC, datetime
from email.utils import parsedate_to_datetime

from rynko.kernel.time import Clock, SystemClock


def parse_retry_after(value: str | None, clock: Clock | None = None) -> float | None:
    """Return the wait requested by a ``Retry-After`` header, in milliseconds.

    The value is read as a count of seconds first, then as an HTTP-date
    whose distance from now is clamped at zero.  ``None`` means the header is
    absent or unreadable.
    """
    if not value:
        return None
    value = value.strip()

    try:
        seconds = int(value)
    except ValueError:
        pass
    else:
        return max(seconds, 0) * 1000.0

    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=UTC)
    now: datetime = (clock or SystemClock()).now()
    return max((when - now).total_seconds() * 1000.0, 0.0)


__all__ = ["parse_retry_after"]
