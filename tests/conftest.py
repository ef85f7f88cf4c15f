"""Shared fixtures."""
from __future__ import annotations

import pytest


class RecordingSleep:
    """Async sleep stand-in that records requested durations and returns at once."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def sleeper() -> RecordingSleep:
    return RecordingSleep()
