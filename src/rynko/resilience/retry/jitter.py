"""Resilience – jitter strategies."""
from __future__ import annotations

import abc
import random


class JitterStrategy(abc.ABC):
    """Apply randomness to a backoff delay to spread thundering-herd."""

    @abc.abstractmethod
    def apply(self, delay: float) -> float: ...


class NoJitter(JitterStrategy):
    def apply(self, delay: float) -> float:
        return delay


class AdditiveJitter(JitterStrategy):
    """Add a uniform random amount in ``[0, max_jitter)`` to the delay."""

    def __init__(self, max_jitter: float, rng: random.Random | None = None) -> None:
        self._max_jitter = max_jitter
        self._rng = rng or random.Random()

    def apply(self, delay: float) -> float:
        return delay + self._rng.random() * self._max_jitter


__all__ = ["AdditiveJitter", "JitterStrategy", "NoJitter"]
