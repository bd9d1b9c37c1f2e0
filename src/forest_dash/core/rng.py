"""Random source used for every spawn decision."""

from __future__ import annotations

import math
import random
from typing import Protocol


class RandomSource(Protocol):
    def random(self) -> float:  # returns in [0.0, 1.0)
        ...


class ProbabilityGate:
    """Bernoulli trials and draws on top of a uniform [0, 1) source."""

    def __init__(self, source: RandomSource | None = None) -> None:
        self._source = source if source is not None else random.Random()

    def trial(self, probability: float) -> bool:
        """One Bernoulli trial: True with the given probability."""
        return self._source.random() < probability

    def uniform(self, low: float, high: float) -> float:
        return low + (high - low) * self._source.random()

    def randrange(self, n: int) -> int:
        """Integer in [0, n)."""
        return min(n - 1, math.floor(self._source.random() * n))
