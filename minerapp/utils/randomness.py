"""Pluggable random sources for mining draws."""

from __future__ import annotations

import random
from collections import deque
from typing import Deque, Iterable, Optional, Protocol


class RandomSource(Protocol):
    def percent(self) -> float:
        """Return a uniform sample in ``[0, 100)``."""


class SeededRandomSource:
    """:class:`random.Random` backed source; seedable for reproducible runs."""

    def __init__(self, seed: Optional[int] = None, *, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random(seed)

    def percent(self) -> float:
        return self._rng.random() * 100


class ScriptedRandomSource:
    """Replay a fixed sequence of percent samples, in order."""

    def __init__(self, values: Iterable[float]) -> None:
        self._values: Deque[float] = deque()
        self.extend(values)

    def extend(self, values: Iterable[float]) -> None:
        for value in values:
            value = float(value)
            if not 0 <= value < 100:
                raise ValueError(f"Scripted sample {value} is outside [0, 100)")
            self._values.append(value)

    def percent(self) -> float:
        if not self._values:
            raise LookupError("Scripted random source is exhausted")
        return self._values.popleft()

    def remaining(self) -> int:
        return len(self._values)


__all__ = ["RandomSource", "ScriptedRandomSource", "SeededRandomSource"]
