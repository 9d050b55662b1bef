"""Injectable uniform random sources.

Every generator in glitchfx draws from a ``RandomSource``: a zero-argument
callable returning floats in [0, 1). Production code uses ``random.random``;
tests substitute a seeded or scripted source.
"""

from __future__ import annotations

import random
from collections.abc import Callable, Iterable

RandomSource = Callable[[], float]

default_source: RandomSource = random.random


def seeded_source(seed: int) -> RandomSource:
    """Return a reproducible source backed by its own ``random.Random``."""
    return random.Random(seed).random


class ScriptedRandom:
    """Replays a fixed list of samples, cycling when exhausted.

    Example:
        >>> rand = ScriptedRandom([0.0, 0.5])
        >>> rand(), rand(), rand()
        (0.0, 0.5, 0.0)
    """

    def __init__(self, values: Iterable[float]) -> None:
        self._values = [float(v) for v in values]
        if not self._values:
            raise ValueError("values cannot be empty")
        for v in self._values:
            if not 0.0 <= v < 1.0:
                raise ValueError(f"scripted sample out of range [0, 1): {v}")
        self._pos = 0
        self.calls = 0

    def __call__(self) -> float:
        value = self._values[self._pos]
        self._pos = (self._pos + 1) % len(self._values)
        self.calls += 1
        return value
