"""RandomSource protocol and the default pseudo-random implementation."""

from __future__ import annotations

import random
from typing import Protocol, runtime_checkable


@runtime_checkable
class RandomSource(Protocol):
    """Pluggable source of uniform draws consumed by the outcome generators."""

    def random(self) -> float: ...
    def randint(self, low: int, high: int) -> int: ...


class DefaultRandomSource:
    """Production random source backed by ``random.Random``.

    Without a seed the generator is seeded from OS entropy. A seed makes a
    whole traffic run reproducible.
    """

    def __init__(self, seed: int | None = None) -> None:
        self._random = random.Random(seed)

    def random(self) -> float:
        return self._random.random()

    def randint(self, low: int, high: int) -> int:
        return self._random.randint(low, high)
