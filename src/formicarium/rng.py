from __future__ import annotations

import random

_DIRECTIONS = (-1, 0, 1)


class DeterministicRng:
    def __init__(self, seed: int):
        self._seed = seed
        self._random = random.Random(seed)

    def reset(self) -> None:
        self._random.seed(self._seed)

    def next_range(self, low: float, high: float) -> float:
        return self._random.uniform(low, high)

    def next_direction(self) -> int:
        """One random-walk component, uniform over -1, 0 and 1."""
        return self._random.choice(_DIRECTIONS)
