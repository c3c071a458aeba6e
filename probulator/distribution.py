"""Discrete probability distribution sampled with the alias method."""

from __future__ import annotations

import random
from typing import Iterable


class DiscreteDistribution:
    """Draws indices with probability proportional to the given weights.

    ``cells`` holds one ``(probability, alias)`` pair per index: the cell's own
    index is returned with ``probability``, otherwise ``alias``.
    """

    def __init__(self, weights: Iterable[float], weight_sum: float | None = None):
        weights = [float(w) for w in weights]
        if weight_sum is None:
            weight_sum = sum(weights)
        count = len(weights)

        small: list[tuple[float, int]] = []
        large: list[tuple[float, int]] = []
        for i, w in enumerate(weights):
            p = w * count / weight_sum
            (small if p < 1.0 else large).append((p, i))

        self.cells: list[tuple[float, int]] = [(0.0, 0)] * count

        while large and small:
            lp, li = small.pop()
            gp, gi = large.pop()
            self.cells[li] = (lp, gi)
            gp = (lp + gp) - 1.0
            (small if gp < 1.0 else large).append((gp, gi))

        for _, i in large + small:
            self.cells[i] = (1.0, self.cells[i][1])

    def __len__(self) -> int:
        return len(self.cells)

    def sample(self, rng: random.Random) -> int:
        """Draw one index using ``rng``."""
        if not self.cells:
            raise ValueError("cannot sample from an empty distribution")
        i = rng.getrandbits(32) % len(self.cells)
        probability, alias = self.cells[i]
        return i if rng.random() <= probability else alias