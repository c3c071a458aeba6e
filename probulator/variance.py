"""Running mean and variance (Welford's algorithm)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np


@dataclass
class OnlineVariance:
    """Accumulates samples (scalars or arrays) and reports their sample variance."""

    n: int = 0
    mean: Any = 0.0
    m2: Any = 0.0

    def add_sample(self, x) -> None:
        """Add one sample."""
        if isinstance(x, (list, tuple)):
            x = np.asarray(x, dtype=float)
        self.n += 1
        delta = x - self.mean
        self.mean = self.mean + delta / self.n
        self.m2 = self.m2 + delta * (x - self.mean)

    def variance(self):
        """Unbiased sample variance; zero with fewer than two samples."""
        if self.n < 2:
            if isinstance(self.mean, np.ndarray):
                return np.zeros_like(self.mean)
            return 0.0
        return self.m2 / (self.n - 1)