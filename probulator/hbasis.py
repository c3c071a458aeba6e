"""Hemispherical H-basis: projection and reconstruction of hemispherical radiance."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from .sg_fit import RadianceSample

_SUPPORTED_ORDERS = (1, 4, 6)


def h_evaluate(p, order: int) -> np.ndarray:
    """Evaluate the first ``order`` H-basis functions (1, 4 or 6) at direction ``p``."""
    if order not in _SUPPORTED_ORDERS:
        raise ValueError(f"unsupported H-basis order {order}; expected one of {_SUPPORTED_ORDERS}")
    p = np.asarray(p, dtype=float)
    result = np.zeros(order)
    if p[2] < 0.0:
        return result

    x = -p[0]
    y = -p[1]
    z = p[2]

    result[0] = 1.0 / (2.0 * math.sqrt(math.pi))
    if order >= 4:
        k = math.sqrt(3.0 / (2.0 * math.pi))
        result[1] = -k * y
        result[2] = k * (2.0 * z - 1.0)
        result[3] = -k * x
    if order >= 6:
        k = math.sqrt(15.0 / (2.0 * math.pi))
        result[4] = k * x * y
        result[5] = 0.5 * k * (x * x - y * y)
    return result


def h_evaluate4(p) -> np.ndarray:
    """Four-coefficient H-basis at ``p``."""
    return h_evaluate(p, 4)


def h_evaluate6(p) -> np.ndarray:
    """Six-coefficient H-basis at ``p``."""
    return h_evaluate(p, 6)


def h_dot(a, b):
    """Sum over coefficients of ``a[i] * b[i]``; coefficients may be scalars or RGB."""
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    if a.shape[0] != b.shape[0]:
        raise ValueError("H-basis coefficient counts differ")
    return np.tensordot(a, b, axes=([0], [0]))


def h_add_weighted(accumulator, h, weight) -> np.ndarray:
    """Return ``accumulator`` with ``h[i] * weight`` added to each coefficient."""
    h = np.asarray(h, dtype=float)
    weight = np.asarray(weight, dtype=float)
    term = h.reshape(h.shape + (1,) * weight.ndim) * weight
    return np.asarray(accumulator, dtype=float) + term


def h_mean_square_error(h, samples: Sequence[RadianceSample]) -> np.ndarray:
    """Per-channel mean square error of the H-basis ``h`` against ``samples``."""
    if not samples:
        raise ValueError("no radiance samples")
    h = np.asarray(h, dtype=float)
    order = h.shape[0]
    total = np.zeros(3)
    for sample in samples:
        error = sample.value - h_dot(h, h_evaluate(sample.direction, order))
        total += error * error
    return total / len(samples)


def h_mean_square_error_scalar(h, samples: Sequence[RadianceSample]) -> float:
    """Mean square error averaged over the three colour channels."""
    return float(np.mean(h_mean_square_error(h, samples)))