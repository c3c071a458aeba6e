"""Least-squares fitting of spherical Gaussian lobe amplitudes to radiance samples."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Sequence

import numpy as np
from scipy.optimize import nnls

from .spherical_gaussian import SphericalGaussian


@dataclass
class RadianceSample:
    """Radiance ``value`` (RGB) arriving from unit ``direction``."""

    direction: np.ndarray
    value: np.ndarray

    def __post_init__(self):
        self.direction = np.array(self.direction, dtype=float)
        self.value = np.array(self.value, dtype=float)


def _design_matrix(basis: Sequence[SphericalGaussian], samples: Sequence[RadianceSample]) -> np.ndarray:
    directions = np.array([s.direction for s in samples], dtype=float).reshape(-1, 3)
    axes = np.array([lobe.p for lobe in basis], dtype=float).reshape(-1, 3)
    lambdas = np.array([lobe.lam for lobe in basis], dtype=float)
    return np.exp(lambdas * (directions @ axes.T - 1.0))


def _sample_values(samples: Sequence[RadianceSample]) -> np.ndarray:
    return np.array([s.value for s in samples], dtype=float).reshape(-1, 3)


def _with_amplitudes(basis: Sequence[SphericalGaussian], amplitudes: np.ndarray) -> list[SphericalGaussian]:
    return [replace(lobe, mu=mu) for lobe, mu in zip(basis, amplitudes)]


def sg_fit_least_squares(
    basis: Sequence[SphericalGaussian], samples: Sequence[RadianceSample]
) -> list[SphericalGaussian]:
    """Return a copy of ``basis`` whose amplitudes minimise the squared error to ``samples``."""
    a = _design_matrix(basis, samples)
    b = _sample_values(samples)
    x, *_ = np.linalg.lstsq(a, b, rcond=None)
    return _with_amplitudes(basis, x)


def sg_fit_nn_least_squares(
    basis: Sequence[SphericalGaussian], samples: Sequence[RadianceSample]
) -> list[SphericalGaussian]:
    """Like :func:`sg_fit_least_squares`, with amplitudes constrained to be non-negative."""
    a = _design_matrix(basis, samples)
    b = _sample_values(samples)
    x = np.column_stack([nnls(a, b[:, channel])[0] for channel in range(3)])
    return _with_amplitudes(basis, x)