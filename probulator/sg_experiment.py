"""Spherical Gaussian basis experiments: lobe layout, radiance solvers and irradiance."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Sequence

import numpy as np

from .mathutil import FOUR_PI, PI, sample_vogels_sphere
from .sg_fit import RadianceSample, sg_fit_least_squares, sg_fit_nn_least_squares
from .sg_genetic import sg_fit_genetic_algorithm
from .spherical_gaussian import (
    SphericalGaussian,
    sg_dot,
    sg_find_mu,
    sg_integral,
    sg_irradiance_fitted,
)


class SgSolver(Enum):
    """How lobe amplitudes are fitted to radiance samples."""

    NAIVE = "naive"
    RUNNING_AVERAGE = "running_average"
    LEAST_SQUARES = "ls"
    NON_NEGATIVE_LEAST_SQUARES = "nnls"
    GENETIC_ALGORITHM = "ga"


def _lobe_arrays(lobes: Sequence[SphericalGaussian]) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    axes = np.array([lobe.p for lobe in lobes], dtype=float).reshape(-1, 3)
    lambdas = np.array([lobe.lam for lobe in lobes], dtype=float)
    amplitudes = np.array([lobe.mu for lobe in lobes], dtype=float).reshape(-1, 3)
    return axes, lambdas, amplitudes


def _copy_lobes(lobes: Sequence[SphericalGaussian]) -> list[SphericalGaussian]:
    return [replace(lobe) for lobe in lobes]


def _per_direction(fn: Callable[[np.ndarray], np.ndarray], directions) -> np.ndarray:
    d = np.asarray(directions, dtype=float)
    flat = d.reshape(-1, 3)
    values = np.array([fn(direction) for direction in flat], dtype=float).reshape(-1, 3)
    return values.reshape(d.shape[:-1] + (3,))


def _with_alpha(rgb: np.ndarray) -> np.ndarray:
    return np.concatenate([rgb, np.ones(rgb.shape[:-1] + (1,))], axis=-1)


def sg_basis_evaluate(lobes: Sequence[SphericalGaussian], direction) -> np.ndarray:
    """Sum of all lobes at ``direction``; accepts one direction or an array of shape (..., 3)."""
    d = np.asarray(direction, dtype=float)
    if not lobes:
        return np.zeros(d.shape[:-1] + (3,))
    axes, lambdas, amplitudes = _lobe_arrays(lobes)
    weights = np.exp(lambdas * (d @ axes.T - 1.0))
    return weights @ amplitudes


def sg_basis_dot(lobes: Sequence[SphericalGaussian], sg: SphericalGaussian) -> np.ndarray:
    """Integral over the sphere of the product of the whole basis with ``sg``."""
    return sum((sg_dot(lobe, sg) for lobe in lobes), np.zeros(3))


def sg_basis_irradiance_fitted(lobes: Sequence[SphericalGaussian], normal) -> np.ndarray:
    """Curve-fitted irradiance at ``normal`` summed over all lobes."""
    return sum((sg_irradiance_fitted(lobe, normal) for lobe in lobes), np.zeros(3))


def _precomputed_lobe_integral(lam: float) -> float:
    if lam == 0.0:
        return 1.0
    return (1.0 - math.exp(-4.0 * lam)) / (4.0 * lam)


def solve_running_average(
    lobes: Sequence[SphericalGaussian],
    samples: Sequence[RadianceSample],
    non_negative: bool = False,
) -> list[SphericalGaussian]:
    """Progressive least-squares estimate of lobe amplitudes, one sample at a time."""
    result = _copy_lobes(lobes)
    if not result:
        return result
    axes, lambdas, amplitudes = _lobe_arrays(result)
    precomputed = np.array([_precomputed_lobe_integral(lam) for lam in lambdas])
    mc_integrals = np.zeros(len(result))

    for count, sample in enumerate(samples, start=1):
        scale = 1.0 / count
        weights = np.exp(lambdas * (axes @ sample.direction - 1.0))
        estimate = weights @ amplitudes

        active = np.nonzero(weights != 0.0)[0]
        w = weights[active]
        mc_integrals[active] += (w * w - mc_integrals[active]) * scale
        integral = np.maximum(mc_integrals[active], precomputed[active] * 0.75)

        current = amplitudes[active]
        others = estimate - current * w[:, None]
        new_value = (sample.value - others) * w[:, None] / integral[:, None]
        updated = current + (new_value - current) * scale
        if non_negative:
            updated = np.maximum(updated, 0.0)
        amplitudes[active] = updated

    for lobe, mu in zip(result, amplitudes):
        lobe.mu = mu.copy()
    return result


def _naive_normalization(lam: float, lobe_count: int) -> float:
    return FOUR_PI / (sg_integral(lam) * lobe_count)


def _solve_naive(
    lobes: Sequence[SphericalGaussian], samples: Sequence[RadianceSample], lam: float
) -> list[SphericalGaussian]:
    result = _copy_lobes(lobes)
    if not result or not samples:
        return result
    axes, lambdas, amplitudes = _lobe_arrays(result)
    directions = np.array([s.direction for s in samples], dtype=float).reshape(-1, 3)
    values = np.array([s.value for s in samples], dtype=float).reshape(-1, 3)
    weights = np.exp(lambdas * (directions @ axes.T - 1.0))
    norm = _naive_normalization(lam, len(result))
    amplitudes = amplitudes + norm * (weights.T @ values) / len(samples)
    for lobe, mu in zip(result, amplitudes):
        lobe.mu = mu.copy()
    return result


@dataclass
class SgExperiment:
    """Projects radiance onto a spherical Gaussian basis and reconstructs radiance and irradiance."""

    solver: SgSolver = SgSolver.LEAST_SQUARES
    lobe_count: int = 1
    lam: float = 0.0
    brdf_lambda: float = 0.0
    ambient_lobe_enabled: bool = False
    non_negative_solve: bool = False
    population_count: int = 50
    generation_count: int = 2000
    lobes: list = field(default_factory=list)
    radiance_image: np.ndarray | None = None
    irradiance_image: np.ndarray | None = None

    def generate_lobes(self) -> list[SphericalGaussian]:
        """Lay out ``lobe_count`` lobes on a golden spiral, plus the optional ambient lobe."""
        self.lobes = [
            SphericalGaussian(p=sample_vogels_sphere(i, self.lobe_count), lam=self.lam, mu=0.0)
            for i in range(self.lobe_count)
        ]
        if self.ambient_lobe_enabled:
            self.lobes.append(SphericalGaussian(p=(0.0, 0.0, 1.0), lam=0.0, mu=0.0))
        return self.lobes

    def solve(self, samples: Sequence[RadianceSample]) -> list[SphericalGaussian]:
        """Fit the current lobes' amplitudes to ``samples`` with the chosen solver."""
        if self.solver is SgSolver.NAIVE:
            self.lobes = _solve_naive(self.lobes, samples, self.lam)
        elif self.solver is SgSolver.RUNNING_AVERAGE:
            self.lobes = solve_running_average(self.lobes, samples, self.non_negative_solve)
        elif self.solver is SgSolver.LEAST_SQUARES:
            self.lobes = sg_fit_least_squares(self.lobes, samples)
        elif self.solver is SgSolver.NON_NEGATIVE_LEAST_SQUARES:
            self.lobes = sg_fit_nn_least_squares(self.lobes, samples)
        else:
            seeded = sg_fit_nn_least_squares(self.lobes, samples)
            self.lobes = sg_fit_genetic_algorithm(
                seeded, samples, self.population_count, self.generation_count
            )
        return self.lobes

    def radiance(self, direction) -> np.ndarray:
        """Reconstructed RGB radiance for one direction or an array of directions."""
        return sg_basis_evaluate(self.lobes, direction)

    def irradiance(self, direction) -> np.ndarray:
        """RGB irradiance for one normal or an array of normals.

        A positive ``brdf_lambda`` convolves with a lobe-shaped BRDF; otherwise a curve fit is used.
        """
        if self.brdf_lambda > 0.0:
            brdf_mu = sg_find_mu(self.brdf_lambda, PI)

            def at(normal: np.ndarray) -> np.ndarray:
                brdf = SphericalGaussian(p=normal, lam=self.brdf_lambda, mu=brdf_mu)
                return sg_basis_dot(self.lobes, brdf) / PI
        else:

            def at(normal: np.ndarray) -> np.ndarray:
                return sg_basis_irradiance_fitted(self.lobes, normal)

        return _per_direction(at, direction)

    def run(self, samples: Sequence[RadianceSample], directions) -> tuple[np.ndarray, np.ndarray]:
        """Build lobes, solve, and return RGBA radiance and irradiance for ``directions``."""
        self.generate_lobes()
        self.solve(samples)
        self.radiance_image = _with_alpha(self.radiance(directions))
        self.irradiance_image = _with_alpha(self.irradiance(directions))
        return self.radiance_image, self.irradiance_image

    def properties(self) -> dict[str, object]:
        """User-editable settings by display name."""
        props: dict[str, object] = {
            "Lobe count": self.lobe_count,
            "Ambient lobe enabled": self.ambient_lobe_enabled,
            "Lambda": self.lam,
            "BRDF Lambda": self.brdf_lambda,
        }
        if self.solver is SgSolver.GENETIC_ALGORITHM:
            props["Population count"] = self.population_count
            props["Generation count"] = self.generation_count
        return props