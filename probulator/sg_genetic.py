"""Genetic-algorithm refinement of spherical Gaussian bases, and a parallel loop helper."""

from __future__ import annotations

import functools
import random
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Callable, Sequence

import numpy as np

from .distribution import DiscreteDistribution
from .sg_fit import RadianceSample
from .spherical_gaussian import SphericalGaussian

_LUMINANCE = np.array([0.2126, 0.7152, 0.0722])

_MUTATION_RATE = 0.05
_MUTATION_SIGMA = 0.025
_ELITE_COUNT = 1


@functools.lru_cache(maxsize=None)
def _executor() -> ThreadPoolExecutor:
    return ThreadPoolExecutor()


def parallel_for(begin: int, end: int, fun: Callable[[int], object]) -> None:
    """Call ``fun(i)`` for every ``i`` in ``range(begin, end)`` on a shared thread pool."""
    for _ in _executor().map(fun, range(begin, end)):
        pass


def _sample_arrays(samples: Sequence[RadianceSample]) -> tuple[np.ndarray, np.ndarray]:
    if not samples:
        raise ValueError("no radiance samples")
    directions = np.array([s.direction for s in samples], dtype=float).reshape(-1, 3)
    values = np.array([s.value for s in samples], dtype=float).reshape(-1, 3)
    return directions, values


def _error(basis: Sequence[SphericalGaussian], directions: np.ndarray, values: np.ndarray) -> float:
    reconstruction = np.zeros_like(values)
    if basis:
        axes = np.array([lobe.p for lobe in basis]).reshape(-1, 3)
        lambdas = np.array([lobe.lam for lobe in basis])
        amplitudes = np.array([lobe.mu for lobe in basis]).reshape(-1, 3)
        weights = np.exp(lambdas * (directions @ axes.T - 1.0))
        reconstruction = weights @ amplitudes
    mse = np.mean((values - reconstruction) ** 2, axis=0)
    return float(mse @ _LUMINANCE)


def sg_basis_error(basis: Sequence[SphericalGaussian], samples: Sequence[RadianceSample]) -> float:
    """Luminance-weighted mean square error of ``basis`` against ``samples``."""
    return _error(basis, *_sample_arrays(samples))


def _copy_basis(basis: Sequence[SphericalGaussian]) -> list[SphericalGaussian]:
    return [replace(lobe) for lobe in basis]


def _mutate(basis: list[SphericalGaussian], rng: random.Random) -> None:
    for lobe in basis:
        for channel in range(3):
            if rng.random() <= _MUTATION_RATE:
                lobe.mu[channel] += rng.gauss(0.0, _MUTATION_SIGMA)
        if rng.random() <= _MUTATION_RATE:
            lobe.lam += rng.gauss(0.0, _MUTATION_SIGMA)


def _cross_over(
    a: Sequence[SphericalGaussian], b: Sequence[SphericalGaussian], rng: random.Random
) -> list[SphericalGaussian]:
    point = rng.randint(0, len(a))
    return _copy_basis(list(a[:point]) + list(b[point:len(a)]))


def sg_fit_genetic_algorithm(
    basis: Sequence[SphericalGaussian],
    samples: Sequence[RadianceSample],
    population_count: int,
    generation_count: int,
    seed: int = 0,
    verbose: bool = False,
) -> list[SphericalGaussian]:
    """Evolve lobe amplitudes and sharpness starting from ``basis`` to reduce the error to ``samples``."""
    if population_count < 1:
        raise ValueError("population_count must be at least 1")
    directions, values = _sample_arrays(samples)
    if generation_count < 1:
        return _copy_basis(basis)

    rng = random.Random(seed)
    next_population = [_copy_basis(basis) for _ in range(population_count)]
    errors = [0.0] * population_count
    population: list[list[SphericalGaussian]] = []
    ranking: list[int] = []

    for generation in range(generation_count):
        population = next_population

        def evaluate(index: int) -> None:
            errors[index] = _error(population[index], directions, values)

        parallel_for(0, population_count, evaluate)

        ranking = sorted(range(population_count), key=errors.__getitem__)
        min_error = errors[ranking[0]]
        max_error = errors[ranking[-1]]

        if min_error == 0.0:
            return _copy_basis(population[ranking[0]])

        fitness = [
            0.000001 + (max_error - error) / max_error * population_count for error in errors
        ]

        if verbose and generation % 50 == 0:
            print(f"Generation {generation} best solution error: {min_error:f}")

        next_population = [_copy_basis(population[i]) for i in ranking[:_ELITE_COUNT]]
        selector = DiscreteDistribution(fitness)
        while len(next_population) < population_count:
            a = population[selector.sample(rng)]
            b = population[selector.sample(rng)]
            child = _cross_over(a, b, rng)
            _mutate(child, rng)
            next_population.append(child)

    return _copy_basis(population[ranking[0]])