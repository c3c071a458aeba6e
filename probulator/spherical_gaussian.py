"""Spherical Gaussian lobes and their closed-form operations."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

from .mathutil import FOUR_PI, saturate

SG_COSINE_MU = 1.170
SG_COSINE_LAMBDA = 2.133


@dataclass
class SphericalGaussian:
    """A lobe ``mu * exp(lam * (dot(v, p) - 1))``: axis ``p``, sharpness ``lam``, RGB amplitude ``mu``."""

    p: np.ndarray = field(default_factory=lambda: np.array([0.0, 0.0, 1.0]))
    lam: float = 0.0
    mu: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self):
        self.p = np.array(self.p, dtype=float)
        self.lam = float(self.lam)
        self.mu = np.broadcast_to(np.asarray(self.mu, dtype=float), (3,)).copy()


def sg_integral(lam: float) -> float:
    """Integral over the sphere of a lobe with unit amplitude and sharpness ``lam``."""
    if lam == 0.0:
        return FOUR_PI
    return FOUR_PI * (0.5 - 0.5 * math.exp(-2.0 * lam)) / lam


def sg_dot(a: SphericalGaussian, b: SphericalGaussian) -> np.ndarray:
    """Integral over the sphere of the product of two lobes."""
    d_m = float(np.linalg.norm(a.lam * a.p + b.lam * b.p))
    ratio = 1.0 if d_m == 0.0 else math.sinh(d_m) / d_m
    return ratio * FOUR_PI * a.mu * b.mu / math.exp(a.lam + b.lam)


def sg_evaluate(p, lam: float, v) -> float:
    """Value of a unit-amplitude lobe with axis ``p`` and sharpness ``lam`` at direction ``v``."""
    dp = float(np.dot(np.asarray(v, dtype=float), np.asarray(p, dtype=float)))
    return math.exp(lam * (dp - 1.0))


def sg_evaluate_lobe(sg: SphericalGaussian, v) -> np.ndarray:
    """RGB value of ``sg`` at direction ``v``."""
    return sg.mu * sg_evaluate(sg.p, sg.lam, v)


def sg_cross(a: SphericalGaussian, b: SphericalGaussian) -> SphericalGaussian:
    """The lobe equal to the product of two lobes."""
    lambda_m = a.lam + b.lam
    p_m = (a.lam * a.p + b.lam * b.p) / lambda_m
    p_m_length = float(np.linalg.norm(p_m))
    return SphericalGaussian(
        p=p_m / p_m_length,
        lam=lambda_m * p_m_length,
        mu=a.mu * b.mu * math.exp(lambda_m * (p_m_length - 1.0)),
    )


def sg_cosine_lobe(p=(0.0, 0.0, 1.0)) -> SphericalGaussian:
    """Lobe fitted to a clamped cosine around ``p``."""
    return SphericalGaussian(p=p, lam=SG_COSINE_LAMBDA, mu=SG_COSINE_MU)


def sg_find_mu(target_lambda: float, target_integral: float) -> float:
    """Amplitude that makes a lobe of ``target_lambda`` integrate to ``target_integral``."""
    return target_integral / sg_integral(target_lambda)


def sg_find_mu_matching(target_lambda: float, lam: float, mu: float) -> float:
    """Amplitude for ``target_lambda`` matching the energy of a lobe (``lam``, ``mu``)."""
    return sg_find_mu(target_lambda, sg_integral(lam) * mu)


def sg_irradiance_fitted(lighting_lobe: SphericalGaussian, normal) -> np.ndarray:
    """Approximate irradiance at ``normal`` from a lighting lobe using a curve fit."""
    if lighting_lobe.lam == 0.0:
        return lighting_lobe.mu.copy()

    mu_dot_n = float(np.dot(lighting_lobe.p, np.asarray(normal, dtype=float)))
    lam = lighting_lobe.lam

    c0 = 0.36
    c1 = 1.0 / (4.0 * c0)

    eml = math.exp(-lam)
    em2l = eml * eml
    rl = 1.0 / lam

    scale = 1.0 + 2.0 * em2l - rl
    bias = (eml - em2l) * rl - em2l

    x = math.sqrt(1.0 - scale)
    x0 = c0 * mu_dot_n
    x1 = c1 * x
    n = x0 + x1

    y = saturate(mu_dot_n)
    if abs(x0) <= x1:
        y = n * n / x

    result = scale * y + bias
    return result * lighting_lobe.mu * sg_integral(lam)