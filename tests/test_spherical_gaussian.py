import math

import numpy as np
import pytest

from probulator.mathutil import FOUR_PI, sample_vogels_sphere
from probulator.spherical_gaussian import (
    SG_COSINE_LAMBDA,
    SG_COSINE_MU,
    SphericalGaussian,
    sg_cosine_lobe,
    sg_cross,
    sg_dot,
    sg_evaluate,
    sg_evaluate_lobe,
    sg_find_mu,
    sg_find_mu_matching,
    sg_integral,
    sg_irradiance_fitted,
)

_N = 20000
_DIRECTIONS = np.array([sample_vogels_sphere(i, _N) for i in range(_N)])


def _integrate(lobe_p, lam):
    values = np.exp(lam * (_DIRECTIONS @ np.asarray(lobe_p) - 1.0))
    return values, FOUR_PI / _N


def test_defaults_and_scalar_mu():
    sg = SphericalGaussian(mu=2.0)
    np.testing.assert_array_equal(sg.mu, [2.0, 2.0, 2.0])
    np.testing.assert_array_equal(sg.p, [0.0, 0.0, 1.0])


def test_evaluate_peak_and_falloff():
    p = np.array([0.0, 1.0, 0.0])
    assert sg_evaluate(p, 5.0, p) == pytest.approx(1.0)
    side = sg_evaluate(p, 5.0, [1.0, 0.0, 0.0])
    back = sg_evaluate(p, 5.0, -p)
    assert 1.0 > side > back > 0.0
    sg = SphericalGaussian(p=p, lam=5.0, mu=[1.0, 2.0, 3.0])
    np.testing.assert_allclose(sg_evaluate_lobe(sg, p), [1.0, 2.0, 3.0])


def test_integral_zero_lambda_is_sphere_area():
    assert sg_integral(0.0) == pytest.approx(FOUR_PI)


@pytest.mark.parametrize("lam", [0.5, 3.0, 10.0])
def test_integral_matches_numeric(lam):
    values, weight = _integrate([0.0, 0.0, 1.0], lam)
    assert values.sum() * weight == pytest.approx(sg_integral(lam), rel=1e-3)


def test_dot_matches_numeric_integral():
    pa = np.array([0.0, 0.0, 1.0])
    pb = np.array([1.0, 0.0, 1.0]) / math.sqrt(2.0)
    a = SphericalGaussian(p=pa, lam=4.0, mu=[1.0, 2.0, 0.5])
    b = SphericalGaussian(p=pb, lam=3.0, mu=[1.0, 1.0, 1.0])
    va, w = _integrate(pa, 4.0)
    vb, _ = _integrate(pb, 3.0)
    numeric = (va * vb).sum() * w * a.mu * b.mu
    np.testing.assert_allclose(sg_dot(a, b), numeric, rtol=1e-2)


def test_dot_is_symmetric():
    a = SphericalGaussian(p=[0.0, 1.0, 0.0], lam=2.0, mu=1.0)
    b = SphericalGaussian(p=[0.0, 0.0, 1.0], lam=6.0, mu=[0.5, 1.0, 2.0])
    np.testing.assert_allclose(sg_dot(a, b), sg_dot(b, a))


def test_cross_is_product_of_lobes():
    a = SphericalGaussian(p=[0.0, 0.0, 1.0], lam=4.0, mu=[1.0, 2.0, 3.0])
    b = SphericalGaussian(p=np.array([1.0, 1.0, 0.0]) / math.sqrt(2.0), lam=2.5, mu=[0.5, 0.5, 2.0])
    c = sg_cross(a, b)
    assert np.linalg.norm(c.p) == pytest.approx(1.0)
    for v in _DIRECTIONS[::2500]:
        np.testing.assert_allclose(
            sg_evaluate_lobe(c, v), sg_evaluate_lobe(a, v) * sg_evaluate_lobe(b, v), rtol=1e-9
        )


def test_cosine_lobe_constants():
    lobe = sg_cosine_lobe([1.0, 0.0, 0.0])
    assert lobe.lam == SG_COSINE_LAMBDA == 2.133
    np.testing.assert_array_equal(lobe.mu, [SG_COSINE_MU] * 3)
    np.testing.assert_array_equal(lobe.p, [1.0, 0.0, 0.0])
    np.testing.assert_array_equal(sg_cosine_lobe().p, [0.0, 0.0, 1.0])


def test_find_mu_inverts_integral():
    lam = 3.5
    assert sg_find_mu(lam, sg_integral(lam) * 2.5) == pytest.approx(2.5)


def test_find_mu_matching_preserves_energy():
    mu = sg_find_mu_matching(8.0, 2.0, 1.5)
    assert mu * sg_integral(8.0) == pytest.approx(1.5 * sg_integral(2.0))


def test_irradiance_fitted_ambient_returns_mu():
    lobe = SphericalGaussian(lam=0.0, mu=[0.2, 0.4, 0.6])
    np.testing.assert_array_equal(sg_irradiance_fitted(lobe, [1.0, 0.0, 0.0]), [0.2, 0.4, 0.6])


def test_irradiance_fitted_orders_by_angle():
    lobe = SphericalGaussian(p=[0.0, 0.0, 1.0], lam=4.0, mu=1.0)
    facing = sg_irradiance_fitted(lobe, [0.0, 0.0, 1.0])[0]
    side = sg_irradiance_fitted(lobe, [1.0, 0.0, 0.0])[0]
    away = sg_irradiance_fitted(lobe, [0.0, 0.0, -1.0])[0]
    assert facing > side > away >= -1e-6
    assert facing <= sg_integral(4.0)