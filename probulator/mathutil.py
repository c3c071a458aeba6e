"""Vector helpers, sphere parameterisations and low-discrepancy sampling."""

from __future__ import annotations

import math

import numpy as np

PI = math.pi
TWO_PI = 2.0 * math.pi
FOUR_PI = 4.0 * math.pi

_LUMINANCE_WEIGHTS = np.array([0.2126, 0.7152, 0.0722])


def _vec(x) -> np.ndarray:
    return np.asarray(x, dtype=float)


def sqr(x):
    """Return ``x * x``."""
    return x * x


def cube(x):
    """Return ``x * x * x``."""
    return x * x * x


def saturate(x: float) -> float:
    """Clamp ``x`` to the range [0, 1]."""
    return max(0.0, min(x, 1.0))


def dot_max0(a, b) -> float:
    """Dot product clamped below at zero."""
    return max(0.0, float(np.dot(_vec(a), _vec(b))))


def dot_saturate(a, b) -> float:
    """Dot product clamped to [0, 1]."""
    return saturate(float(np.dot(_vec(a), _vec(b))))


def make_orthogonal_basis(n) -> np.ndarray:
    """Build a 3x3 orthonormal basis whose columns are (b1, b2, n) for unit ``n``."""
    n = _vec(n)
    if n[2] < -0.9999999:
        b1 = np.array([0.0, -1.0, 0.0])
        b2 = np.array([-1.0, 0.0, 0.0])
    else:
        a = 1.0 / (1.0 + n[2])
        b = -n[0] * n[1] * a
        b1 = np.array([1.0 - n[0] * n[0] * a, b, -n[0]])
        b2 = np.array([b, 1.0 - n[1] * n[1] * a, -n[1]])
    return np.column_stack((b1, b2, n))


def lat_long_texel_area(pos, image_size) -> float:
    """Solid angle covered by texel ``pos`` of a lat-long image of ``image_size``."""
    pos = _vec(pos)
    size = _vec(image_size)
    uv0 = pos / size
    uv1 = (pos + 1.0) / size
    theta0 = PI * (uv0[0] * 2.0 - 1.0)
    theta1 = PI * (uv1[0] * 2.0 - 1.0)
    phi0 = PI * (uv0[1] - 0.5)
    phi1 = PI * (uv1[1] - 0.5)
    return abs(theta1 - theta0) * abs(math.sin(phi1) - math.sin(phi0))


def cartesian_to_lat_long_texcoord(p) -> np.ndarray:
    """Map a unit direction to lat-long texture coordinates."""
    p = _vec(p)
    u = 1.0 + math.atan2(p[0], -p[2]) / PI
    v = math.acos(max(-1.0, min(1.0, p[1]))) / PI
    return np.array([u * 0.5, v])


def lat_long_texcoord_to_cartesian(uv) -> np.ndarray:
    """Map lat-long texture coordinates to a unit direction."""
    uv = _vec(uv)
    theta = PI * (uv[0] * 2.0 - 1.0)
    phi = PI * uv[1]
    return np.array([
        math.sin(phi) * math.sin(theta),
        math.cos(phi),
        -math.sin(phi) * math.cos(theta),
    ])


def spherical_to_cartesian(theta_phi) -> np.ndarray:
    """Convert (theta, phi) spherical angles to a unit direction."""
    theta, phi = _vec(theta_phi)
    sin_theta = math.sin(theta)
    return np.array([sin_theta * math.cos(phi), sin_theta * math.sin(phi), math.cos(theta)])


def cartesian_to_spherical(p) -> np.ndarray:
    """Convert a unit direction to (theta, phi) spherical angles."""
    p = _vec(p)
    phi = math.atan2(p[1], p[0])
    theta = math.acos(max(-1.0, min(1.0, p[2])))
    return np.array([theta, phi])


def sample_hammersley(i: int, n: int) -> np.ndarray:
    """Return the ``i``-th point of an ``n``-point Hammersley set in [0, 1)^2."""
    bits = i & 0xFFFFFFFF
    bits = ((bits << 16) | (bits >> 16)) & 0xFFFFFFFF
    bits = ((bits & 0x55555555) << 1) | ((bits & 0xAAAAAAAA) >> 1)
    bits = ((bits & 0x33333333) << 2) | ((bits & 0xCCCCCCCC) >> 2)
    bits = ((bits & 0x0F0F0F0F) << 4) | ((bits & 0xF0F0F0F0) >> 4)
    bits = ((bits & 0x00FF00FF) << 8) | ((bits & 0xFF00FF00) >> 8)
    vdc = bits * 2.3283064365386963e-10
    return np.array([i / n, vdc])


def sample_halton(index: int, base: int) -> float:
    """Radical inverse of ``index`` in ``base``."""
    f = 1.0
    r = 0.0
    while index > 0:
        f /= base
        r += f * (index % base)
        index //= base
    return r


def sample_uniform_hemisphere(u: float, v: float) -> np.ndarray:
    """Uniformly distributed direction on the +Z hemisphere."""
    phi = v * TWO_PI
    cos_theta = u
    sin_theta = math.sqrt(1.0 - cos_theta * cos_theta)
    return np.array([math.cos(phi) * sin_theta, math.sin(phi) * sin_theta, cos_theta])


def sample_vogels_sphere(i: int, n: int) -> np.ndarray:
    """The ``i``-th of ``n`` evenly spread points on the unit sphere (golden spiral)."""
    golden_angle = PI * (3.0 - math.sqrt(5.0))
    theta = golden_angle * i
    t = i / (n - 1) if n > 1 else 0.5
    start = 1.0 - 1.0 / n
    end = 1.0 / n - 1.0
    z = start + (end - start) * t
    radius = math.sqrt(max(0.0, 1.0 - z * z))
    return np.array([radius * math.cos(theta), radius * math.sin(theta), z])


def sample_uniform_sphere(u: float, v: float) -> np.ndarray:
    """Uniformly distributed direction on the unit sphere."""
    z = 1.0 - 2.0 * u
    r = math.sqrt(max(0.0, 1.0 - z * z))
    phi = TWO_PI * v
    return np.array([r * math.cos(phi), r * math.sin(phi), z])


def sample_cosine_hemisphere(u: float, v: float) -> np.ndarray:
    """Cosine-weighted direction on the +Z hemisphere."""
    phi = v * TWO_PI
    cos_theta = math.sqrt(u)
    sin_theta = math.sqrt(1.0 - u)
    return np.array([math.cos(phi) * sin_theta, math.sin(phi) * sin_theta, cos_theta])


def rgb_luminance(color) -> float:
    """Relative luminance of a linear RGB colour."""
    return float(np.dot(_LUMINANCE_WEIGHTS, _vec(color)))


def rgb_to_ycocg(rgb) -> np.ndarray:
    """Convert RGB to YCoCg."""
    r, g, b = _vec(rgb)
    return np.array([
        0.25 * r + 0.5 * g + 0.25 * b,
        0.5 * r - 0.5 * b,
        -0.25 * r + 0.5 * g - 0.25 * b,
    ])


def ycocg_to_rgb(ycocg) -> np.ndarray:
    """Convert YCoCg back to RGB."""
    y, co, cg = _vec(ycocg)
    return np.array([y + co - cg, y + cg, y - co - cg])