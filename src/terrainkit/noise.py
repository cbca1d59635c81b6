"""Seeded gradient noise and fractal composition.

Provides the permutation table, classic 2D gradient (Perlin) noise and
fractal Brownian motion. The noise functions accept either Python floats
or numpy arrays of coordinates; array inputs are evaluated element-wise
with the same arithmetic, so a whole grid can be sampled in one pass.
"""

from typing import overload

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .config import NoiseConfig

# LCG parameters (glibc rand)
LCG_MULTIPLIER = 1103515245
LCG_INCREMENT = 12345
LCG_MODULUS = 2**31

PERMUTATION_SIZE = 256

# Gradient directions selected by the low 3 bits of a corner hash:
# (1,1), (-1,1), (1,-1), (-1,-1), (1,0), (-1,0), (0,1), (0,-1)
_GRAD_X = np.array([1, -1, 1, -1, 1, -1, 0, 0], dtype=np.float64)
_GRAD_Y = np.array([1, 1, -1, -1, 0, 0, 1, -1], dtype=np.float64)


def generate_permutation(seed: int) -> NDArray[np.uint8]:
    """Generate the doubled permutation table for a seed.

    Shuffles 0..255 with a Fisher-Yates pass driven by a linear
    congruential generator, then appends a copy so corner lookups
    never need a modulo.

    Args:
        seed: Any integer; only ``abs(seed) % 2**31`` matters.

    Returns:
        uint8 array of length 512, each value 0-255 appearing twice.
    """
    perm = list(range(PERMUTATION_SIZE))
    state = abs(seed) % LCG_MODULUS

    for i in range(PERMUTATION_SIZE - 1, 0, -1):
        state = (LCG_MULTIPLIER * state + LCG_INCREMENT) % LCG_MODULUS
        j = state % (i + 1)
        perm[i], perm[j] = perm[j], perm[i]

    return np.array(perm + perm, dtype=np.uint8)


def fade(t):
    """Quintic fade curve 6t^5 - 15t^4 + 10t^3."""
    return t * t * t * (t * (t * 6 - 15) + 10)


def lerp(t, a, b):
    """Linear interpolation between a and b by t."""
    return a + t * (b - a)


def grad(hash_value, x, y):
    """Dot product of the hashed gradient direction with (x, y)."""
    h = np.asarray(hash_value) & 7
    return _GRAD_X[h] * x + _GRAD_Y[h] * y


@overload
def perlin_2d(x: float, y: float, permutation: NDArray[np.uint8]) -> float: ...


@overload
def perlin_2d(
    x: ArrayLike, y: ArrayLike, permutation: NDArray[np.uint8]
) -> NDArray[np.float64]: ...


def perlin_2d(x, y, permutation):
    """Sample classic 2D gradient noise.

    Args:
        x: X coordinate(s).
        y: Y coordinate(s).
        permutation: Table from ``generate_permutation``.

    Returns:
        Noise value(s) in [-1, 1]; a float for scalar input.
    """
    scalar = np.isscalar(x) and np.isscalar(y)
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    p = np.asarray(permutation).astype(np.int64)

    x_floor = np.floor(x)
    y_floor = np.floor(y)
    xi = x_floor.astype(np.int64) & 255
    yi = y_floor.astype(np.int64) & 255

    xf = x - x_floor
    yf = y - y_floor

    u = fade(xf)
    v = fade(yf)

    # Hash the four cell corners
    aa = p[p[xi] + yi]
    ab = p[p[xi] + yi + 1]
    ba = p[p[xi + 1] + yi]
    bb = p[p[xi + 1] + yi + 1]

    grad_aa = grad(aa, xf, yf)
    grad_ba = grad(ba, xf - 1, yf)
    grad_ab = grad(ab, xf, yf - 1)
    grad_bb = grad(bb, xf - 1, yf - 1)

    lerp_x1 = lerp(u, grad_aa, grad_ba)
    lerp_x2 = lerp(u, grad_ab, grad_bb)
    result = np.clip(lerp(v, lerp_x1, lerp_x2), -1.0, 1.0)

    if scalar:
        return float(result)
    return result


@overload
def fbm(
    x: float, y: float, noise: NoiseConfig, permutation: NDArray[np.uint8]
) -> float: ...


@overload
def fbm(
    x: ArrayLike, y: ArrayLike, noise: NoiseConfig, permutation: NDArray[np.uint8]
) -> NDArray[np.float64]: ...


def fbm(x, y, noise, permutation):
    """Fractal Brownian motion over ``perlin_2d``.

    Each octave multiplies frequency by ``noise.lacunarity`` and
    amplitude by ``noise.persistence``. Amplitude always starts at 1;
    ``noise.amplitude`` is not applied.

    Args:
        x: X coordinate(s).
        y: Y coordinate(s).
        noise: Fractal parameters.
        permutation: Table from ``generate_permutation``.

    Returns:
        Value(s) in [0, 1]; exactly 0.5 when ``noise.octaves`` is 0.
    """
    scalar = np.isscalar(x) and np.isscalar(y)
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)

    total = np.zeros(np.broadcast(x, y).shape, dtype=np.float64)
    amplitude = 1.0
    freq = noise.frequency
    max_value = 0.0

    for _ in range(noise.octaves):
        total += perlin_2d(x * freq, y * freq, permutation) * amplitude
        max_value += amplitude
        amplitude *= noise.persistence
        freq *= noise.lacunarity

    if max_value == 0:
        result = np.full(total.shape, 0.5)
    else:
        result = np.clip((total / max_value + 1) / 2, 0.0, 1.0)

    if scalar:
        return float(result)
    return result


def smoothstep(edge0: float, edge1: float, x):
    """Smooth Hermite interpolation between 0 and 1.

    A zero-width transition (``edge0 == edge1``) degrades to a hard step
    at the edge instead of dividing by zero.

    Args:
        edge0: Lower edge of transition.
        edge1: Upper edge of transition.
        x: Input value(s).

    Returns:
        Smoothly interpolated value(s) in [0, 1].
    """
    x = np.asarray(x, dtype=np.float64)
    if edge1 == edge0:
        return np.where(x >= edge1, 1.0, 0.0)
    t = np.clip((x - edge0) / (edge1 - edge0), 0.0, 1.0)
    return t * t * (3.0 - 2.0 * t)
