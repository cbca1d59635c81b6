"""Heightmap synthesis from fractal noise."""

import numpy as np
from numpy.typing import NDArray

from .config import NoiseConfig
from .exceptions import InvalidConfigError
from .noise import fbm, generate_permutation
from .validation import require_resolution


def generate_heightmap(resolution: int, noise: NoiseConfig) -> NDArray[np.float32]:
    """Sample fBm noise over a square grid.

    Grid point (x, y) is sampled at normalized coordinates
    (x / (resolution - 1), y / (resolution - 1)), so the whole map
    always covers [0, 1]^2 of noise space regardless of resolution.

    Args:
        resolution: Vertices per edge, at least 2.
        noise: Fractal noise parameters; ``noise.seed`` selects the table.

    Returns:
        float32 array of shape (resolution, resolution) in [0, 1],
        indexed ``[y, x]`` (row-major, flat index ``y * resolution + x``).

    Raises:
        InvalidConfigError: If resolution is below 2, or the octave
            frequencies overflow and produce non-finite heights.
    """
    resolution = require_resolution(resolution)
    permutation = generate_permutation(noise.seed)

    coords = np.arange(resolution, dtype=np.float64) / (resolution - 1)
    ny, nx = np.meshgrid(coords, coords, indexing="ij")

    with np.errstate(over="ignore", invalid="ignore"):
        heights = fbm(nx, ny, noise, permutation)
    if not np.all(np.isfinite(heights)):
        raise InvalidConfigError(
            "noise produced non-finite heights; "
            f"frequency={noise.frequency} lacunarity={noise.lacunarity} "
            f"octaves={noise.octaves} overflow"
        )

    return heights.astype(np.float32)
