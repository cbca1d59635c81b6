"""Per-vertex normal estimation from a heightmap."""

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .validation import as_heightmap, require_resolution, require_world_size

# Raw normals shorter than this are treated as degenerate
_MIN_LENGTH = 1e-12


def calculate_normals(
    heightmap: ArrayLike,
    resolution: int,
    world_size: float,
) -> NDArray[np.float32]:
    """Compute unit vertex normals by central finite differences.

    Border vertices clamp their missing neighbour to themselves, so the
    difference there spans one grid step instead of two.

    Args:
        heightmap: Heights in [0, 1], flat or (resolution, resolution).
        resolution: Vertices per edge, at least 2.
        world_size: Terrain edge length; also scales heights.

    Returns:
        float32 array of length resolution^2 * 3, interleaved xyz.

    Raises:
        InvalidConfigError: On invalid resolution, world size or heightmap.
    """
    resolution = require_resolution(resolution)
    world_size = require_world_size(world_size)
    heights = as_heightmap(heightmap, resolution).astype(np.float64) * world_size

    spacing = world_size / (resolution - 1)
    steps = np.arange(resolution)
    lower = np.maximum(steps - 1, 0)
    upper = np.minimum(steps + 1, resolution - 1)

    # Rows are z, columns are x
    h_left = heights[:, lower]
    h_right = heights[:, upper]
    h_back = heights[lower, :]
    h_front = heights[upper, :]

    edge_scale = np.where((steps == 0) | (steps == resolution - 1), 1.0, 2.0)
    tx = spacing * edge_scale[np.newaxis, :]
    tz = spacing * edge_scale[:, np.newaxis]
    ty_x = h_right - h_left
    ty_z = h_front - h_back

    # Z tangent (0, ty_z, tz) crossed with X tangent (tx, ty_x, 0)
    nx = -tz * ty_x
    ny = np.broadcast_to(tz * tx, nx.shape)
    nz = -ty_z * tx

    raw = np.stack([nx, ny, nz], axis=-1)
    length = np.linalg.norm(raw, axis=-1, keepdims=True)
    degenerate = length[..., 0] <= _MIN_LENGTH

    normals = raw / np.where(degenerate[..., np.newaxis], 1.0, length)
    normals[degenerate] = (0.0, 1.0, 0.0)

    return normals.astype(np.float32).reshape(-1)
