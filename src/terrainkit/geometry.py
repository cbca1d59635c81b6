"""Mesh buffer construction for a square terrain grid."""

from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .normals import calculate_normals
from .validation import as_heightmap, require_resolution, require_world_size


@dataclass
class GeometryBuffers:
    """Flat vertex/index buffers ready for upload.

    Layouts: positions and normals [x, y, z, ...], uvs [u, v, ...],
    indices three per triangle with counter-clockwise winding.
    """

    positions: NDArray[np.float32]
    normals: NDArray[np.float32]
    uvs: NDArray[np.float32]
    indices: NDArray[np.uint32]

    @property
    def vertex_count(self) -> int:
        return len(self.positions) // 3

    @property
    def triangle_count(self) -> int:
        return len(self.indices) // 3


def build_positions(
    heightmap: ArrayLike,
    resolution: int,
    world_size: float,
) -> NDArray[np.float32]:
    """Build vertex positions centred on the origin.

    X and Z span [-world_size/2, +world_size/2]; Y is height * world_size.

    Args:
        heightmap: Heights in [0, 1], flat or (resolution, resolution).
        resolution: Vertices per edge, at least 2.
        world_size: Terrain edge length.

    Returns:
        float32 array of length resolution^2 * 3.
    """
    resolution = require_resolution(resolution)
    world_size = require_world_size(world_size)
    heights = as_heightmap(heightmap, resolution).astype(np.float64)

    half_size = world_size / 2
    spacing = world_size / (resolution - 1)
    offsets = -half_size + np.arange(resolution, dtype=np.float64) * spacing
    zz, xx = np.meshgrid(offsets, offsets, indexing="ij")

    positions = np.stack([xx, heights * world_size, zz], axis=-1)
    return positions.astype(np.float32).reshape(-1)


def build_uvs(resolution: int) -> NDArray[np.float32]:
    """Build UVs spanning [0, 1] across the grid.

    Returns:
        float32 array of length resolution^2 * 2.
    """
    resolution = require_resolution(resolution)
    coords = np.arange(resolution, dtype=np.float64) / (resolution - 1)
    vv, uu = np.meshgrid(coords, coords, indexing="ij")
    return np.stack([uu, vv], axis=-1).astype(np.float32).reshape(-1)


def build_indices(resolution: int) -> NDArray[np.uint32]:
    """Build two counter-clockwise triangles per grid quad.

    Triangles are (top_left, bottom_left, bottom_right) and
    (top_left, bottom_right, top_right).

    Returns:
        uint32 array of length (resolution - 1)^2 * 6.
    """
    resolution = require_resolution(resolution)
    quads = resolution - 1

    rows, cols = np.meshgrid(np.arange(quads), np.arange(quads), indexing="ij")
    top_left = (rows * resolution + cols).reshape(-1)
    top_right = top_left + 1
    bottom_left = top_left + resolution
    bottom_right = bottom_left + 1

    indices = np.stack(
        [top_left, bottom_left, bottom_right, top_left, bottom_right, top_right],
        axis=-1,
    )
    return indices.astype(np.uint32).reshape(-1)


def build_mesh_buffers(
    heightmap: ArrayLike,
    resolution: int,
    world_size: float,
) -> GeometryBuffers:
    """Build positions, normals, UVs and indices for a heightmap.

    Raises:
        InvalidConfigError: On invalid resolution, world size or heightmap.
    """
    return GeometryBuffers(
        positions=build_positions(heightmap, resolution, world_size),
        normals=calculate_normals(heightmap, resolution, world_size),
        uvs=build_uvs(resolution),
        indices=build_indices(resolution),
    )
