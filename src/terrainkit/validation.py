"""Boundary checks for core inputs and post-generation buffer validation."""

import math
from typing import TYPE_CHECKING

import numpy as np
import structlog
from numpy.typing import ArrayLike, NDArray

from .exceptions import InvalidConfigError

if TYPE_CHECKING:
    from .geometry import GeometryBuffers

logger = structlog.get_logger()

NORMAL_LENGTH_TOLERANCE = 1e-4


def require_resolution(resolution: int) -> int:
    """Reject resolutions that would divide by zero in spacing or UVs."""
    if isinstance(resolution, bool) or int(resolution) != resolution:
        raise InvalidConfigError(f"resolution must be an integer, got {resolution!r}")
    if resolution < 2:
        raise InvalidConfigError(f"resolution must be >= 2, got {resolution}")
    return int(resolution)


def require_world_size(world_size: float) -> float:
    """Reject non-positive or non-finite world sizes."""
    if not math.isfinite(world_size) or world_size <= 0:
        raise InvalidConfigError(
            f"world_size must be a positive finite number, got {world_size}"
        )
    return float(world_size)


def require_strength(strength: float) -> float:
    """Reject negative or non-finite normal map strengths."""
    if not math.isfinite(strength) or strength < 0:
        raise InvalidConfigError(
            f"strength must be a non-negative finite number, got {strength}"
        )
    return float(strength)


def as_heightmap(heightmap: ArrayLike, resolution: int) -> NDArray[np.float32]:
    """Coerce a flat or square heightmap to a (resolution, resolution) array.

    Raises:
        InvalidConfigError: If the size doesn't match or values aren't finite.
    """
    grid = np.asarray(heightmap, dtype=np.float32)
    if grid.size != resolution * resolution:
        raise InvalidConfigError(
            f"heightmap has {grid.size} values, expected {resolution * resolution}"
        )
    if not np.all(np.isfinite(grid)):
        raise InvalidConfigError("heightmap contains non-finite values")
    return grid.reshape(resolution, resolution)


class ValidationResult:
    """Result of buffer validation."""

    def __init__(self) -> None:
        self.errors: list[str] = []
        self.warnings: list[str] = []
        self.passed = True

    def add_error(self, message: str) -> None:
        """Add validation error."""
        self.errors.append(message)
        self.passed = False

    def add_warning(self, message: str) -> None:
        """Add validation warning."""
        self.warnings.append(message)


def validate_buffers(buffers: "GeometryBuffers", resolution: int) -> ValidationResult:
    """Validate generated geometry against the grid mesh layout.

    Args:
        buffers: Geometry produced for ``resolution``.
        resolution: Vertices per edge.

    Returns:
        ValidationResult with any errors/warnings.
    """
    result = ValidationResult()
    vertex_count = resolution * resolution

    _check_lengths(buffers, resolution, result)
    _check_finite(buffers, result)

    if result.passed:
        _check_indices(buffers.indices, vertex_count, result)
        _check_normals(buffers.normals, result)
        _check_uvs(buffers.uvs, result)

    if result.passed:
        logger.debug("buffers_valid", resolution=resolution)
    else:
        logger.warning(
            "buffers_invalid", resolution=resolution, errors=len(result.errors)
        )
        for error in result.errors:
            logger.error("buffer_error", detail=error)

    for warning in result.warnings:
        logger.warning("buffer_warning", detail=warning)

    return result


def _check_lengths(
    buffers: "GeometryBuffers",
    resolution: int,
    result: ValidationResult,
) -> None:
    vertex_count = resolution * resolution
    expected = {
        "positions": vertex_count * 3,
        "normals": vertex_count * 3,
        "uvs": vertex_count * 2,
        "indices": 6 * (resolution - 1) ** 2,
    }
    for name, length in expected.items():
        actual = len(getattr(buffers, name))
        if actual != length:
            result.add_error(f"{name} has length {actual}, expected {length}")


def _check_finite(buffers: "GeometryBuffers", result: ValidationResult) -> None:
    for name in ("positions", "normals", "uvs"):
        if not np.all(np.isfinite(getattr(buffers, name))):
            result.add_error(f"{name} contains non-finite values")


def _check_indices(
    indices: NDArray[np.uint32],
    vertex_count: int,
    result: ValidationResult,
) -> None:
    if indices.size and int(indices.max()) >= vertex_count:
        result.add_error(f"index {int(indices.max())} out of range [0, {vertex_count - 1}]")

    triangles = indices.reshape(-1, 3)
    degenerate = np.sum(
        (triangles[:, 0] == triangles[:, 1])
        | (triangles[:, 1] == triangles[:, 2])
        | (triangles[:, 2] == triangles[:, 0])
    )
    if degenerate > 0:
        result.add_error(f"{degenerate} degenerate triangles")


def _check_normals(normals: NDArray[np.float32], result: ValidationResult) -> None:
    lengths = np.linalg.norm(normals.reshape(-1, 3), axis=1)
    off = np.sum(np.abs(lengths - 1.0) > NORMAL_LENGTH_TOLERANCE)
    if off > 0:
        result.add_error(f"{off} normals are not unit length")

    downward = np.sum(normals[1::3] < 0)
    if downward > 0:
        result.add_warning(f"{downward} normals point below the horizon")


def _check_uvs(uvs: NDArray[np.float32], result: ValidationResult) -> None:
    if uvs.size and (uvs.min() < 0.0 or uvs.max() > 1.0):
        result.add_error("uvs fall outside [0, 1]")
