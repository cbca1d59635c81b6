"""Terrain generation orchestration."""

from pathlib import Path

import numpy as np
import structlog
from numpy.typing import NDArray
from PIL import Image

from .config import TerrainState
from .geometry import GeometryBuffers, build_mesh_buffers
from .heightmap import generate_heightmap
from .splatting import calculate_splat_map, slopes_from_normals

logger = structlog.get_logger()


class GenerationResult:
    """Result of terrain generation with all derived buffers."""

    def __init__(
        self,
        heightmap: NDArray[np.float32],
        buffers: GeometryBuffers,
        splat_map: NDArray[np.float32],
        state: TerrainState,
    ):
        self.heightmap = heightmap
        self.buffers = buffers
        self.splat_map = splat_map
        self.state = state

    @property
    def resolution(self) -> int:
        return self.heightmap.shape[0]


def generate_terrain(
    state: TerrainState,
    debug_output_dir: Path | None = None,
) -> GenerationResult:
    """Generate heightmap, mesh buffers and splat weights for a state.

    Every call recomputes everything from scratch; nothing is cached.

    Args:
        state: Terrain state to generate from.
        debug_output_dir: Directory for preview PNGs (None = disabled).

    Returns:
        GenerationResult owned by the caller.
    """
    terrain = state.terrain
    noise = terrain.noise

    logger.info(
        "terrain_generating",
        resolution=terrain.resolution,
        world_size=terrain.world_size,
        seed=noise.seed,
        octaves=noise.octaves,
    )
    if noise.amplitude != 1.0:
        logger.warning("noise_amplitude_ignored", amplitude=noise.amplitude)

    heightmap = generate_heightmap(terrain.resolution, noise)
    logger.debug(
        "heightmap_generated",
        min=float(heightmap.min()),
        max=float(heightmap.max()),
        mean=float(heightmap.mean()),
    )

    buffers = build_mesh_buffers(heightmap, terrain.resolution, terrain.world_size)
    logger.debug(
        "mesh_built",
        vertices=buffers.vertex_count,
        triangles=buffers.triangle_count,
    )

    slopes = slopes_from_normals(buffers.normals)
    splat_map = calculate_splat_map(heightmap, slopes, state.textures)
    _log_splat_coverage(splat_map, state)

    if debug_output_dir is not None:
        _dump_debug_images(
            Path(debug_output_dir),
            heightmap=heightmap,
            normals=buffers.normals,
            splat_map=splat_map,
        )

    return GenerationResult(
        heightmap=heightmap,
        buffers=buffers,
        splat_map=splat_map,
        state=state,
    )


def _log_splat_coverage(splat_map: NDArray[np.float32], state: TerrainState) -> None:
    """Log the dominant-texture share of each slot."""
    dominant = np.argmax(splat_map, axis=1)
    total = len(dominant)
    coverage = {
        slot.name or f"slot_{slot.index}": round(
            float(np.sum(dominant == slot.index)) / total, 3
        )
        for slot in state.textures
    }
    logger.info("terrain_generated", vertices=total, coverage=coverage)


def _dump_debug_images(
    output_dir: Path,
    heightmap: NDArray[np.float32],
    normals: NDArray[np.float32],
    splat_map: NDArray[np.float32],
) -> None:
    """Save heightmap, normal and splat previews as PNGs."""
    output_dir.mkdir(parents=True, exist_ok=True)
    resolution = heightmap.shape[0]

    gray = np.round(heightmap * 255).astype(np.uint8)
    Image.fromarray(gray).save(output_dir / "heightmap.png")

    # Encode normals like a normal map: [-1, 1] -> [0, 255]
    rgb = normals.reshape(resolution, resolution, 3)
    rgb = np.round((rgb + 1.0) / 2.0 * 255).astype(np.uint8)
    Image.fromarray(rgb).save(output_dir / "normals.png")

    splat = np.zeros((resolution * resolution, 3), dtype=np.float32)
    channels = min(3, splat_map.shape[1])
    splat[:, :channels] = splat_map[:, :channels]
    splat = np.round(splat.reshape(resolution, resolution, 3) * 255).astype(np.uint8)
    Image.fromarray(splat).save(output_dir / "splat.png")

    logger.info("debug_images_saved", output_dir=str(output_dir))
