"""Terrain persistence: save and load generated buffers."""

import json
from datetime import datetime, timezone
from pathlib import Path

import numpy as np
import structlog

from .config import TerrainState
from .generator import GenerationResult
from .geometry import GeometryBuffers

logger = structlog.get_logger()

FORMAT_VERSION = 1

_ARRAYS = ("heightmap", "positions", "normals", "uvs", "indices", "splat_map")


def save_terrain(path: Path, result: GenerationResult) -> Path:
    """Save a generation result to disk.

    Uses numpy's compressed .npz format; the terrain state travels
    alongside the buffers as JSON so the result can be regenerated.

    Args:
        path: Output path. ``.npz`` is appended when missing, matching
            what numpy writes.
        result: Result of ``generate_terrain``.

    Returns:
        Path of the written file.
    """
    path = Path(path)
    if path.suffix != ".npz":
        path = path.with_name(path.name + ".npz")

    metadata = {
        "version": FORMAT_VERSION,
        "resolution": result.resolution,
        "world_size": result.state.terrain.world_size,
        "seed": result.state.terrain.noise.seed,
        "generated_at": datetime.now(timezone.utc).isoformat(),
    }

    np.savez_compressed(
        path,
        heightmap=result.heightmap,
        positions=result.buffers.positions,
        normals=result.buffers.normals,
        uvs=result.buffers.uvs,
        indices=result.buffers.indices,
        splat_map=result.splat_map,
        state=np.frombuffer(
            result.state.model_dump_json().encode("utf-8"), dtype=np.uint8
        ),
        metadata=np.frombuffer(json.dumps(metadata).encode("utf-8"), dtype=np.uint8),
    )

    file_size = path.stat().st_size / (1024 * 1024)
    logger.info("terrain_saved", path=str(path), size_mb=round(file_size, 2))
    return path


def load_terrain(path: Path) -> tuple[GenerationResult, dict]:
    """Load a generation result from disk.

    Args:
        path: Path to .npz file.

    Returns:
        Tuple of (GenerationResult, metadata dict).

    Raises:
        FileNotFoundError: If file doesn't exist.
        ValueError: If file format is invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Terrain file not found: {path}")

    with np.load(path) as data:
        missing = [name for name in (*_ARRAYS, "state") if name not in data]
        if missing:
            raise ValueError(f"Invalid terrain file: missing {', '.join(missing)}")

        arrays = {name: data[name] for name in _ARRAYS}
        state = TerrainState.model_validate_json(data["state"].tobytes().decode("utf-8"))

        if "metadata" in data:
            metadata = json.loads(data["metadata"].tobytes().decode("utf-8"))
        else:
            metadata = {}

    result = GenerationResult(
        heightmap=arrays["heightmap"],
        buffers=GeometryBuffers(
            positions=arrays["positions"],
            normals=arrays["normals"],
            uvs=arrays["uvs"],
            indices=arrays["indices"],
        ),
        splat_map=arrays["splat_map"],
        state=state,
    )

    logger.info("terrain_loaded", path=str(path), resolution=result.resolution)
    return result, metadata
