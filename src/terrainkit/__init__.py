"""Procedural terrain synthesis.

Seeded gradient noise, fractal heightmaps, mesh buffers, vertex normals,
height/slope texture splatting and luminance-derived normal maps. Every
core operation is a pure function of its inputs.
"""

from .config import (
    DEFAULT_NOISE,
    DEFAULT_RENDER,
    DEFAULT_TERRAIN,
    DEFAULT_TEXTURES,
    NoiseConfig,
    RenderSettings,
    TerrainConfig,
    TerrainState,
    TextureSlot,
    default_state,
    find_config,
    list_configs,
    load_config,
)
from .exceptions import ConfigNotFoundError, InvalidConfigError, TerrainError
from .generator import GenerationResult, generate_terrain
from .geometry import (
    GeometryBuffers,
    build_indices,
    build_mesh_buffers,
    build_positions,
    build_uvs,
)
from .heightmap import generate_heightmap
from .noise import fbm, generate_permutation, perlin_2d
from .normals import calculate_normals
from .persistence import load_terrain, save_terrain
from .splatting import (
    SplatWeight,
    calculate_slope,
    calculate_splat_map,
    calculate_splat_weights,
    slopes_from_normals,
)
from .texture import derive_normal_map, load_image, save_image
from .validation import ValidationResult, validate_buffers

__all__ = [
    # Config
    "NoiseConfig",
    "TerrainConfig",
    "TextureSlot",
    "RenderSettings",
    "TerrainState",
    "DEFAULT_NOISE",
    "DEFAULT_TERRAIN",
    "DEFAULT_TEXTURES",
    "DEFAULT_RENDER",
    "default_state",
    "load_config",
    "find_config",
    "list_configs",
    # Noise
    "generate_permutation",
    "perlin_2d",
    "fbm",
    # Terrain
    "generate_heightmap",
    "GeometryBuffers",
    "build_positions",
    "build_uvs",
    "build_indices",
    "build_mesh_buffers",
    "calculate_normals",
    # Splatting
    "SplatWeight",
    "calculate_slope",
    "calculate_splat_weights",
    "calculate_splat_map",
    "slopes_from_normals",
    # Texture
    "derive_normal_map",
    "load_image",
    "save_image",
    # Pipeline
    "GenerationResult",
    "generate_terrain",
    "save_terrain",
    "load_terrain",
    "ValidationResult",
    "validate_buffers",
    # Exceptions
    "TerrainError",
    "InvalidConfigError",
    "ConfigNotFoundError",
]
