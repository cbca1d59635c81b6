"""Terrain configuration models and TOML loading.

The application state (terrain, texture slots and render toggles) is a
single immutable ``TerrainState`` value held by the caller. Transitions
return a new, revalidated state rather than mutating in place.
"""

import tomllib
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, model_validator

from .exceptions import ConfigNotFoundError

SlotId = Literal[0, 1, 2]


class NoiseConfig(BaseModel, frozen=True):
    """Fractal noise parameters."""

    seed: int = Field(default=12345, description="Permutation seed")
    frequency: float = Field(
        default=2.0, gt=0, allow_inf_nan=False, description="Base frequency"
    )
    # Declared but never consumed by fbm, which always starts at amplitude 1
    amplitude: float = Field(
        default=1.0, allow_inf_nan=False, description="Unused base amplitude"
    )
    octaves: int = Field(default=4, ge=0, description="Number of octaves")
    lacunarity: float = Field(
        default=2.0,
        gt=0,
        allow_inf_nan=False,
        description="Frequency multiplier per octave",
    )
    persistence: float = Field(
        default=0.5, gt=0, le=1, description="Amplitude multiplier per octave"
    )


class TerrainConfig(BaseModel, frozen=True):
    """Terrain grid and size parameters."""

    world_size: float = Field(
        default=100.0, gt=0, allow_inf_nan=False, description="Edge length in world units"
    )
    resolution: int = Field(default=128, ge=2, description="Vertices per edge")
    noise: NoiseConfig = Field(default_factory=NoiseConfig)


class TextureSlot(BaseModel, frozen=True):
    """One of the three blend slots and its height/slope ranges."""

    index: SlotId
    name: str = ""
    diffuse_source: str = Field(default="", description="Opaque diffuse image handle")
    normal_source: str | None = Field(
        default=None, description="Normal map handle (None = derive from diffuse)"
    )
    height_start: float = Field(default=0.0, ge=0, le=1)
    height_end: float = Field(default=1.0, ge=0, le=1)
    slope_start: float = Field(default=0.0, ge=0, le=1)
    slope_end: float = Field(default=1.0, ge=0, le=1)
    slope_influence: float = Field(
        default=0.0, ge=0, le=1, description="How much slope affects the blend"
    )


class RenderSettings(BaseModel, frozen=True):
    """Renderer toggles; carried for the caller, not read by the core."""

    triplanar_enabled: bool = True
    triplanar_sharpness: float = Field(default=4.0, ge=1, le=8)
    height_blend_enabled: bool = True
    height_blend_strength: float = Field(default=0.3, ge=0, le=1)
    anti_tile_enabled: bool = True
    wireframe: bool = False
    texture_scale: float = Field(default=0.1, gt=0, description="UV tiling factor")
    normal_strength: float = Field(
        default=2.0, ge=0, description="Strength for derived normal maps"
    )


DEFAULT_NOISE = NoiseConfig()

DEFAULT_TERRAIN = TerrainConfig()

DEFAULT_TEXTURES: tuple[TextureSlot, TextureSlot, TextureSlot] = (
    TextureSlot(
        index=0,
        name="Grass",
        diffuse_source="textures/dead-dry-grass.webp",
        height_start=0.0,
        height_end=0.4,
        slope_start=0.7,
        slope_end=1.0,
        slope_influence=0.3,
    ),
    TextureSlot(
        index=1,
        name="Rock",
        diffuse_source="textures/rough-gray-stone.webp",
        height_start=0.3,
        height_end=0.7,
        slope_start=0.4,
        slope_end=0.7,
        slope_influence=0.7,
    ),
    TextureSlot(
        index=2,
        name="Wood",
        diffuse_source="textures/dark-wood-planks.webp",
        height_start=0.6,
        height_end=1.0,
        slope_start=0.8,
        slope_end=1.0,
        slope_influence=0.2,
    ),
)

DEFAULT_RENDER = RenderSettings()


class TerrainState(BaseModel, frozen=True):
    """Complete caller-held terrain state."""

    terrain: TerrainConfig = Field(default_factory=lambda: DEFAULT_TERRAIN)
    textures: tuple[TextureSlot, TextureSlot, TextureSlot] = Field(
        default_factory=lambda: DEFAULT_TEXTURES
    )
    render: RenderSettings = Field(default_factory=lambda: DEFAULT_RENDER)

    @model_validator(mode="after")
    def _check_slot_order(self) -> "TerrainState":
        for position, slot in enumerate(self.textures):
            if slot.index != position:
                raise ValueError(
                    f"Texture slot at position {position} has index {slot.index}"
                )
        return self

    def _revalidate(self, **updates: Any) -> "TerrainState":
        data = self.model_dump()
        data.update(updates)
        return TerrainState.model_validate(data)

    def with_noise(self, **updates: Any) -> "TerrainState":
        """Return a state with noise parameters updated."""
        terrain = self.terrain.model_dump()
        terrain["noise"].update(updates)
        return self._revalidate(terrain=terrain)

    def with_terrain_size(
        self,
        world_size: float | None = None,
        resolution: int | None = None,
    ) -> "TerrainState":
        """Return a state with world size and/or resolution replaced."""
        terrain = self.terrain.model_dump()
        if world_size is not None:
            terrain["world_size"] = world_size
        if resolution is not None:
            terrain["resolution"] = resolution
        return self._revalidate(terrain=terrain)

    def with_texture(self, slot_id: int, **updates: Any) -> "TerrainState":
        """Return a state with one texture slot updated.

        Raises:
            IndexError: If slot_id is not 0, 1 or 2.
        """
        if slot_id not in (0, 1, 2):
            raise IndexError(f"No texture slot {slot_id}")
        textures = [slot.model_dump() for slot in self.textures]
        textures[slot_id].update(updates)
        return self._revalidate(textures=textures)

    def with_render(self, **updates: Any) -> "TerrainState":
        """Return a state with render settings updated."""
        render = self.render.model_dump()
        render.update(updates)
        return self._revalidate(render=render)

    def reset(self) -> "TerrainState":
        """Return the default state."""
        return default_state()


def default_state() -> TerrainState:
    """Build the default terrain state."""
    return TerrainState(
        terrain=DEFAULT_TERRAIN,
        textures=DEFAULT_TEXTURES,
        render=DEFAULT_RENDER,
    )


def load_config(config_path: Path) -> TerrainState:
    """Load terrain state from a TOML file.

    Missing tables fall back to defaults. Texture tables are given as
    ``[[textures]]`` entries and must list slots 0, 1 and 2 in order.

    Args:
        config_path: Path to the TOML config file.

    Returns:
        Parsed TerrainState.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If TOML is malformed.
        pydantic.ValidationError: If values are out of range.
    """
    with open(config_path, "rb") as f:
        data = tomllib.load(f)
    return TerrainState.model_validate(data)


def _configs_dir() -> Path:
    """Shipped configs: inside the installed package, else the checkout root."""
    packaged = Path(__file__).parent / "configs"
    if packaged.is_dir():
        return packaged
    return Path(__file__).parent.parent.parent / "configs"


def find_config(name: str) -> Path:
    """Find a config file by name.

    Searches in the following order:
    1. Exact path if name contains path separator or ends in .toml
    2. configs/{name}.toml
    3. configs/{name}

    Args:
        name: Config name or path.

    Returns:
        Path to the config file.

    Raises:
        ConfigNotFoundError: If config file is not found.
    """
    if "/" in name or name.endswith(".toml"):
        path = Path(name)
        if path.exists():
            return path
        raise ConfigNotFoundError(f"Config file not found: {name}")

    configs_dir = _configs_dir()

    config_path = configs_dir / f"{name}.toml"
    if config_path.exists():
        return config_path

    config_path = configs_dir / name
    if config_path.exists():
        return config_path

    raise ConfigNotFoundError(
        f"Config '{name}' not found in {configs_dir}. "
        f"Available configs: {list_configs()}"
    )


def list_configs() -> list[str]:
    """List available config names."""
    configs_dir = _configs_dir()
    if not configs_dir.exists():
        return []
    return sorted(p.stem for p in configs_dir.glob("*.toml"))
