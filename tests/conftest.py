"""Shared test fixtures for terrain tests."""

import numpy as np
import pytest

from terrainkit.config import NoiseConfig, TerrainState, TextureSlot, default_state
from terrainkit.noise import generate_permutation


@pytest.fixture
def permutation() -> np.ndarray:
    """Permutation table for seed 12345."""
    return generate_permutation(12345)


@pytest.fixture
def base_noise() -> NoiseConfig:
    """Four-octave noise at frequency 1."""
    return NoiseConfig(
        seed=12345,
        frequency=1.0,
        amplitude=1.0,
        octaves=4,
        lacunarity=2.0,
        persistence=0.5,
    )


@pytest.fixture
def blend_slots() -> list[TextureSlot]:
    """Grass, rock and snow slots with overlapping height bands.

        grass  height 0.0-0.4  slope 0.7-1.0  influence 0.5
        rock   height 0.3-0.7  slope 0.5-0.8  influence 0.5
        snow   height 0.6-1.0  slope 0.8-1.0  influence 0.3
    """
    return [
        TextureSlot(
            index=0,
            name="grass",
            height_start=0.0,
            height_end=0.4,
            slope_start=0.7,
            slope_end=1.0,
            slope_influence=0.5,
        ),
        TextureSlot(
            index=1,
            name="rock",
            height_start=0.3,
            height_end=0.7,
            slope_start=0.5,
            slope_end=0.8,
            slope_influence=0.5,
        ),
        TextureSlot(
            index=2,
            name="snow",
            height_start=0.6,
            height_end=1.0,
            slope_start=0.8,
            slope_end=1.0,
            slope_influence=0.3,
        ),
    ]


@pytest.fixture
def small_state() -> TerrainState:
    """Default state at a test-friendly resolution."""
    return default_state().with_terrain_size(resolution=17, world_size=10.0)


@pytest.fixture
def ramp_heightmap() -> np.ndarray:
    """3x3 heightmap rising linearly along +X.

        0.0  0.5  1.0
        0.0  0.5  1.0
        0.0  0.5  1.0
    """
    return np.array([0, 0.5, 1, 0, 0.5, 1, 0, 0.5, 1], dtype=np.float32)
