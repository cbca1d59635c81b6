"""Tests for permutation, gradient noise and fBm."""

import numpy as np
import pytest
from pydantic import ValidationError

from terrainkit.config import NoiseConfig
from terrainkit.noise import (
    fbm,
    generate_permutation,
    perlin_2d,
    smoothstep,
)


class TestGeneratePermutation:
    """Tests for permutation table generation."""

    def test_length_and_dtype(self) -> None:
        """Table has 512 uint8 entries."""
        perm = generate_permutation(12345)
        assert perm.dtype == np.uint8
        assert len(perm) == 512

    @pytest.mark.parametrize("seed", [0, 1, 42, 12345, -7, 2**40])
    def test_each_value_appears_twice(self, seed: int) -> None:
        """Every byte value 0-255 appears exactly twice."""
        perm = generate_permutation(seed)
        counts = np.bincount(perm, minlength=256)
        assert np.all(counts == 2)

    def test_second_half_copies_first(self) -> None:
        """Entries 256..511 repeat entries 0..255."""
        perm = generate_permutation(99)
        np.testing.assert_array_equal(perm[:256], perm[256:])

    def test_deterministic_with_same_seed(self) -> None:
        """Same seed produces identical tables."""
        np.testing.assert_array_equal(
            generate_permutation(99999), generate_permutation(99999)
        )

    def test_different_seed_different_output(self) -> None:
        """Different seeds differ in at least one position."""
        assert not np.array_equal(generate_permutation(111), generate_permutation(222))

    def test_negative_seed_uses_absolute_value(self) -> None:
        """Seed sign is ignored."""
        np.testing.assert_array_equal(generate_permutation(-5), generate_permutation(5))

    def test_zero_seed_first_swap(self) -> None:
        """Seed 0 follows the LCG: first state 12345 swaps 255 with 57."""
        perm = generate_permutation(0)
        # 12345 % 256 == 57, so value 57 lands at index 255 first
        assert perm[255] == 57


class TestPerlin2D:
    """Tests for 2D gradient noise."""

    def test_output_range(self, permutation: np.ndarray) -> None:
        """Values stay within [-1, 1] for random points."""
        rng = np.random.default_rng(0)
        xs = rng.uniform(-50, 50, 1000)
        ys = rng.uniform(-50, 50, 1000)
        values = perlin_2d(xs, ys, permutation)
        assert values.min() >= -1.0
        assert values.max() <= 1.0

    def test_scalar_input_returns_float(self, permutation: np.ndarray) -> None:
        """Scalar coordinates give a plain float."""
        assert isinstance(perlin_2d(3.14159, 2.71828, permutation), float)

    def test_deterministic(self, permutation: np.ndarray) -> None:
        """Same inputs produce same output."""
        assert perlin_2d(3.14159, 2.71828, permutation) == perlin_2d(
            3.14159, 2.71828, permutation
        )

    def test_zero_at_lattice_points(self, permutation: np.ndarray) -> None:
        """Integer coordinates have a zero offset vector."""
        for x, y in [(0, 0), (3, 7), (-2, 5), (255, 256)]:
            assert perlin_2d(float(x), float(y), permutation) == 0.0

    def test_continuous(self, permutation: np.ndarray) -> None:
        """Nearby inputs produce nearby outputs."""
        base = perlin_2d(5.5, 7.3, permutation)
        assert abs(base - perlin_2d(5.501, 7.3, permutation)) < 0.1
        assert abs(base - perlin_2d(5.5, 7.301, permutation)) < 0.1

    def test_varies_across_space(self, permutation: np.ndarray) -> None:
        """Noise is not constant."""
        steps = np.arange(100)
        values = perlin_2d(steps * 0.5, steps * 0.3, permutation)
        assert len(np.unique(values)) > 50

    def test_array_matches_scalar(self, permutation: np.ndarray) -> None:
        """Vectorized evaluation matches scalar evaluation exactly."""
        xs = np.array([0.25, 1.7, -3.3, 12.01])
        ys = np.array([4.5, -0.1, 2.2, 9.99])
        values = perlin_2d(xs, ys, permutation)
        for x, y, value in zip(xs, ys, values):
            assert perlin_2d(float(x), float(y), permutation) == value

    def test_wraps_every_256_cells(self, permutation: np.ndarray) -> None:
        """Cell hashing repeats with period 256."""
        assert perlin_2d(1.3, 2.6, permutation) == pytest.approx(
            perlin_2d(257.3, 2.6, permutation), abs=1e-9
        )


class TestFbm:
    """Tests for fractal Brownian motion."""

    def test_output_range(self, base_noise: NoiseConfig, permutation: np.ndarray) -> None:
        """Values stay within [0, 1]."""
        rng = np.random.default_rng(1)
        xs = rng.uniform(-50, 50, 1000)
        ys = rng.uniform(-50, 50, 1000)
        values = fbm(xs, ys, base_noise, permutation)
        assert values.min() >= 0.0
        assert values.max() <= 1.0

    def test_single_octave_equals_normalized_perlin(
        self, base_noise: NoiseConfig, permutation: np.ndarray
    ) -> None:
        """One octave at frequency 1 is (perlin + 1) / 2."""
        noise = base_noise.model_copy(update={"octaves": 1, "frequency": 1.0})
        expected = (perlin_2d(3.5, 2.7, permutation) + 1) / 2
        assert fbm(3.5, 2.7, noise, permutation) == pytest.approx(expected, abs=1e-5)

    def test_zero_octaves_returns_midpoint(
        self, base_noise: NoiseConfig, permutation: np.ndarray
    ) -> None:
        """Zero octaves returns exactly 0.5, not NaN."""
        noise = base_noise.model_copy(update={"octaves": 0})
        assert fbm(5.0, 5.0, noise, permutation) == 0.5

    def test_zero_octaves_array(
        self, base_noise: NoiseConfig, permutation: np.ndarray
    ) -> None:
        """Zero octaves fills arrays with 0.5."""
        noise = base_noise.model_copy(update={"octaves": 0})
        values = fbm(np.zeros(4), np.ones(4), noise, permutation)
        np.testing.assert_array_equal(values, np.full(4, 0.5))

    def test_frequency_scales_coordinates(
        self, base_noise: NoiseConfig, permutation: np.ndarray
    ) -> None:
        """Frequency 4 at (x, y) equals frequency 1 at (4x, 4y)."""
        high = base_noise.model_copy(update={"frequency": 4.0})
        low = base_noise.model_copy(update={"frequency": 1.0})
        assert fbm(2.5, 1.5, high, permutation) == pytest.approx(
            fbm(10.0, 6.0, low, permutation), abs=1e-5
        )

    def test_amplitude_is_ignored(
        self, base_noise: NoiseConfig, permutation: np.ndarray
    ) -> None:
        """The declared amplitude does not change the output."""
        loud = base_noise.model_copy(update={"amplitude": 5.0})
        assert fbm(1.25, 0.75, loud, permutation) == fbm(
            1.25, 0.75, base_noise, permutation
        )

    def test_more_octaves_more_detail(
        self, base_noise: NoiseConfig, permutation: np.ndarray
    ) -> None:
        """More octaves add higher-frequency variation."""
        coords = np.linspace(0, 4, 400)
        low = fbm(coords, coords * 0.7, base_noise.model_copy(update={"octaves": 1}), permutation)
        high = fbm(coords, coords * 0.7, base_noise.model_copy(update={"octaves": 6}), permutation)

        assert np.var(low) > 0
        assert np.var(high) > 0

        # Count local extrema along the path
        turns_low = np.sum(np.diff(np.sign(np.diff(low))) != 0)
        turns_high = np.sum(np.diff(np.sign(np.diff(high))) != 0)
        assert turns_high > turns_low


class TestNoiseConfigValidation:
    """Tests for noise parameter bounds."""

    @pytest.mark.parametrize(
        "field,value",
        [
            ("frequency", 0.0),
            ("frequency", -1.0),
            ("octaves", -1),
            ("lacunarity", 0.0),
            ("persistence", 0.0),
            ("persistence", 1.5),
            ("frequency", float("inf")),
            ("frequency", float("nan")),
            ("lacunarity", float("inf")),
            ("amplitude", float("nan")),
        ],
    )
    def test_rejects_out_of_range(self, field: str, value: float) -> None:
        """Invalid parameters fail at construction."""
        with pytest.raises(ValidationError):
            NoiseConfig(**{field: value})

    def test_zero_octaves_allowed(self) -> None:
        """Zero octaves is a valid configuration."""
        assert NoiseConfig(octaves=0).octaves == 0


class TestSmoothstep:
    """Tests for smoothstep function."""

    def test_below_edge0_returns_zero(self) -> None:
        """Values below edge0 return 0."""
        x = np.array([-1.0, 0.0, 0.1])
        result = smoothstep(0.2, 0.8, x)
        np.testing.assert_array_equal(result, [0.0, 0.0, 0.0])

    def test_above_edge1_returns_one(self) -> None:
        """Values above edge1 return 1."""
        x = np.array([0.9, 1.0, 1.5])
        result = smoothstep(0.2, 0.8, x)
        np.testing.assert_array_equal(result, [1.0, 1.0, 1.0])

    def test_midpoint_returns_half(self) -> None:
        """Midpoint between edges returns 0.5."""
        assert smoothstep(0.0, 1.0, 0.5) == 0.5

    def test_zero_width_is_step(self) -> None:
        """Equal edges degrade to a step instead of dividing by zero."""
        result = smoothstep(0.5, 0.5, np.array([0.4, 0.5, 0.6]))
        np.testing.assert_array_equal(result, [0.0, 1.0, 1.0])
