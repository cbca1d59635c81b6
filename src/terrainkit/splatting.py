"""Height and slope driven texture splat weights.

Each texture slot owns a height range and a slope range. A value gets a
tent-shaped weight over each range (smoothstep up to the midpoint, back
down to the end) and the slot's ``slope_influence`` mixes the two.
"""

from dataclasses import dataclass
from typing import Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .config import TextureSlot
from .noise import smoothstep

# Normalized weights at or below this are dropped
MIN_WEIGHT = 1e-6

FALLBACK_TEXTURE_INDEX = 0


@dataclass(frozen=True)
class SplatWeight:
    """Normalized contribution of one texture."""

    texture_index: int
    weight: float


def calculate_slope(normal: Sequence[float]) -> float:
    """Map a unit normal to slope in [0, 1] (0 = flat, 1 = vertical)."""
    return 1 - normal[1]


def slopes_from_normals(normals: ArrayLike) -> NDArray[np.float32]:
    """Per-vertex slopes for an interleaved xyz normal buffer."""
    normals = np.asarray(normals, dtype=np.float32).reshape(-1, 3)
    return (1.0 - normals[:, 1]).astype(np.float32)


def range_weight(value, start: float, end: float):
    """Tent weight of value over [start, end], 1 at the midpoint.

    A zero-width or inverted range weighs nothing.

    Args:
        value: Scalar or array of values.
        start: Range start.
        end: Range end.

    Returns:
        Weight(s) in [0, 1].
    """
    value = np.asarray(value, dtype=np.float64)
    if end <= start:
        return np.zeros(value.shape)

    mid = (start + end) / 2
    rising = smoothstep(start, mid, value)
    falling = 1.0 - smoothstep(mid, end, value)
    weight = np.where(value <= mid, rising, falling)
    return np.where((value < start) | (value > end), 0.0, weight)


def _slot_weight(height, slope, slot: TextureSlot):
    height_weight = range_weight(height, slot.height_start, slot.height_end)
    slope_weight = range_weight(slope, slot.slope_start, slot.slope_end)
    return (
        height_weight * (1 - slot.slope_influence)
        + slope_weight * slot.slope_influence
    )


def calculate_splat_weights(
    height: float,
    slope: float,
    slots: Sequence[TextureSlot],
) -> list[SplatWeight]:
    """Compute the sparse, normalized texture weights at one point.

    Args:
        height: Normalized height in [0, 1].
        slope: Slope in [0, 1].
        slots: Texture slots to blend.

    Returns:
        Weights keyed by ``slot.index`` that sum to 1. When no slot
        applies, a single full weight on texture 0.
    """
    raw: list[SplatWeight] = []
    for slot in slots:
        weight = float(_slot_weight(height, slope, slot))
        if weight > 0:
            raw.append(SplatWeight(texture_index=slot.index, weight=weight))

    if not raw:
        return [SplatWeight(texture_index=FALLBACK_TEXTURE_INDEX, weight=1.0)]

    total = sum(w.weight for w in raw)
    normalized = [
        SplatWeight(texture_index=w.texture_index, weight=w.weight / total)
        for w in raw
    ]
    return [w for w in normalized if w.weight > MIN_WEIGHT]


def calculate_splat_map(
    heights: ArrayLike,
    slopes: ArrayLike,
    slots: Sequence[TextureSlot],
) -> NDArray[np.float32]:
    """Dense per-vertex form of ``calculate_splat_weights``.

    Args:
        heights: Normalized heights, any shape.
        slopes: Slopes, same number of values as heights.
        slots: Texture slots to blend.

    Returns:
        float32 array of shape (N, C) where column c holds the weight of
        texture index c and C covers every slot index (at least 1).
        Dropped entries are 0; a row with no applicable slot is all on
        column 0.
    """
    heights = np.asarray(heights, dtype=np.float64).reshape(-1)
    slopes = np.asarray(slopes, dtype=np.float64).reshape(-1)
    if heights.shape != slopes.shape:
        raise ValueError(
            f"heights and slopes differ in size: {heights.size} != {slopes.size}"
        )

    columns = max([slot.index for slot in slots] + [FALLBACK_TEXTURE_INDEX]) + 1
    weights = np.zeros((heights.size, columns), dtype=np.float64)

    for slot in slots:
        weight = _slot_weight(heights, slopes, slot)
        weights[:, slot.index] += np.where(weight > 0, weight, 0.0)

    total = weights.sum(axis=1)
    empty = total <= 0
    weights[~empty] /= total[~empty, np.newaxis]
    weights[weights <= MIN_WEIGHT] = 0.0
    weights[empty, FALLBACK_TEXTURE_INDEX] = 1.0

    return weights.astype(np.float32)
