"""Tangent-space normal maps derived from image luminance."""

from pathlib import Path

import numpy as np
from numpy.typing import NDArray
from PIL import Image, UnidentifiedImageError
from scipy import ndimage

from .exceptions import InvalidConfigError
from .validation import require_strength

# ITU-R BT.601 luma weights
LUMINANCE_WEIGHTS = np.array([0.299, 0.587, 0.114], dtype=np.float64)

NEUTRAL_NORMAL = (128, 128, 255, 255)


def _as_pixels(image: Image.Image | NDArray[np.uint8]) -> NDArray[np.uint8]:
    if isinstance(image, Image.Image):
        return np.asarray(image.convert("RGBA"))

    pixels = np.asarray(image)
    if pixels.ndim != 3 or pixels.shape[2] not in (3, 4):
        raise InvalidConfigError(
            f"image must have shape (height, width, 3|4), got {pixels.shape}"
        )
    return pixels


def luminance(pixels: NDArray) -> NDArray[np.float64]:
    """Per-pixel luminance of an RGB(A) array, in [0, 255]."""
    return pixels[..., :3].astype(np.float64) @ LUMINANCE_WEIGHTS


def derive_normal_map(
    image: Image.Image | NDArray[np.uint8],
    strength: float,
) -> Image.Image | NDArray[np.uint8]:
    """Derive a tangent-space normal map using the Sobel operator.

    Gradients are taken on luminance with edge-clamped sampling. The
    vector (-gx * s, -gy * s, 1) with s = strength / 255 is normalized
    and encoded as R = (nx + 1) / 2, G = (ny + 1) / 2, B = nz, A = 255,
    each scaled to bytes with half-up rounding.

    Args:
        image: RGB(A) pixels as an (height, width, 3|4) uint8 array, or
            a PIL image.
        strength: Bump strength, >= 0. Zero yields a flat map.

    Returns:
        Normal map of the same size: an (height, width, 4) uint8 array
        for array input, an RGBA PIL image for PIL input.

    Raises:
        InvalidConfigError: If strength is invalid or the image is malformed.
    """
    strength = require_strength(strength)
    pixels = _as_pixels(image)
    height, width = pixels.shape[:2]
    if height == 0 or width == 0:
        raise InvalidConfigError(f"image is empty ({width}x{height})")

    lum = luminance(pixels)
    gx = ndimage.sobel(lum, axis=1, mode="nearest")
    gy = ndimage.sobel(lum, axis=0, mode="nearest")

    scale = strength / 255
    nx = -gx * scale
    ny = -gy * scale
    nz = np.ones_like(nx)

    length = np.sqrt(nx * nx + ny * ny + nz * nz)
    nx /= length
    ny /= length
    nz /= length

    encoded = np.empty((height, width, 4), dtype=np.uint8)
    encoded[..., 0] = _encode((nx + 1) / 2 * 255)
    encoded[..., 1] = _encode((ny + 1) / 2 * 255)
    encoded[..., 2] = _encode(nz * 255)
    encoded[..., 3] = 255

    if isinstance(image, Image.Image):
        return Image.fromarray(encoded)
    return encoded


def _encode(channel: NDArray[np.float64]) -> NDArray[np.uint8]:
    return np.clip(np.floor(channel + 0.5), 0, 255).astype(np.uint8)


def load_image(path: Path) -> NDArray[np.uint8]:
    """Load an image file as an (height, width, 4) RGBA array.

    Raises:
        FileNotFoundError: If file doesn't exist.
        InvalidConfigError: If the file is not a readable image.
    """
    if not path.exists():
        raise FileNotFoundError(f"Image file not found: {path}")
    try:
        with Image.open(path) as img:
            return np.asarray(img.convert("RGBA")).copy()
    except UnidentifiedImageError as e:
        raise InvalidConfigError(f"Not a readable image: {path}") from e


def save_image(path: Path, pixels: NDArray[np.uint8]) -> None:
    """Save an (height, width, 3|4) uint8 array as an image file."""
    Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8)).save(path)
