# btfslice/color.py
"""
Linear-light to display color conversion.

Every sample passes through the same three steps, channel by channel:

1. the sRGB opto-electronic transfer function,
2. a clamp to [0, 1] (NaN becomes 0),
3. quantization with ``floor(255 * v + 0.5)``.

The math runs in float32 so results match a 32-bit float pipeline. Encoded
pixels are packed into one 32-bit word with R in the least significant byte,
then G, B and an opaque alpha in the most significant byte. That packing is an
in-memory choice only; the on-disk byte order is handled by ``btfslice.tga``.
"""

from typing import Sequence, Tuple, Union

import numpy as np

from .constants import (OPAQUE_ALPHA, PIXEL_DTYPE, SAMPLE_DTYPE,
                        SRGB_GAMMA_EXPONENT, SRGB_GAMMA_OFFSET,
                        SRGB_GAMMA_SCALE, SRGB_LINEAR_SCALE,
                        SRGB_LINEAR_THRESHOLD)

ArrayLike = Union[np.ndarray, Sequence[float], float]


def linear_to_srgb(values: ArrayLike) -> np.ndarray:
    """
    Apply the sRGB transfer function element-wise.

    Args:
        values: Linear-light channel values of any shape.

    Returns:
        float32 array of the same shape, not yet clamped.
    """
    c = np.asarray(values, dtype=SAMPLE_DTYPE)
    with np.errstate(invalid='ignore', over='ignore'):
        # The power branch only ever sees values above the threshold
        gamma = SRGB_GAMMA_SCALE * np.power(np.maximum(c, SRGB_LINEAR_THRESHOLD), SRGB_GAMMA_EXPONENT) - SRGB_GAMMA_OFFSET
        linear = c * SRGB_LINEAR_SCALE
    return np.where(c <= SRGB_LINEAR_THRESHOLD, linear, gamma).astype(SAMPLE_DTYPE, copy=False)


def quantize(values: ArrayLike) -> np.ndarray:
    """Clamp to [0, 1] and round half up to 8-bit levels (returned as uint32)."""
    v = np.asarray(values, dtype=SAMPLE_DTYPE)
    v = np.where(np.isnan(v), SAMPLE_DTYPE(0.0), v)
    v = np.clip(v, SAMPLE_DTYPE(0.0), SAMPLE_DTYPE(1.0))
    return np.floor(v * SAMPLE_DTYPE(255.0) + SAMPLE_DTYPE(0.5)).astype(np.uint32)


def pack_channels(r: np.ndarray, g: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Pack 8-bit channel levels into R,G,B,A words with alpha fully opaque."""
    r = np.asarray(r, dtype=np.uint32)
    g = np.asarray(g, dtype=np.uint32)
    b = np.asarray(b, dtype=np.uint32)
    words = r | (g << np.uint32(8)) | (b << np.uint32(16)) | np.uint32(OPAQUE_ALPHA << 24)
    return words.astype(PIXEL_DTYPE, copy=False)


def encode_pixels(samples: ArrayLike) -> np.ndarray:
    """
    Convert an array of linear-light RGB samples into packed pixel words.

    Args:
        samples: Array of shape (..., 3).

    Returns:
        Array of shape (...) holding little-endian uint32 words.

    Raises:
        ValueError: If the last axis does not hold exactly three channels.
    """
    s = np.asarray(samples, dtype=SAMPLE_DTYPE)
    if s.ndim == 0 or s.shape[-1] != 3:
        raise ValueError(f"samples must have a trailing axis of 3 channels, got shape {s.shape}")
    levels = quantize(linear_to_srgb(s))
    return pack_channels(levels[..., 0], levels[..., 1], levels[..., 2])


def to_color(sample: ArrayLike) -> int:
    """Encode a single (r, g, b) sample into one 32-bit pixel word."""
    return int(encode_pixels(sample))


def unpack_color(word: int) -> Tuple[int, int, int, int]:
    """Split a packed pixel word into its (r, g, b, a) channel levels."""
    word = int(word)
    return word & 0xFF, (word >> 8) & 0xFF, (word >> 16) & 0xFF, (word >> 24) & 0xFF
