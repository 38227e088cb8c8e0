# btfslice/raster.py
"""
Raster construction.

``build_raster`` walks the full texel grid of one light/view slice in
row-major order, asks the sampler for each texel exactly once, encodes the
samples with ``btfslice.color`` and stores the words in a ``PixelBuffer``.

The buffer is the only large allocation in the pipeline. It is a context
manager so callers can scope it with ``with`` and have it released on every
exit path, including failures inside the encoder.
"""

import logging
from typing import Callable, Optional, Sequence

import numpy as np

from .color import encode_pixels
from .constants import BYTES_PER_PIXEL, PIXEL_DTYPE, SAMPLE_DTYPE
from .dataset import BTFSource, fetch_spectrum

logger = logging.getLogger(__name__)

Sampler = Callable[[BTFSource, int, int, int, int], Sequence[float]]


class PixelBuffer:
    """
    Owned, contiguous row-major array of packed R,G,B,A pixel words.

    Attributes:
        width (int): Pixels per row.
        height (int): Number of rows. Row 0 is the first sampled row.
    """

    def __init__(self, width: int, height: int):
        width, height = int(width), int(height)
        if width < 0 or height < 0:
            raise ValueError(f"PixelBuffer dimensions must be non-negative, got {width}x{height}.")
        self.width = width
        self.height = height
        self._pixels: Optional[np.ndarray] = np.zeros(width * height, dtype=PIXEL_DTYPE)

    @property
    def pixels(self) -> np.ndarray:
        if self._pixels is None:
            raise ValueError("PixelBuffer has been released.")
        return self._pixels

    @property
    def released(self) -> bool:
        return self._pixels is None

    @property
    def nbytes(self) -> int:
        return self.width * self.height * BYTES_PER_PIXEL

    def row(self, y: int) -> np.ndarray:
        """Writable view of row ``y``."""
        start = y * self.width
        return self.pixels[start:start + self.width]

    def to_bytes(self) -> bytes:
        """Raw buffer contents in memory order (R, G, B, A per pixel)."""
        return self.pixels.tobytes()

    def release(self) -> None:
        self._pixels = None

    def __len__(self) -> int:
        return self.width * self.height

    def __getitem__(self, index):
        return self.pixels[index]

    def __setitem__(self, index, value) -> None:
        self.pixels[index] = value

    def __enter__(self) -> "PixelBuffer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()


def check_indices(btf: BTFSource, light_index: int, view_index: int) -> None:
    """
    Reject angular indices outside the ranges the dataset reports.

    Datasets that do not report ``light_count``/``view_count`` are trusted.

    Raises:
        IndexError: If either index is out of range.
    """
    for name, index, count in (
        ("light", light_index, getattr(btf, "light_count", None)),
        ("view", view_index, getattr(btf, "view_count", None)),
    ):
        if count is None:
            continue
        if not 0 <= index < count:
            error_msg = f"{name} index {index} out of range [0, {count})"
            logger.error(error_msg)
            raise IndexError(error_msg)


def build_raster(
    btf: BTFSource,
    light_index: int,
    view_index: int,
    sampler: Sampler = fetch_spectrum,
    validate_indices: bool = True,
) -> PixelBuffer:
    """
    Sample one light/view slice of a dataset into a pixel buffer.

    Args:
        btf: Dataset handle exposing ``width`` and ``height``.
        light_index: Illumination direction selector.
        view_index: Viewing direction selector.
        sampler: Called as ``sampler(btf, light_index, view_index, x, y)`` and
            must return a linear-light (r, g, b) triple.
        validate_indices: Check the selectors against the counts the dataset
            reports before sampling.

    Returns:
        A populated ``PixelBuffer`` owned by the caller.

    Raises:
        IndexError: If ``validate_indices`` is set and an index is out of range.
    """
    if validate_indices:
        check_indices(btf, light_index, view_index)

    width, height = int(btf.width), int(btf.height)
    logger.debug(f"Building {width}x{height} raster for light={light_index} view={view_index}")

    buffer = PixelBuffer(width, height)
    row_samples = np.empty((width, 3), dtype=SAMPLE_DTYPE)
    try:
        for y in range(height):
            for x in range(width):
                row_samples[x] = sampler(btf, light_index, view_index, x, y)
            buffer.row(y)[:] = encode_pixels(row_samples)
    except Exception:
        buffer.release()
        raise

    logger.info(f"Raster built: {width}x{height} ({buffer.nbytes} bytes)")
    return buffer
