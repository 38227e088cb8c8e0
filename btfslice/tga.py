# btfslice/tga.py
"""
Minimal TGA (Truevision TARGA) writer.

Only the legacy, uncompressed 32-bit truecolor variant is produced: an
18-byte header followed by the pixel data, with no image ID, no color map,
no footer and no extension area.

TGA stores each 32-bit pixel as B, G, R, A. Pixel words coming from
``btfslice.color`` are laid out R, G, B, A in memory, so every pixel is
reordered into a separate output buffer before writing.
"""

import logging
import os
import struct
from dataclasses import astuple, dataclass
from typing import BinaryIO, Union

import numpy as np

from .constants import (BYTES_PER_PIXEL, PIXEL_DTYPE, TGA_HEADER_FORMAT,
                        TGA_HEADER_SIZE, TGA_MAX_DIMENSION, TGA_PIXEL_DEPTH,
                        TGAImageType)
from .raster import PixelBuffer

logger = logging.getLogger(__name__)

PixelSource = Union[PixelBuffer, np.ndarray]

# Output byte i of a pixel is taken from this byte of the in-memory word
BGRA_FROM_RGBA = (2, 1, 0, 3)


class TGAWriteError(OSError):
    """Raised when a TGA file cannot be opened or fully written."""


@dataclass(frozen=True)
class TGAHeader:
    id_length: int = 0
    color_map_type: int = 0
    image_type: int = TGAImageType.UNCOMPRESSED_TRUE_COLOR
    color_map_first_entry: int = 0
    color_map_length: int = 0
    color_map_entry_size: int = 0
    x_origin: int = 0
    y_origin: int = 0
    width: int = 0
    height: int = 0
    pixel_depth: int = TGA_PIXEL_DEPTH
    image_descriptor: int = 0

    @classmethod
    def truecolor(cls, width: int, height: int) -> "TGAHeader":
        """Header for an uncompressed 32-bit truecolor image."""
        for name, value in (("width", width), ("height", height)):
            if not 0 <= int(value) <= TGA_MAX_DIMENSION:
                error_msg = f"TGA {name} must fit in 16 bits, got {value}"
                logger.error(error_msg)
                raise TGAWriteError(error_msg)
        return cls(width=int(width), height=int(height))

    def pack(self) -> bytes:
        try:
            return struct.pack(TGA_HEADER_FORMAT, *(int(v) for v in astuple(self)))
        except struct.error as e:
            raise TGAWriteError(f"Cannot serialize TGA header {self}: {e}") from e

    @classmethod
    def unpack(cls, data: bytes) -> "TGAHeader":
        if len(data) < TGA_HEADER_SIZE:
            raise ValueError(f"TGA header needs {TGA_HEADER_SIZE} bytes, got {len(data)}")
        return cls(*struct.unpack(TGA_HEADER_FORMAT, data[:TGA_HEADER_SIZE]))


def _as_words(pixels: PixelSource) -> np.ndarray:
    if isinstance(pixels, PixelBuffer):
        pixels = pixels.pixels
    return np.ascontiguousarray(pixels, dtype=PIXEL_DTYPE).reshape(-1)


def rgba_to_bgra(pixels: PixelSource) -> np.ndarray:
    """
    Reorder packed R,G,B,A pixel words into TGA's B,G,R,A byte order.

    Args:
        pixels: PixelBuffer or array of little-endian uint32 words.

    Returns:
        New uint8 array of ``4 * len(pixels)`` bytes; the input is untouched.
    """
    source = _as_words(pixels).view(np.uint8).reshape(-1, BYTES_PER_PIXEL)
    destination = np.empty_like(source)
    for out_byte, in_byte in enumerate(BGRA_FROM_RGBA):
        destination[:, out_byte] = source[:, in_byte]
    return destination.reshape(-1)


def _write_all(stream: BinaryIO, data: bytes, what: str) -> None:
    try:
        written = stream.write(data)
    except OSError as e:
        raise TGAWriteError(f"Failed to write TGA {what}: {e}") from e
    if written is not None and written != len(data):
        raise TGAWriteError(f"Short write on TGA {what}: {written} of {len(data)} bytes")


def _prepare(width: int, height: int, pixels: PixelSource):
    header = TGAHeader.truecolor(width, height)
    words = _as_words(pixels)
    if words.size != header.width * header.height:
        error_msg = f"Expected {header.width * header.height} pixels for {width}x{height}, got {words.size}"
        logger.error(error_msg)
        raise ValueError(error_msg)
    return header, words


def write_tga(stream: BinaryIO, width: int, height: int, pixels: PixelSource) -> int:
    """
    Write a complete TGA image to an open binary stream.

    Args:
        stream: Writable binary stream.
        width: Image width in pixels.
        height: Image height in pixels.
        pixels: ``width * height`` packed R,G,B,A words, row 0 first.

    Returns:
        Number of bytes written.

    Raises:
        TGAWriteError: If the dimensions do not fit the header or a write fails.
        ValueError: If the pixel count does not match the dimensions.
    """
    header, words = _prepare(width, height, pixels)
    header_bytes = header.pack()
    pixel_bytes = rgba_to_bgra(words).tobytes()
    _write_all(stream, header_bytes, "header")
    _write_all(stream, pixel_bytes, "pixel data")
    return len(header_bytes) + len(pixel_bytes)


def save_tga(
    path: Union[str, os.PathLike],
    width: int,
    height: int,
    pixels: PixelSource,
    remove_partial: bool = True,
) -> int:
    """
    Write a TGA image file, truncating any existing file at ``path``.

    Dimensions and pixel count are checked before the file is opened. If a
    write fails after the file was created, the partial file is deleted
    unless ``remove_partial`` is False.

    Returns:
        Number of bytes written.

    Raises:
        TGAWriteError: If the file cannot be opened or fully written.
    """
    path = os.fspath(path)
    # Bad arguments must not clobber an existing file
    try:
        _prepare(width, height, pixels)
    except ValueError as e:
        raise TGAWriteError(f"Cannot save {path}: {e}") from e

    try:
        stream = open(path, "wb")
    except OSError as e:
        error_msg = f"Cannot open {path} for writing: {e}"
        logger.error(error_msg)
        raise TGAWriteError(error_msg) from e

    try:
        with stream:
            size = write_tga(stream, width, height, pixels)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to save {path}: {e}")
        if remove_partial:
            _remove_partial(path)
        if isinstance(e, TGAWriteError):
            raise
        raise TGAWriteError(f"Failed to save {path}: {e}") from e

    logger.info(f"Wrote {path} ({width}x{height}, {size} bytes)")
    return size


def _remove_partial(path: str) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        return
    except OSError as e:
        logger.warning(f"Could not remove partial output {path}: {e}")
        return
    logger.debug(f"Removed partial output {path}")


def read_tga_header(path: Union[str, os.PathLike]) -> TGAHeader:
    """Parse the 18-byte header of an existing TGA file."""
    with open(path, "rb") as f:
        return TGAHeader.unpack(f.read(TGA_HEADER_SIZE))
