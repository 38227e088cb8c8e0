# btfslice/constants.py
from enum import IntEnum, IntFlag

import numpy as np

# Sample and pixel storage types
SAMPLE_DTYPE = np.float32
PIXEL_DTYPE = np.dtype("<u4")

BYTES_PER_PIXEL = 4
OPAQUE_ALPHA = 0xFF

# sRGB opto-electronic transfer function
SRGB_LINEAR_THRESHOLD = np.float32(0.0031308)
SRGB_LINEAR_SCALE = np.float32(12.92)
SRGB_GAMMA_SCALE = np.float32(1.055)
SRGB_GAMMA_OFFSET = np.float32(0.055)
SRGB_GAMMA_EXPONENT = np.float32(1.0 / 2.4)

# TGA header: 18 bytes, every multi-byte field little-endian
TGA_HEADER_FORMAT = "<BBBHHBHHHHBB"
TGA_HEADER_SIZE = 18
TGA_MAX_DIMENSION = 0xFFFF
TGA_PIXEL_DEPTH = 32

DEFAULT_OUTPUT_PATH = "output.tga"


class TGAImageType(IntEnum):
    NO_IMAGE_DATA = 0
    UNCOMPRESSED_COLOR_MAPPED = 1
    UNCOMPRESSED_TRUE_COLOR = 2
    UNCOMPRESSED_BLACK_AND_WHITE = 3
    RUN_LENGTH_COLOR_MAPPED = 9
    RUN_LENGTH_TRUE_COLOR = 10
    RUN_LENGTH_BLACK_AND_WHITE = 11


class TGAMask(IntFlag):
    IMAGE_TYPE_RLE = 1 << 3
    RIGHT_BIT = 1 << 4
    TOP_BIT = 1 << 5
    RLE = 1 << 7
