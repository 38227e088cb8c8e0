# btfslice/__init__.py
"""
btf-slice - render single light/view slices of BTF datasets to TGA images
"""

from .color import encode_pixels, linear_to_srgb, to_color, unpack_color
from .dataset import (BTFDataset, BTFLoadError, destroy_btf, fetch_spectrum,
                      load_btf, open_btf)
from .raster import PixelBuffer, build_raster
from .tga import TGAHeader, TGAWriteError, read_tga_header, save_tga, write_tga

__version__ = "1.0.0"
__all__ = [
    "linear_to_srgb",
    "encode_pixels",
    "to_color",
    "unpack_color",
    "BTFDataset",
    "BTFLoadError",
    "load_btf",
    "fetch_spectrum",
    "destroy_btf",
    "open_btf",
    "PixelBuffer",
    "build_raster",
    "TGAHeader",
    "TGAWriteError",
    "write_tga",
    "save_tga",
    "read_tga_header",
]
