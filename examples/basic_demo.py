# examples/basic_demo.py
"""
Build a small synthetic BTF, then render a few of its light/view slices to TGA.

The synthetic material is a checkerboard whose brightness follows a simple
cosine falloff with the light direction and shifts hue with the view
direction, so neighbouring slices look visibly different.
"""

import logging
import os

import numpy as np

from btfslice import build_raster, load_btf, destroy_btf, save_tga
from btfslice.logging_config import configure_logging


def generate_synthetic_btf(
    lights: int = 4, views: int = 3, height: int = 64, width: int = 96, tile: int = 8
) -> np.ndarray:
    """Return a (lights, views, height, width, 3) float32 array of linear radiance."""
    y, x = np.mgrid[0:height, 0:width]
    checker = ((x // tile + y // tile) % 2).astype(np.float32)
    albedo = 0.15 + 0.7 * checker

    data = np.empty((lights, views, height, width, 3), dtype=np.float32)
    for li in range(lights):
        theta = np.pi / 2 * li / max(1, lights)
        irradiance = np.cos(theta)
        for vi in range(views):
            tint = np.array([1.0, 1.0 - 0.3 * vi / max(1, views), 0.6 + 0.4 * vi / max(1, views)],
                            dtype=np.float32)
            data[li, vi] = (albedo * irradiance)[..., None] * tint
    return data


def main():
    configure_logging(console_level=logging.INFO)
    out_dir = "demo_output"
    os.makedirs(out_dir, exist_ok=True)

    btf_path = os.path.join(out_dir, "synthetic_btf.npy")
    np.save(btf_path, generate_synthetic_btf())
    print(f"Saved synthetic BTF to {btf_path}")

    btf = load_btf(btf_path)
    try:
        for light_index, view_index in [(0, 0), (2, 1), (3, 2)]:
            out_path = os.path.join(out_dir, f"slice_l{light_index}_v{view_index}.tga")
            with build_raster(btf, light_index, view_index) as pixels:
                size = save_tga(out_path, btf.width, btf.height, pixels)
            print(f"Wrote {out_path} ({size} bytes)")
    finally:
        destroy_btf(btf)


if __name__ == "__main__":
    main()
