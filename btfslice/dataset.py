# btfslice/dataset.py
"""
BTF dataset access.

A bidirectional texture function is a stack of RGB images, one per
(light direction, view direction) pair. The slicing pipeline only needs three
things from a dataset: its grid extents, a way to fetch the linear-light RGB
sample for one texel of one slice, and teardown. ``BTFSource`` captures that
contract so any loader can be plugged in.

The loader shipped here reads numpy files:

- ``.npy``: a single float array shaped ``(lights, views, height, width, 3)``,
  memory-mapped so large datasets are not read up front.
- ``.npz``: an archive holding such an array under the key ``btf`` (or as its
  only member).
"""

import logging
import os
import zipfile
import zlib
from contextlib import contextmanager
from typing import Iterator, Optional, Protocol

import numpy as np

from .constants import SAMPLE_DTYPE

logger = logging.getLogger(__name__)

NPZ_ARRAY_KEY = "btf"


class BTFLoadError(ValueError):
    """Raised when a BTF dataset cannot be opened or has an unusable layout."""


class BTFSource(Protocol):
    """Minimal interface the raster builder relies on."""

    width: int
    height: int


class BTFDataset:
    """
    In-memory (or memory-mapped) BTF.

    Attributes:
        path (str): File the dataset was loaded from, if any.
        light_count (int): Number of illumination directions.
        view_count (int): Number of viewing directions.
        width (int): Texels per row.
        height (int): Rows per slice.
    """

    def __init__(self, data: np.ndarray, path: Optional[str] = None, archive=None):
        if data.ndim != 5 or data.shape[-1] != 3:
            error_msg = f"BTF data must be shaped (lights, views, height, width, 3), got {data.shape}."
            logger.error(error_msg)
            raise BTFLoadError(error_msg)
        if 0 in data.shape:
            error_msg = f"BTF data must not have empty axes, got {data.shape}."
            logger.error(error_msg)
            raise BTFLoadError(error_msg)
        if not np.issubdtype(data.dtype, np.number):
            error_msg = f"BTF data must be numeric, got dtype {data.dtype}."
            logger.error(error_msg)
            raise BTFLoadError(error_msg)
        self._data = data
        self._archive = archive
        self.path = path
        self.light_count, self.view_count, self.height, self.width = (int(n) for n in data.shape[:4])

    @property
    def released(self) -> bool:
        return self._data is None

    @property
    def data(self) -> np.ndarray:
        if self._data is None:
            raise ValueError("BTF dataset has been released.")
        return self._data

    def fetch(self, light_index: int, view_index: int, x: int, y: int) -> np.ndarray:
        return np.asarray(self.data[light_index, view_index, y, x], dtype=SAMPLE_DTYPE)

    def release(self) -> None:
        if self._data is None:
            return
        self._data = None
        if self._archive is not None:
            self._archive.close()
            self._archive = None
        logger.debug(f"Released BTF dataset {self.path}")

    def __repr__(self) -> str:
        return (f"BTFDataset(path={self.path!r}, lights={self.light_count}, views={self.view_count}, "
                f"width={self.width}, height={self.height})")


def load_btf(path: str) -> BTFDataset:
    """
    Open a BTF dataset.

    Args:
        path: ``.npy`` or ``.npz`` file.

    Returns:
        The loaded dataset. Call ``destroy_btf`` (or use ``open_btf``) when done.

    Raises:
        BTFLoadError: If the file is missing, unreadable or has the wrong layout.
    """
    path = os.fspath(path)
    if not os.path.isfile(path):
        error_msg = f"BTF file not found: {path}"
        logger.error(error_msg)
        raise BTFLoadError(error_msg)

    logger.debug(f"Loading BTF dataset from {path}")
    try:
        loaded = np.load(path, mmap_mode='r', allow_pickle=False)
    except (OSError, EOFError, ValueError, zipfile.BadZipFile) as e:
        error_msg = f"Failed to read BTF file {path}: {e}"
        logger.error(error_msg)
        raise BTFLoadError(error_msg) from e

    if isinstance(loaded, np.lib.npyio.NpzFile):
        try:
            data = _select_npz_array(loaded, path)
            dataset = BTFDataset(data, path=path, archive=loaded)
        except BTFLoadError:
            loaded.close()
            raise
        except (OSError, ValueError, zipfile.BadZipFile, zlib.error) as e:
            loaded.close()
            error_msg = f"Failed to read BTF file {path}: {e}"
            logger.error(error_msg)
            raise BTFLoadError(error_msg) from e
    else:
        dataset = BTFDataset(loaded, path=path)

    logger.info(f"Loaded {dataset!r}")
    return dataset


def _select_npz_array(archive, path: str) -> np.ndarray:
    names = list(archive.files)
    if NPZ_ARRAY_KEY in names:
        return archive[NPZ_ARRAY_KEY]
    if len(names) == 1:
        return archive[names[0]]
    error_msg = f"{path} holds {len(names)} arrays and none is named '{NPZ_ARRAY_KEY}'."
    logger.error(error_msg)
    raise BTFLoadError(error_msg)


def fetch_spectrum(btf: BTFDataset, light_index: int, view_index: int, x: int, y: int) -> np.ndarray:
    """Return the linear-light (r, g, b) sample of texel (x, y) in one light/view slice."""
    return btf.fetch(light_index, view_index, x, y)


def destroy_btf(btf: Optional[BTFDataset]) -> None:
    """Release a dataset. Safe to call more than once."""
    if btf is not None:
        btf.release()


@contextmanager
def open_btf(path: str) -> Iterator[BTFDataset]:
    """Load a dataset and guarantee it is released when the block exits."""
    btf = load_btf(path)
    try:
        yield btf
    finally:
        destroy_btf(btf)
