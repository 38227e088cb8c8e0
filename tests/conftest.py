import logging

import numpy as np
import pytest


class FakeBTF:
    """Dataset stand-in backed by an (height, width, 3) array, recording every fetch."""

    def __init__(self, samples, light_count=None, view_count=None):
        self.samples = np.asarray(samples, dtype=np.float32)
        self.height, self.width = self.samples.shape[:2]
        if light_count is not None:
            self.light_count = light_count
        if view_count is not None:
            self.view_count = view_count
        self.calls = []

    def sample(self, btf, light_index, view_index, x, y):
        assert btf is self
        self.calls.append((light_index, view_index, x, y))
        return self.samples[y, x]


def make_btf_array(lights=2, views=3, height=4, width=5, seed=0):
    rng = np.random.default_rng(seed)
    return rng.random((lights, views, height, width, 3), dtype=np.float32)


@pytest.fixture
def fake_btf():
    return FakeBTF


@pytest.fixture
def btf_file(tmp_path):
    """Write a small .npy BTF and return (path, array)."""
    data = make_btf_array()
    path = tmp_path / "sample.npy"
    np.save(path, data)
    return path, data


@pytest.fixture
def red_green_btf(tmp_path):
    """1 light x 2 views, 2x1 texels: view 0 is red then green."""
    data = np.zeros((1, 2, 1, 2, 3), dtype=np.float32)
    data[0, 0, 0, 0] = (1.0, 0.0, 0.0)
    data[0, 0, 0, 1] = (0.0, 1.0, 0.0)
    data[0, 1] = 1.0
    path = tmp_path / "red_green.npy"
    np.save(path, data)
    return path


@pytest.fixture
def clean_package_logger():
    package_logger = logging.getLogger("btfslice")
    saved = list(package_logger.handlers)
    for handler in saved:
        package_logger.removeHandler(handler)
    yield package_logger
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    for handler in saved:
        package_logger.addHandler(handler)
