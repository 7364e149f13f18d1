"""Test configuration for pngedit."""

import numpy as np
import pytest
from PIL import Image

from pngedit.types import PixelBuffer


def _solid_rgba(height: int, width: int, fill=(255, 255, 255, 255)) -> np.ndarray:
    rgba = np.empty((height, width, 4), dtype=np.uint8)
    rgba[...] = np.asarray(fill, dtype=np.uint8)
    return rgba


@pytest.fixture
def solid_rgba():
    """Factory for solid-colour RGBA arrays (H, W, 4) uint8."""
    return _solid_rgba


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def random_rgba(rng):
    """7x5 image with random colour and alpha."""
    return rng.integers(0, 256, size=(5, 7, 4), dtype=np.uint8)


@pytest.fixture
def random_buffer(random_rgba):
    height, width = random_rgba.shape[:2]
    return PixelBuffer.from_data(random_rgba.tobytes(), width, height)


@pytest.fixture
def png_path(tmp_path, random_rgba):
    """The random image written as an RGBA PNG."""
    path = tmp_path / "sample.png"
    Image.fromarray(random_rgba).save(path)
    return path
