import numpy as np
import pytest
from PIL import Image

from combiner.chainable.basex import PixelBuffer, LogManager


@pytest.fixture(autouse=True)
def reset_log_manager():
    yield
    LogManager.cleanup()


@pytest.fixture
def first_pixels() -> np.ndarray:
    """2x1 RGBA image: one red pixel, one green pixel."""
    return np.array([[[255, 0, 0, 255], [0, 255, 0, 255]]], dtype=np.uint8)


@pytest.fixture
def second_pixels() -> np.ndarray:
    """2x1 RGBA image: one blue pixel, one half-transparent white pixel."""
    return np.array([[[0, 0, 255, 255], [255, 255, 255, 128]]], dtype=np.uint8)


@pytest.fixture
def first_buffer(first_pixels) -> PixelBuffer:
    return PixelBuffer.from_array(first_pixels)


@pytest.fixture
def second_buffer(second_pixels) -> PixelBuffer:
    return PixelBuffer.from_array(second_pixels)


@pytest.fixture
def write_image(tmp_path):
    """Write a (height, width, channels) uint8 array to tmp_path with Pillow."""
    def _write(name: str, pixels: np.ndarray, fmt: str = 'PNG'):
        path = tmp_path / name
        image = Image.fromarray(pixels)
        if fmt == 'JPEG':
            image = image.convert('RGB')
        image.save(path, format=fmt)
        return path
    return _write
