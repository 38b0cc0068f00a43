import io

import pytest
from PIL import Image

from termgreet.model import RenderConfig


def checkerboard(size: int = 2) -> Image.Image:
    """Black/white checkerboard, one pixel per square."""
    img = Image.new("RGB", (size, size))
    pixels = img.load()
    for y in range(size):
        for x in range(size):
            pixels[x, y] = (255, 255, 255) if (x + y) % 2 == 0 else (0, 0, 0)
    return img


@pytest.fixture
def stream():
    return io.StringIO()


@pytest.fixture
def image_file(tmp_path):
    """Write a solid-colour PNG and return its path."""

    def _make(colour=(255, 255, 255), size=(20, 10), name="image.png"):
        path = tmp_path / name
        Image.new("RGB", size, colour).save(path)
        return path

    return _make


@pytest.fixture
def ascii_config():
    return RenderConfig(target_cells=(4, 3), cell_pixel_size=(10, 20))
