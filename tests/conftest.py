"""
Shared test fixtures for the glyphgrid test suite.

Provides synthetic pixel buffers and encoded images so tests never need
image files on disk.
"""

import io

import numpy as np
import pytest
from PIL import Image

from glyphgrid.render.pixels import PixelBuffer


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def make_gradient_array(w=640, h=480) -> np.ndarray:
    """RGBA array with a horizontal black-to-white gradient."""
    gray = np.linspace(0, 255, w).astype(np.uint8)
    gray = np.tile(gray, (h, 1))
    rgba = np.empty((h, w, 4), dtype=np.uint8)
    rgba[:, :, :3] = gray[:, :, np.newaxis]
    rgba[:, :, 3] = 255
    return rgba


def encode_image(array: np.ndarray, fmt: str = "PNG") -> bytes:
    """Encode a uint8 array with Pillow."""
    buf = io.BytesIO()
    Image.fromarray(array).save(buf, format=fmt)
    return buf.getvalue()


# ---------------------------------------------------------------------------
# Shared fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def gradient_pixels() -> PixelBuffer:
    return PixelBuffer.from_array(make_gradient_array())


@pytest.fixture
def mid_gray_pixels() -> PixelBuffer:
    """Every sample is (128, 128, 128, 255)."""
    return PixelBuffer.filled(64, 48, (128, 128, 128, 255))


@pytest.fixture
def gray_png_bytes() -> bytes:
    """A 40x20 mid-gray PNG."""
    return encode_image(np.full((20, 40, 3), 128, dtype=np.uint8))
