"""
Image decoding: turns encoded image files into PixelBuffers.

Pillow handles the container formats (JPEG, PNG, GIF, BMP, WebP, ...). Only
the first frame of animated images is used, and EXIF orientation is applied
so the buffer matches what an image viewer shows.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from glyphgrid.render.errors import ImageDecodeError
from glyphgrid.render.pixels import PixelBuffer

logger = logging.getLogger("glyphgrid.imaging.decode")

ALLOWED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".bmp", ".tiff", ".tif", ".webp"}


def image_to_buffer(img: Image.Image) -> PixelBuffer:
    """Convert an open Pillow image to an RGBA PixelBuffer."""
    if getattr(img, "is_animated", False):
        img.seek(0)
    img = ImageOps.exif_transpose(img)
    rgba = img.convert("RGBA")
    return PixelBuffer.from_array(np.asarray(rgba, dtype=np.uint8))


def decode_bytes(data: bytes) -> PixelBuffer:
    """Decode encoded image bytes.

    Raises ImageDecodeError if the bytes are empty or not a readable image.
    """
    if not data:
        raise ImageDecodeError("Failed to decode image: no data")
    try:
        with Image.open(io.BytesIO(data)) as img:
            buffer = image_to_buffer(img)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise ImageDecodeError(f"Failed to decode image: {e}") from e
    logger.debug("Decoded %d bytes to %dx%d pixels", len(data), buffer.width, buffer.height)
    return buffer


def load_image(path: Union[str, Path]) -> PixelBuffer:
    """Read and decode an image file from disk."""
    path = Path(path)
    if path.suffix.lower() not in ALLOWED_EXTENSIONS:
        logger.warning("Unexpected image extension %r for %s; trying anyway", path.suffix, path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ImageDecodeError(f"Cannot read image {path}: {e}") from e
    return decode_bytes(data)
