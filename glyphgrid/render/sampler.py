"""
glyphgrid Render: Sampler

Converts decoded RGBA pixel buffers into glyph-art grids. Each output cell
covers one region of the source image; its average luminance picks a glyph
from the configured character ramp.

Resampling uses OpenCV's area filter (INTER_AREA) on the 8-bit buffer. When
the grid is smaller than the image, every cell is the area-weighted mean of
the source pixels it covers. When the grid is larger, OpenCV falls back to
bilinear interpolation, so cells between two source pixels blend them. All
later channel math floors and clamps to [0, 255] after each step.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import cv2
import numpy as np

from glyphgrid.config.render_config import RenderConfig

from .errors import DegenerateGridError
from .pixels import PixelBuffer
from .ramps import DEFAULT_REGISTRY, RampRegistry

logger = logging.getLogger("glyphgrid.render.sampler")

# ITU-R BT.601 luma weights
LUMA_R = 0.299
LUMA_G = 0.587
LUMA_B = 0.114


@dataclass(frozen=True)
class AsciiGrid:
    """Rendered glyph rows, all ``width`` characters long."""

    rows: tuple[str, ...]
    width: int
    height: int

    @property
    def lines(self) -> list[str]:
        return list(self.rows)

    def to_text(self) -> str:
        """Rows joined into plain text, each row ending in a newline."""
        return "".join(row + "\n" for row in self.rows)

    def __str__(self) -> str:
        return self.to_text()


class Sampler:
    """Maps pixel buffers to glyph grids using ramps from ``registry``.

    Instances hold no per-call state; one sampler may serve any number of
    threads.
    """

    def __init__(self, registry: Optional[RampRegistry] = None):
        self.registry = registry if registry is not None else DEFAULT_REGISTRY

    def render(self, pixels: PixelBuffer, config: RenderConfig) -> AsciiGrid:
        """Render ``pixels`` into a grid of glyphs.

        Raises
        ------
        DegenerateGridError
            If the effective sampling grid has zero rows or columns.
        UnknownRampError
            If ``config.ramp_id`` is not registered.
        """
        width, height = _sampling_size(config)
        ramp = self.registry.lookup(config.ramp_id)

        indices = sample_indices(pixels, config, len(ramp))
        rows = tuple("".join(ramp[i] for i in row) for row in indices)
        logger.debug(
            "Rendered %dx%d grid with ramp %r (%d glyphs)",
            width, height, config.ramp_id, len(ramp),
        )
        return AsciiGrid(rows=rows, width=width, height=height)


def _sampling_size(config: RenderConfig) -> tuple[int, int]:
    width = config.sampling_width
    height = config.sampling_height
    if width < 1 or height < 1:
        raise DegenerateGridError(
            f"sampling grid {width}x{height} is empty "
            f"({config.target_width}x{config.target_height} at resolution {config.resolution_factor}); "
            "raise the resolution factor or the target size"
        )
    return width, height


def _scale_channels(channels: np.ndarray, factor: float) -> np.ndarray:
    """Multiply channel values by ``factor``, flooring and clamping to 0-255."""
    return np.clip(np.floor(channels * factor), 0, 255)


def preprocess(pixels: PixelBuffer, config: RenderConfig) -> np.ndarray:
    """Resample to the sampling grid and apply the color adjustments.

    Returns a float64 array of shape (rows, cols, 3) holding whole-number RGB
    values in [0, 255]. Steps run in order: area resample (bilinear when
    upscaling), grayscale (channel
    mean), brightness multiply, contrast multiply. Contrast is a plain second
    multiplier, not a stretch around mid-gray. Alpha is dropped.
    """
    width, height = _sampling_size(config)
    small = cv2.resize(pixels.data.copy(), (width, height), interpolation=cv2.INTER_AREA)
    rgb = small[:, :, :3].astype(np.float64)

    if config.grayscale:
        mean = np.floor(rgb.sum(axis=2) / 3)
        rgb = np.repeat(mean[:, :, np.newaxis], 3, axis=2)

    rgb = _scale_channels(rgb, config.brightness)
    rgb = _scale_channels(rgb, config.contrast)
    return rgb


def luminance(rgb: np.ndarray, grayscale: bool) -> np.ndarray:
    """Per-cell brightness in [0, 255] from an (..., 3) RGB array."""
    r = rgb[..., 0]
    g = rgb[..., 1]
    b = rgb[..., 2]
    if grayscale:
        return (r + g + b) / 3
    return LUMA_R * r + LUMA_G * g + LUMA_B * b


def ramp_index(brightness: np.ndarray, ramp_length: int, invert: bool = False) -> np.ndarray:
    """Map brightness values to ramp indices.

    ``floor((B / 255) * (ramp_length - 1))`` clamped to the ramp, mirrored to
    ``ramp_length - 1 - idx`` when ``invert`` is set. A one-glyph ramp always
    yields index 0.
    """
    if ramp_length < 1:
        raise ValueError("ramp_length must be at least 1")
    n = ramp_length - 1
    indices = np.floor((brightness / 255) * n).astype(np.int64)
    indices = np.clip(indices, 0, n)
    if invert:
        indices = n - indices
    return indices


def sample_indices(pixels: PixelBuffer, config: RenderConfig, ramp_length: int) -> np.ndarray:
    """Ramp index for every cell of the sampling grid, shape (rows, cols)."""
    rgb = preprocess(pixels, config)
    return ramp_index(luminance(rgb, config.grayscale), ramp_length, config.invert)


_DEFAULT_SAMPLER = Sampler()


def render(pixels: PixelBuffer, config: RenderConfig, registry: Optional[RampRegistry] = None) -> AsciiGrid:
    """Render ``pixels`` with ``config``; see :meth:`Sampler.render`."""
    sampler = Sampler(registry) if registry is not None else _DEFAULT_SAMPLER
    return sampler.render(pixels, config)


def render_text(pixels: PixelBuffer, config: RenderConfig, registry: Optional[RampRegistry] = None) -> str:
    """Render ``pixels`` and return the plain-text grid."""
    return render(pixels, config, registry).to_text()
