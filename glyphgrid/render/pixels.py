"""
PixelBuffer: read-only RGBA sample grid handed to the sampler.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """An ``height x width x 4`` grid of 8-bit RGBA samples.

    Use :meth:`from_array` to build one from grayscale, RGB or RGBA data.
    The wrapped array is never written to.
    """

    width: int
    height: int
    data: np.ndarray

    def __post_init__(self):
        if self.width < 1 or self.height < 1:
            raise ValueError("width and height must be positive integers")
        if self.data.dtype != np.uint8:
            raise ValueError(f"pixel data must be uint8, got {self.data.dtype}")
        if self.data.shape != (self.height, self.width, 4):
            raise ValueError(
                f"pixel data shape {self.data.shape} does not match "
                f"{self.height}x{self.width}x4"
            )

    @classmethod
    def from_array(cls, array) -> PixelBuffer:
        """Wrap a uint8 array of shape (H, W), (H, W, 3) or (H, W, 4).

        Grayscale and RGB input get an opaque alpha channel. The result owns
        a private, non-writeable copy.
        """
        arr = np.asarray(array)
        if arr.dtype != np.uint8:
            raise ValueError(f"pixel data must be uint8, got {arr.dtype}")
        if arr.ndim == 2:
            arr = np.repeat(arr[:, :, np.newaxis], 3, axis=2)
        if arr.ndim != 3 or arr.shape[2] not in (3, 4):
            raise ValueError(f"expected an (H, W), (H, W, 3) or (H, W, 4) array, got {arr.shape}")
        if arr.shape[2] == 3:
            alpha = np.full(arr.shape[:2] + (1,), 255, dtype=np.uint8)
            arr = np.concatenate([arr, alpha], axis=2)
        else:
            arr = arr.copy()
        arr = np.ascontiguousarray(arr)
        arr.flags.writeable = False
        height, width = arr.shape[:2]
        return cls(width=width, height=height, data=arr)

    @classmethod
    def filled(cls, width: int, height: int, rgba=(0, 0, 0, 255)) -> PixelBuffer:
        """A uniform buffer where every sample equals ``rgba``."""
        if width < 1 or height < 1:
            raise ValueError("width and height must be positive integers")
        arr = np.empty((height, width, 4), dtype=np.uint8)
        arr[:, :] = rgba
        return cls.from_array(arr)

    @property
    def aspect_ratio(self) -> float:
        """Image height divided by image width."""
        return self.height / self.width
