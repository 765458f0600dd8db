"""
Render configuration: the validated settings consumed by the sampler.

Raw settings arrive from the CLI, the HTTP API or a JSON settings file using
the keys listed in DEFAULT_SETTINGS. ``normalize()`` clamps them into the
supported ranges and returns an immutable RenderConfig.
"""

from __future__ import annotations

import copy
import json
import logging
import math
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from glyphgrid.render.errors import InvalidConfigError, UnknownRampError
from glyphgrid.render.ramps import DEFAULT_RAMP_ID, DEFAULT_REGISTRY, RampRegistry

logger = logging.getLogger("glyphgrid.config")

# ── Defaults ──────────────────────────────────────────────────────────────

DEFAULT_SETTINGS: dict[str, Any] = {
    "width": 100,
    # None: derive from the image aspect ratio, or DEFAULT_HEIGHT without one
    "height": None,
    "resolution": 1.0,
    "fontSize": 6,
    "brightness": 1.0,
    "contrast": 1.0,
    "inverted": False,
    "grayscale": True,
    "characterSet": DEFAULT_RAMP_ID,
}

# ── Ranges ────────────────────────────────────────────────────────────────

WIDTH_RANGE = (20, 200)
HEIGHT_RANGE = (10, 150)
RESOLUTION_RANGE = (0.5, 3.0)
BRIGHTNESS_RANGE = (0.3, 2.5)
CONTRAST_RANGE = (0.3, 2.5)
FONT_SIZE_RANGE = (3, 16)

# Glyphs are roughly twice as tall as they are wide
GLYPH_ASPECT_CORRECTION = 0.5

DEFAULT_HEIGHT = 50

_TRUE_STRINGS = ("true", "1", "yes", "on")
_FALSE_STRINGS = ("false", "0", "no", "off")


@dataclass(frozen=True)
class RenderConfig:
    """Validated render settings.

    The effective sampling grid is ``floor(target_width * resolution_factor)``
    columns by ``floor(target_height * resolution_factor)`` rows. ``font_size``
    only matters to displays; the sampler ignores it.
    """

    target_width: int
    target_height: int
    resolution_factor: float = 1.0
    brightness: float = 1.0
    contrast: float = 1.0
    grayscale: bool = True
    invert: bool = False
    ramp_id: str = DEFAULT_RAMP_ID
    font_size: int = 6

    def __post_init__(self):
        for name in ("target_width", "target_height", "resolution_factor", "brightness", "contrast"):
            value = getattr(self, name)
            if not math.isfinite(value) or value <= 0:
                raise InvalidConfigError(f"{name} must be a positive finite number, got {value!r}")

    @property
    def sampling_width(self) -> int:
        return math.floor(self.target_width * self.resolution_factor)

    @property
    def sampling_height(self) -> int:
        return math.floor(self.target_height * self.resolution_factor)

    def to_dict(self) -> dict:
        d = asdict(self)
        d["sampling_width"] = self.sampling_width
        d["sampling_height"] = self.sampling_height
        return d

    def to_settings(self) -> dict[str, Any]:
        """Express this config with the raw setting keys."""
        return {
            "width": self.target_width,
            "height": self.target_height,
            "resolution": self.resolution_factor,
            "fontSize": self.font_size,
            "brightness": self.brightness,
            "contrast": self.contrast,
            "inverted": self.invert,
            "grayscale": self.grayscale,
            "characterSet": self.ramp_id,
        }


def _clamp(value: float, bounds: tuple[float, float]) -> float:
    lo, hi = bounds
    return max(lo, min(hi, value))


def _number(raw: Mapping[str, Any], key: str) -> float:
    value = raw.get(key)
    if value is None:
        value = DEFAULT_SETTINGS[key]
    if isinstance(value, bool):
        raise InvalidConfigError(f"{key} must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        raise InvalidConfigError(f"{key} must be a number, got {value!r}") from None
    if not math.isfinite(number):
        raise InvalidConfigError(f"{key} must be finite, got {value!r}")
    return number


def _flag(raw: Mapping[str, Any], key: str) -> bool:
    value = raw.get(key)
    if value is None:
        return bool(DEFAULT_SETTINGS[key])
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise InvalidConfigError(f"{key} must be a boolean, got {value!r}")


def normalize(
    raw: Optional[Mapping[str, Any]] = None,
    image_aspect_ratio: Optional[float] = None,
    registry: Optional[RampRegistry] = None,
) -> RenderConfig:
    """Clamp raw settings into a RenderConfig.

    Args:
        raw: Mapping with any of the DEFAULT_SETTINGS keys. Missing keys use
            the defaults. The mapping is never modified.
        image_aspect_ratio: Image height / width. When given and ``raw`` has no
            height, the height is derived as
            ``floor(width * image_aspect_ratio * 0.5)``.
        registry: Ramp registry used to check ``characterSet``.

    Raises:
        InvalidConfigError: unknown ``characterSet``, non-numeric or
            non-finite values, or a non-positive aspect ratio.
    """
    raw = raw or {}
    if registry is None:
        registry = DEFAULT_REGISTRY

    width = math.floor(_clamp(_number(raw, "width"), WIDTH_RANGE))
    resolution = _clamp(_number(raw, "resolution"), RESOLUTION_RANGE)

    if raw.get("height") is not None:
        height = math.floor(_clamp(_number(raw, "height"), HEIGHT_RANGE))
    elif image_aspect_ratio is not None:
        try:
            aspect = float(image_aspect_ratio)
        except (TypeError, ValueError):
            raise InvalidConfigError(f"image aspect ratio must be a number, got {image_aspect_ratio!r}") from None
        if not math.isfinite(aspect) or aspect <= 0:
            raise InvalidConfigError(f"image aspect ratio must be positive and finite, got {image_aspect_ratio!r}")
        height = math.floor(width * aspect * GLYPH_ASPECT_CORRECTION)
        # very wide images must still sample at least one row
        height = max(height, math.ceil(1 / resolution))
    else:
        height = DEFAULT_HEIGHT

    ramp_id = raw.get("characterSet")
    if ramp_id is None:
        ramp_id = DEFAULT_SETTINGS["characterSet"]
    if not isinstance(ramp_id, str):
        raise InvalidConfigError(f"characterSet must be a string, got {ramp_id!r}")
    try:
        registry.lookup(ramp_id)
    except UnknownRampError as e:
        raise InvalidConfigError(str(e)) from e

    config = RenderConfig(
        target_width=width,
        target_height=height,
        resolution_factor=resolution,
        brightness=_clamp(_number(raw, "brightness"), BRIGHTNESS_RANGE),
        contrast=_clamp(_number(raw, "contrast"), CONTRAST_RANGE),
        grayscale=_flag(raw, "grayscale"),
        invert=_flag(raw, "inverted"),
        ramp_id=ramp_id,
        font_size=math.floor(_clamp(_number(raw, "fontSize"), FONT_SIZE_RANGE)),
    )
    logger.debug("Normalized settings to %s", config)
    return config


# ── Settings files ────────────────────────────────────────────────────────


def load_settings(path: Union[str, Path]) -> dict[str, Any]:
    """Read a JSON settings file and merge it over DEFAULT_SETTINGS.

    Unknown keys are kept; ``normalize()`` ignores them.
    """
    path = Path(path)
    try:
        saved = json.loads(path.read_text(encoding="utf-8"))
    except UnicodeDecodeError as e:
        raise InvalidConfigError(f"settings file {path} is not UTF-8 text: {e}") from e
    except json.JSONDecodeError as e:
        raise InvalidConfigError(f"settings file {path} is not valid JSON: {e}") from e
    if not isinstance(saved, dict):
        raise InvalidConfigError(f"settings file {path} must contain a JSON object")
    settings = copy.deepcopy(DEFAULT_SETTINGS)
    settings.update(saved)
    logger.info("Loaded render settings from %s", path)
    return settings


def save_settings(settings: Mapping[str, Any], path: Union[str, Path]) -> Path:
    """Write settings as pretty-printed JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(dict(settings), indent=2), encoding="utf-8")
    return path
