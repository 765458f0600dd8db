"""
Character ramps for glyph-art rendering.

A ramp is an ordered tuple of single glyphs. Index 0 is drawn for zero
luminance and the last index for full luminance (before any inversion), so
the built-in ramps run from dense ink down to blank space.

The module-level registry is filled at import time and only read afterwards;
extra ramps should be registered during startup.
"""

from __future__ import annotations

import logging
from typing import Iterable, Union

from .errors import UnknownRampError

logger = logging.getLogger("glyphgrid.render.ramps")

CharacterRamp = tuple[str, ...]

# Ramps ordered from densest glyph to emptiest glyph
RAMP_STANDARD = "@%#*+=-:. "
RAMP_DENSE = "█▉▊▋▌▍▎▏ "
RAMP_BLOCKS = "██▓▒░  "
RAMP_DOTS = "●◐◑◒◓◔◕○ "
RAMP_NUMBERS = "9876543210 "
RAMP_LETTERS = "MWNXK0Okxdolc:;,. "
RAMP_SIMPLE = "█▓▒░ "
RAMP_ASCII = "$@B%8&WM#*oahkbdpqwmZO0QLCJUYXzcvunxrjft/\\|()1{}[]?-_+~<>i!lI;:,\"^`'. "
RAMP_MINIMAL = "█░ "
RAMP_BINARY = "█ "

DEFAULT_RAMP_ID = "standard"


def _as_ramp(glyphs: Union[str, Iterable[str]]) -> CharacterRamp:
    ramp = tuple(glyphs)
    if not ramp:
        raise ValueError("a character ramp needs at least one glyph")
    for glyph in ramp:
        if not isinstance(glyph, str) or len(glyph) != 1:
            raise ValueError(f"ramp entries must be single characters, got {glyph!r}")
    return ramp


class RampRegistry:
    """Lookup table from ramp id to character ramp."""

    def __init__(self, ramps: dict[str, Union[str, Iterable[str]]] | None = None):
        self._ramps: dict[str, CharacterRamp] = {}
        for ramp_id, glyphs in (ramps or {}).items():
            self.register(ramp_id, glyphs)

    def register(self, ramp_id: str, glyphs: Union[str, Iterable[str]], replace: bool = False) -> CharacterRamp:
        """Add a ramp under ``ramp_id`` and return it as a tuple.

        Raises ValueError for an empty ramp, a multi-character entry, or an
        id that is already taken (unless ``replace`` is set).
        """
        if not ramp_id:
            raise ValueError("ramp id must be a non-empty string")
        if ramp_id in self._ramps and not replace:
            raise ValueError(f"ramp {ramp_id!r} is already registered")
        ramp = _as_ramp(glyphs)
        self._ramps[ramp_id] = ramp
        logger.debug("Registered ramp %r (%d glyphs)", ramp_id, len(ramp))
        return ramp

    def lookup(self, ramp_id: str) -> CharacterRamp:
        try:
            return self._ramps[ramp_id]
        except (KeyError, TypeError):
            raise UnknownRampError(ramp_id, self.names()) from None

    def names(self) -> list[str]:
        return list(self._ramps)

    def as_strings(self) -> dict[str, str]:
        """Ramps joined back into strings, keyed by id."""
        return {ramp_id: "".join(ramp) for ramp_id, ramp in self._ramps.items()}

    def __contains__(self, ramp_id: object) -> bool:
        return ramp_id in self._ramps

    def __len__(self) -> int:
        return len(self._ramps)


DEFAULT_REGISTRY = RampRegistry({
    "standard": RAMP_STANDARD,
    "dense": RAMP_DENSE,
    "blocks": RAMP_BLOCKS,
    "dots": RAMP_DOTS,
    "numbers": RAMP_NUMBERS,
    "letters": RAMP_LETTERS,
    "simple": RAMP_SIMPLE,
    "ascii": RAMP_ASCII,
    "minimal": RAMP_MINIMAL,
    "binary": RAMP_BINARY,
})


def lookup(ramp_id: str) -> CharacterRamp:
    """Resolve ``ramp_id`` against the default registry."""
    return DEFAULT_REGISTRY.lookup(ramp_id)
