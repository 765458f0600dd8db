"""Exceptions raised by the glyphgrid rendering core and its collaborators."""


class GlyphGridError(Exception):
    """Base class for all glyphgrid failures."""
    pass


class UnknownRampError(GlyphGridError, KeyError):
    """Raised when a ramp id is not present in the registry."""

    def __init__(self, ramp_id: str, available=()):
        self.ramp_id = ramp_id
        self.available = list(available)
        super().__init__(ramp_id)

    def __str__(self) -> str:
        if self.available:
            return f"Unknown character ramp {self.ramp_id!r}. Available: {self.available}"
        return f"Unknown character ramp {self.ramp_id!r}"


class InvalidConfigError(GlyphGridError, ValueError):
    """Raised when a raw configuration value cannot be normalized."""
    pass


class DegenerateGridError(GlyphGridError, ValueError):
    """Raised when the effective sampling grid has zero rows or columns."""
    pass


class ImageDecodeError(GlyphGridError, ValueError):
    """Raised when image bytes or a file cannot be decoded to pixels."""
    pass


class ClipboardUnavailableError(GlyphGridError, RuntimeError):
    """Raised when no working clipboard command exists on this machine."""
    pass
