"""
glyphgrid: image to glyph-art rendering.

Turns decoded raster images into character grids, one glyph per sampled
region, picked from an ordered character ramp by average luminance.
"""

__version__ = "0.1.0"
