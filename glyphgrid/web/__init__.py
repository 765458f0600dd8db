"""HTTP surface for glyphgrid."""
