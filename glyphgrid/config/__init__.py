"""glyphgrid configuration: render settings and service settings."""
