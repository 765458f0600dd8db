"""
glyphgrid Render: ramps, pixel buffers and the luminance sampler.

Import from the submodules directly (``glyphgrid.render.sampler``,
``glyphgrid.render.ramps``); this package keeps no re-exports so that
``glyphgrid.config`` can depend on the ramp table without a cycle.
"""
