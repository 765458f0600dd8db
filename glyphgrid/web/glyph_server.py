"""
glyphgrid: Glyph Art HTTP Service

FastAPI service that:
- Renders uploaded images (base64 or data URLs) into glyph art
- Returns the art as JSON or as a downloadable ascii-art.txt
- Lists the registered character ramps and default settings

Port: 8095 (configurable via GLYPHGRID_PORT env var)

Usage:
    glyphgrid-server
    glyphgrid-server --port 9000 --debug
"""

import argparse
import asyncio
import base64
import binascii
import logging
import time
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, ConfigDict, Field

from glyphgrid import __version__
from glyphgrid.config.render_config import DEFAULT_SETTINGS, normalize
from glyphgrid.config.service_config import ServiceConfig
from glyphgrid.export import DEFAULT_FILENAME
from glyphgrid.imaging.decode import decode_bytes
from glyphgrid.render.errors import GlyphGridError, ImageDecodeError
from glyphgrid.render.ramps import DEFAULT_REGISTRY
from glyphgrid.render.sampler import AsciiGrid, render
from glyphgrid.utils.logging_config import setup_logging

logger = logging.getLogger("glyphgrid.server")

_start_time = time.time()


# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------

app = FastAPI(title="glyphgrid", version=__version__)
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------

class RenderSettings(BaseModel):
    """Raw render settings; ranges are clamped later by normalize()."""

    model_config = ConfigDict(extra="ignore")

    width: Optional[float] = None
    height: Optional[float] = None
    resolution: Optional[float] = None
    fontSize: Optional[float] = None
    brightness: Optional[float] = None
    contrast: Optional[float] = None
    inverted: Optional[bool] = None
    grayscale: Optional[bool] = None
    characterSet: Optional[str] = None


class RenderRequest(BaseModel):
    image_base64: str = Field(min_length=1, description="Encoded image as base64 or a data: URL")
    settings: RenderSettings = Field(default_factory=RenderSettings)


class _PayloadTooLarge(Exception):
    pass


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _decode_payload(image_base64: str) -> bytes:
    """Strip an optional data-URL prefix and base64-decode the rest."""
    payload = image_base64.strip()
    if payload.startswith("data:"):
        _, _, payload = payload.partition(",")
    # 4 base64 characters carry 3 bytes
    if len(payload) * 3 // 4 > ServiceConfig.MAX_UPLOAD_BYTES:
        raise _PayloadTooLarge()
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageDecodeError(f"Failed to decode image: invalid base64 ({e})") from e


def _render_request(req: RenderRequest) -> tuple[AsciiGrid, dict]:
    pixels = decode_bytes(_decode_payload(req.image_base64))
    config = normalize(req.settings.model_dump(exclude_none=True), image_aspect_ratio=pixels.aspect_ratio)
    grid = render(pixels, config)
    logger.info(
        "Rendered %dx%d image to %dx%d grid (%s)",
        pixels.width, pixels.height, grid.width, grid.height, config.ramp_id,
    )
    return grid, config.to_dict()


async def _render_or_error(req: RenderRequest):
    """Run the render off the event loop; map failures to JSON errors."""
    try:
        return await asyncio.to_thread(_render_request, req)
    except _PayloadTooLarge:
        return JSONResponse(
            {"error": f"Image exceeds {ServiceConfig.MAX_UPLOAD_BYTES} bytes"}, 413
        )
    except ImageDecodeError as e:
        logger.warning("Rejected upload: %s", e)
        return JSONResponse({"error": str(e)}, 422)
    except GlyphGridError as e:
        logger.warning("Render failed: %s", e)
        return JSONResponse({"error": str(e)}, 400)


# ---------------------------------------------------------------------------
# REST endpoints
# ---------------------------------------------------------------------------

@app.get("/api/status")
async def get_status():
    """Health/status endpoint for heartbeat checks."""
    return {
        "service": "glyph_server",
        "status": "ok",
        "version": __version__,
        "uptime_seconds": round(time.time() - _start_time, 1),
        "charsets": len(DEFAULT_REGISTRY),
    }


@app.get("/api/charsets")
async def get_charsets():
    """Registered character ramps, densest glyph first."""
    return {"charsets": DEFAULT_REGISTRY.as_strings()}


@app.get("/api/settings/defaults")
async def get_default_settings():
    return dict(DEFAULT_SETTINGS)


@app.post("/api/render")
async def render_image(req: RenderRequest):
    """Render an image and return the grid as JSON."""
    result = await _render_or_error(req)
    if isinstance(result, JSONResponse):
        return result
    grid, config = result
    return {
        "ascii": grid.to_text(),
        "lines": grid.lines,
        "width": grid.width,
        "height": grid.height,
        "config": config,
    }


@app.post("/api/render/download")
async def download_render(req: RenderRequest):
    """Render an image and return it as a plain-text attachment."""
    result = await _render_or_error(req)
    if isinstance(result, JSONResponse):
        return result
    grid, _ = result
    return PlainTextResponse(
        grid.to_text(),
        headers={"Content-Disposition": f'attachment; filename="{DEFAULT_FILENAME}"'},
    )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="glyphgrid: glyph art rendering service")
    parser.add_argument("--host", default=None, help="Bind host (default: GLYPHGRID_HOST)")
    parser.add_argument("--port", type=int, default=None, help="Bind port (default: GLYPHGRID_PORT)")
    parser.add_argument("--debug", action="store_true", help="Enable DEBUG logging")
    parser.add_argument("--log-dir", type=str, default=None, help="Custom log directory")
    args = parser.parse_args(argv)

    setup_logging(server_name="glyph_server", debug=args.debug or ServiceConfig.DEBUG, log_dir=args.log_dir)
    host = args.host or ServiceConfig.HOST
    port = args.port or ServiceConfig.PORT
    logger.info("Starting glyphgrid service on %s:%d", host, port)
    uvicorn.run(app, host=host, port=port, log_level="info")


if __name__ == "__main__":
    main()
