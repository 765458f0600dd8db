"""
glyphgrid command line: render an image file as glyph art.

Usage:
    glyphgrid photo.jpg                          # print to stdout
    glyphgrid photo.jpg --width 160 --charset blocks --output art.txt
    glyphgrid photo.png --color --invert --copy  # luma formula, copy to clipboard
    glyphgrid --list-charsets
    glyphgrid --width 120 --charset dots --save-settings my.json
"""

import argparse
import logging
import sys
from typing import Any, Optional

from glyphgrid.config.render_config import DEFAULT_SETTINGS, load_settings, normalize, save_settings
from glyphgrid.export import copy_to_clipboard, save_text
from glyphgrid.imaging.decode import load_image
from glyphgrid.render.errors import GlyphGridError
from glyphgrid.render.ramps import DEFAULT_REGISTRY
from glyphgrid.render.sampler import render
from glyphgrid.utils.logging_config import setup_logging

logger = logging.getLogger("glyphgrid.cli")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="glyphgrid", description="Image -> glyph art")
    p.add_argument("image", nargs="?", help="input image (JPEG, PNG, GIF, ...)")
    p.add_argument("--width", type=float, default=None, help="output width in characters (20-200)")
    p.add_argument("--height", type=float, default=None,
                   help="output height in characters (10-150); derived from the image aspect ratio if omitted")
    p.add_argument("--resolution", type=float, default=None, help="supersampling multiplier (0.5-3.0)")
    p.add_argument("--brightness", type=float, default=None, help="brightness multiplier (0.3-2.5)")
    p.add_argument("--contrast", type=float, default=None, help="contrast multiplier (0.3-2.5)")
    p.add_argument("--invert", action="store_true", default=None, help="reverse the ramp direction")
    p.add_argument("--color", action="store_true", help="use luma weighting instead of the plain RGB mean")
    p.add_argument("--charset", type=str, default=None, help="character ramp id (see --list-charsets)")
    p.add_argument("--settings", type=str, default=None, help="JSON settings file to start from")
    p.add_argument("--save-settings", type=str, default=None, metavar="PATH",
                   help="write the validated settings to a JSON file for later --settings use")
    p.add_argument("--output", "-o", type=str, default=None, help="write the art to this text file")
    p.add_argument("--copy", action="store_true", help="copy the art to the clipboard")
    p.add_argument("--list-charsets", action="store_true", help="print the available ramps and exit")
    p.add_argument("--debug", action="store_true", help="enable DEBUG logging")
    return p


def collect_settings(args: argparse.Namespace) -> dict[str, Any]:
    """Merge a settings file (if any) with the command line flags."""
    if args.settings:
        settings = load_settings(args.settings)
    else:
        settings = dict(DEFAULT_SETTINGS)

    overrides = {
        "width": args.width,
        "height": args.height,
        "resolution": args.resolution,
        "brightness": args.brightness,
        "contrast": args.contrast,
        "inverted": args.invert,
        "characterSet": args.charset,
    }
    settings.update({k: v for k, v in overrides.items() if v is not None})
    if args.color:
        settings["grayscale"] = False
    return settings


def _write_settings(settings: dict[str, Any], path: str) -> None:
    """Save the clamped settings. A height derived from the image is not kept."""
    saved = normalize(settings).to_settings()
    if settings.get("height") is None:
        saved["height"] = None
    save_settings(saved, path)
    logger.info("Saved render settings to %s", path)


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(level=logging.WARNING, debug=args.debug)

    if args.list_charsets:
        for ramp_id, glyphs in DEFAULT_REGISTRY.as_strings().items():
            print(f"{ramp_id:10s} {glyphs}")
        return 0

    if not args.image and not args.save_settings:
        parser.error("an input image is required")

    try:
        settings = collect_settings(args)
        if args.save_settings:
            _write_settings(settings, args.save_settings)
            if not args.image:
                return 0
        pixels = load_image(args.image)
        config = normalize(settings, image_aspect_ratio=pixels.aspect_ratio)
        art = render(pixels, config).to_text()
        if args.output:
            save_text(art, args.output)
        if args.copy:
            copy_to_clipboard(art)
    except (GlyphGridError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not args.output and not args.copy:
        sys.stdout.write(art)
    return 0


if __name__ == "__main__":
    sys.exit(main())
