"""
HTTP service settings for glyphgrid.

Values come from environment variables (a local ``.env`` file is loaded
first), with defaults suitable for local use.
"""

import os

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class ServiceConfig:
    """Configuration for the glyph rendering service.

    Environment:
        GLYPHGRID_HOST              bind address (default 127.0.0.1)
        GLYPHGRID_PORT              port (default 8095)
        GLYPHGRID_MAX_UPLOAD_BYTES  largest accepted encoded image (default 10 MB)
        GLYPHGRID_DEBUG             debug logging (default false)
    """

    HOST = os.getenv("GLYPHGRID_HOST", "127.0.0.1")
    PORT = int(os.getenv("GLYPHGRID_PORT", "8095"))
    MAX_UPLOAD_BYTES = int(os.getenv("GLYPHGRID_MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))
    DEBUG = _env_flag("GLYPHGRID_DEBUG")
