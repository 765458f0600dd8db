"""Logging setup shared by the glyphgrid CLI and HTTP service.

Usage:
    from glyphgrid.utils.logging_config import setup_logging

    # stderr only, WARNING and above (CLI default):
    setup_logging(level=logging.WARNING)

    # stderr + logs/glyph_server.log:
    setup_logging(server_name="glyph_server")

    # With debug level:
    setup_logging(server_name="glyph_server", debug=True)
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Log rotation defaults
MAX_BYTES = 5 * 1024 * 1024  # 5 MB
BACKUP_COUNT = 3

LOG_DIR_ENV = "GLYPHGRID_LOG_DIR"


def default_log_dir() -> Path:
    """``$GLYPHGRID_LOG_DIR`` if set, otherwise ./logs."""
    return Path(os.getenv(LOG_DIR_ENV, "logs"))


def setup_logging(
    level: int = logging.INFO,
    log_file: str | None = None,
    fmt: str = DEFAULT_FORMAT,
    max_bytes: int = MAX_BYTES,
    backup_count: int = BACKUP_COUNT,
    *,
    server_name: str | None = None,
    log_dir: str | Path | None = None,
    debug: bool = False,
) -> str | None:
    """Configure the root logger once per entry point.

    Returns the log file path in use, if any.
    """
    if debug:
        level = logging.DEBUG

    resolved_log_file = log_file
    if server_name and not log_file:
        target_dir = Path(log_dir) if log_dir else default_log_dir()
        target_dir.mkdir(parents=True, exist_ok=True)
        resolved_log_file = str(target_dir / f"{server_name}.log")

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if resolved_log_file:
        Path(resolved_log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                resolved_log_file,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
        )
    logging.basicConfig(level=level, format=fmt, handlers=handlers, force=True)

    if resolved_log_file:
        logging.getLogger("glyphgrid").info("Logging to %s", resolved_log_file)
    return resolved_log_file
