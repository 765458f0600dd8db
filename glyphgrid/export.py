"""
Output sinks for rendered glyph art: plain-text files and the clipboard.

Both take the rendered string as-is; nothing is added or stripped.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Union

from glyphgrid.render.errors import ClipboardUnavailableError

logger = logging.getLogger("glyphgrid.export")

DEFAULT_FILENAME = "ascii-art.txt"

# Tried in order; the first one found on PATH wins
CLIPBOARD_COMMANDS: list[list[str]] = [
    ["pbcopy"],
    ["wl-copy"],
    ["xclip", "-selection", "clipboard"],
    ["xsel", "--clipboard", "--input"],
    ["clip"],
]


def save_text(text: str, path: Union[str, Path] = DEFAULT_FILENAME) -> Path:
    """Write ``text`` to ``path`` as UTF-8 plain text and return the path.

    A directory path gets DEFAULT_FILENAME appended.
    """
    path = Path(path)
    if path.is_dir():
        path = path / DEFAULT_FILENAME
    path.parent.mkdir(parents=True, exist_ok=True)
    # newline="" keeps "\n" row separators on every platform
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(text)
    logger.info("Saved %d characters to %s", len(text), path)
    return path


def find_clipboard_command() -> list[str] | None:
    for cmd in CLIPBOARD_COMMANDS:
        if shutil.which(cmd[0]):
            return cmd
    return None


def copy_to_clipboard(text: str, timeout: float = 5.0) -> None:
    """Copy ``text`` to the system clipboard.

    Raises ClipboardUnavailableError when no clipboard command is installed
    or the command fails.
    """
    cmd = find_clipboard_command()
    if cmd is None:
        raise ClipboardUnavailableError(
            "No clipboard command found (tried: "
            + ", ".join(c[0] for c in CLIPBOARD_COMMANDS)
            + ")"
        )
    try:
        subprocess.run(cmd, input=text.encode("utf-8"), check=True, timeout=timeout)
    except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError) as e:
        raise ClipboardUnavailableError(f"{cmd[0]} failed: {e}") from e
    logger.info("Copied %d characters to clipboard via %s", len(text), cmd[0])
