"""
egress.py

Hand-off of the weight feed: a file on disk or the system clipboard.
"""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

from errors import SpotilityError
from logger import get_logger

logger = get_logger(__name__)

# First available tool wins
CLIPBOARD_COMMANDS: list[list[str]] = [
    ["pbcopy"],
    ["wl-copy"],
    ["xclip", "-selection", "clipboard"],
    ["xsel", "--clipboard", "--input"],
    ["clip"],
]


class EgressError(SpotilityError):
    """The feed could not be handed off."""


def write_feed(path: Path, feed: str) -> Path:
    path = Path(path).expanduser()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(feed, encoding="utf-8")
    except OSError as e:
        raise EgressError(f"Cannot write weights to {path}: {e}") from e
    logger.debug(f"Wrote {len(feed)} characters to {path}")
    return path


def _clipboard_command() -> list[str] | None:
    for cmd in CLIPBOARD_COMMANDS:
        if shutil.which(cmd[0]):
            return cmd
    return None


def copy_to_clipboard(feed: str) -> None:
    cmd = _clipboard_command()
    if cmd is None:
        names = ", ".join(c[0] for c in CLIPBOARD_COMMANDS)
        raise EgressError(
            f"No clipboard tool found (tried {names}); use --output-file instead"
        )

    try:
        subprocess.run(cmd, input=feed.encode("utf-8"), check=True, timeout=10)
    except (OSError, subprocess.SubprocessError) as e:
        raise EgressError(f"Copying to clipboard via {cmd[0]} failed: {e}") from e
    logger.debug(f"Copied {len(feed)} characters to clipboard via {cmd[0]}")
