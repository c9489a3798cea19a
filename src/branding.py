from __future__ import annotations

import shutil
from typing import Literal

# --------------------------------------------------
# Layout constants
# --------------------------------------------------

DEFAULT_WIDTH = 60
LOG_GUTTER_WIDTH = 10  # "INFO      " column rendered by RichHandler

Width = int | Literal["auto"]


def _resolve_width(width: Width) -> int:
    if width == "auto":
        cols = shutil.get_terminal_size((DEFAULT_WIDTH, 24)).columns
        return max(DEFAULT_WIDTH, cols - LOG_GUTTER_WIDTH)
    return max(DEFAULT_WIDTH, int(width))


# --------------------------------------------------
# Banner
# --------------------------------------------------

SPOTILITY_BANNER = r"""
                 _   _ _ _ _
 ___ _ __   ___ | |_(_) (_) |_ _   _
/ __| '_ \ / _ \| __| | | | __| | | |
\__ \ |_) | (_) | |_| | | | |_| |_| |
|___/ .__/ \___/ \__|_|_|_|\__|\__, |
    |_|                        |___/
"""


# --------------------------------------------------
# Headers / sections
# --------------------------------------------------


def SPOTILITY_HEADER(title: str, *, width: Width = DEFAULT_WIDTH, motif: str = "♪") -> str:
    title = f" {title.strip()} "
    w = _resolve_width(width)
    w = max(w, len(title) + 2 * len(motif) + 4)

    filler = w - len(title) - 2 * len(motif)
    left = filler // 2
    right = filler - left
    return f"{'━' * left}{motif}{title}{motif}{'━' * right}"


class SYMBOLS:
    OK = "✔"
    FAIL = "✖"
    WARN = "⚠"
    SKIPPED = "⤼"
    PARTIAL = "◐"
