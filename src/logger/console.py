from __future__ import annotations

import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

from env import get_logging_env


def _console() -> Console:
    # Resolved per handler so test capture of sys.stdout is honoured.
    return Console(file=sys.stdout, soft_wrap=True)


class QuietFilter(logging.Filter):
    """
    Drop console records when --quiet was requested after the handler was built.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        return not get_logging_env().quiet


def build_console_handler(level: int = logging.INFO) -> logging.Handler:
    handler = RichHandler(
        console=_console(),
        show_level=True,
        show_time=False,
        show_path=False,
        markup=False,
    )
    handler.setLevel(level)

    # RichHandler renders the level column; the formatter must not repeat it.
    handler.setFormatter(logging.Formatter("%(message)s"))

    handler.addFilter(QuietFilter())
    return handler
