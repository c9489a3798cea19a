from __future__ import annotations

import argparse

from cli.common import (
    add_credential_flags,
    add_output_flags,
    apply_overrides,
    report_outcome,
)


def _positive_int(value: str) -> int:
    n = int(value)
    if n <= 0:
        raise argparse.ArgumentTypeError(f"must be > 0, got {value}")
    return n


# ------------------------------------------------------------
# Parser
# ------------------------------------------------------------


def build_top_parser(subparsers: argparse._SubParsersAction) -> None:
    top = subparsers.add_parser(
        "top", help="Copy the newest 'Liked Songs' into a playlist"
    )

    top.add_argument("amount", type=_positive_int, help="Number of songs to copy")
    top.add_argument(
        "--username",
        help="Spotify username owning the playlist (env: SPOTIFY_API_USERNAME)",
    )
    top.add_argument("--name", help="Playlist name (default: 'Top <amount>')")
    top.add_argument(
        "--ordered",
        action="store_true",
        help="Write chunks one at a time so playlist order matches 'Liked Songs'",
    )
    add_credential_flags(top)
    add_output_flags(top)


# ------------------------------------------------------------
# Handler
# ------------------------------------------------------------


def handle_top(args: argparse.Namespace) -> int:
    apply_overrides(args)

    from env import ConfigError, get_env
    from logger import get_logger
    from providers.spotify import get_library
    from runner import run_top

    log = get_logger("spotility.top")
    env = get_env()

    if not env.username:
        raise ConfigError(
            "Missing Spotify username: pass --username or set SPOTIFY_API_USERNAME"
        )

    outcome = run_top(
        get_library(),
        args.amount,
        env.username,
        args.name,
        ordered=args.ordered,
        max_retries=env.max_retries,
        retry_delay=env.retry_delay,
    )
    return report_outcome(log, outcome)
