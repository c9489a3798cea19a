from __future__ import annotations

import argparse

from cli.common import (
    add_credential_flags,
    add_db_path_flag,
    add_output_flags,
    apply_overrides,
    report_outcome,
    resolve_db_path,
)


def build_rate_parser(subparsers: argparse._SubParsersAction) -> None:
    rate = subparsers.add_parser(
        "rate", help="Rate the currently playing song (used by the weights command)"
    )
    rate.add_argument(
        "rating", help="great|good|ok|bad, 1-4, or any number (lower is better)"
    )
    rate.add_argument(
        "--ask", action="store_true", help="Ask for confirmation before rating"
    )
    add_db_path_flag(rate)
    add_credential_flags(rate)
    add_output_flags(rate)


def _confirm(item) -> bool:
    from rich.prompt import Confirm

    return Confirm.ask(f"Rating song [bold]{item.name}[/bold] -- Continue?", default=False)


def handle_rate(args: argparse.Namespace) -> int:
    apply_overrides(args)

    from env import get_env
    from logger import get_logger
    from providers.spotify import get_library
    from ratings import parse_rating
    from runner import run_rate

    log = get_logger("spotility.rate")
    labels = get_env().rating_labels

    try:
        rating = parse_rating(args.rating, labels)
    except ValueError as e:
        log.error(str(e))
        return 2

    outcome = run_rate(
        get_library(),
        rating,
        resolve_db_path(),
        labels=labels,
        confirm=_confirm if args.ask else None,
    )
    return report_outcome(log, outcome)
