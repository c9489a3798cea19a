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


def build_update_db_parser(subparsers: argparse._SubParsersAction) -> None:
    update = subparsers.add_parser(
        "update-db", help="Add newly liked songs to the rating database"
    )
    update.add_argument(
        "--limit",
        type=int,
        default=50,
        help="How many of the newest liked songs to look at (default: 50)",
    )
    add_db_path_flag(update)
    add_credential_flags(update)
    add_output_flags(update)


def handle_update_db(args: argparse.Namespace) -> int:
    apply_overrides(args)

    from env import get_env
    from logger import get_logger
    from providers.spotify import get_library
    from runner import run_update_db

    log = get_logger("spotility.update_db")
    env = get_env()

    if args.limit < 0:
        log.error(f"--limit must be >= 0, got {args.limit}")
        return 2

    outcome = run_update_db(
        get_library(),
        args.limit,
        resolve_db_path(),
        default_rating=env.default_rating,
    )
    return report_outcome(log, outcome)
