from __future__ import annotations

import argparse
from pathlib import Path

from cli.common import (
    add_db_path_flag,
    add_output_flags,
    apply_overrides,
    report_outcome,
    resolve_db_path,
)


def build_weights_parser(subparsers: argparse._SubParsersAction) -> None:
    weights = subparsers.add_parser(
        "weights",
        help="Generate weights from the rating database (clipboard or file)",
    )
    add_db_path_flag(weights)
    weights.add_argument(
        "--output-file",
        type=Path,
        help="Write the weights to this file instead of the clipboard",
    )
    add_output_flags(weights)


def handle_weights(args: argparse.Namespace) -> int:
    apply_overrides(args)

    from logger import get_logger
    from runner import run_weights

    log = get_logger("spotility.weights")

    outcome = run_weights(resolve_db_path(), output_file=args.output_file)
    return report_outcome(log, outcome)
