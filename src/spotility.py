#!/usr/bin/env python3
from __future__ import annotations

import argparse
import sys

from bootstrap import bootstrap_base_env, bootstrap_run_context
from branding import SPOTILITY_BANNER


def _dispatch_help(argv: list[str]) -> int:
    # Support:
    #   spotility help
    #   spotility help rate
    #   spotility rate help
    # "help" is only a command word in those positions; `top 5 --name help`
    # is an ordinary run.
    argv = [a for a in argv if a != "help"]
    try:
        build_parser().parse_args(argv + ["--help"])
    except SystemExit:
        pass
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="spotility", description="A CLI for managing your 'Liked Songs'"
    )

    sub = p.add_subparsers(dest="command", required=True)

    help_cmd = sub.add_parser("help", help="Show help")
    help_cmd.add_argument("path", nargs="*", help="Command path to show help for")
    help_cmd.set_defaults(_help=True)

    # Keep imports inside builder to avoid early side effects.
    from cli.cli_auth import build_auth_parser
    from cli.cli_env import build_env_parser
    from cli.cli_logs import build_logs_parser
    from cli.cli_rate import build_rate_parser
    from cli.cli_top import build_top_parser
    from cli.cli_update_db import build_update_db_parser
    from cli.cli_weights import build_weights_parser

    build_top_parser(sub)
    build_update_db_parser(sub)
    build_weights_parser(sub)
    build_rate_parser(sub)
    build_auth_parser(sub)
    build_env_parser(sub)
    build_logs_parser(sub)

    return p


def _handler(command: str):
    if command == "top":
        from cli.cli_top import handle_top

        return handle_top
    if command == "update-db":
        from cli.cli_update_db import handle_update_db

        return handle_update_db
    if command == "weights":
        from cli.cli_weights import handle_weights

        return handle_weights
    if command == "rate":
        from cli.cli_rate import handle_rate

        return handle_rate
    if command == "auth":
        from cli.cli_auth import handle_auth

        return handle_auth
    if command == "env":
        from cli.cli_env import handle_env

        return handle_env
    if command == "logs":
        from cli.cli_logs import handle_logs

        return handle_logs

    raise RuntimeError(f"Unknown command: {command}")


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)

    # Load .env and base environment early
    bootstrap_base_env()

    if not argv or argv[0] == "help" or argv[1:] == ["help"]:
        return _dispatch_help(argv)

    args = build_parser().parse_args(argv)

    # Stamp run context early so logging picks it up
    bootstrap_run_context(
        command=args.command,
        verbose=bool(getattr(args, "verbose", False)),
        quiet=bool(getattr(args, "quiet", False)),
    )

    # Initialize logging AFTER run-context env stamping
    from auth.errors import AuthError
    from env import ConfigError
    from errors import SpotilityError
    from logger import get_logger, init_logging

    init_logging(args.command)

    log = get_logger("spotility")
    log.debug(SPOTILITY_BANNER)
    log.debug(f"Command: {args.command}")

    try:
        return _handler(args.command)(args)
    except AuthError as e:
        log.error(f"OAuth invalid: {e}")
        return 12
    except (SpotilityError, ConfigError) as e:
        log.error(str(e))
        return 20
    except KeyboardInterrupt:
        log.warning("Interrupted")
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
