from __future__ import annotations

import argparse

from rich.console import Console
from rich.text import Text

from cli.common import add_credential_flags, add_output_flags, apply_overrides


# ------------------------------------------------------------
# Parser
# ------------------------------------------------------------


def build_auth_parser(subparsers: argparse._SubParsersAction) -> None:
    auth = subparsers.add_parser(
        "auth",
        help="Check OAuth health and log in if required",
    )
    auth.add_argument(
        "--provider",
        default="spotify",
        help="Auth provider to check (default: spotify)",
    )
    auth.add_argument(
        "--check-only",
        action="store_true",
        help="Do not start an interactive login when no token is cached",
    )
    add_credential_flags(auth)
    add_output_flags(auth)


# ------------------------------------------------------------
# Handler
# ------------------------------------------------------------


def handle_auth(args: argparse.Namespace) -> int:
    apply_overrides(args)

    from auth import AuthHealthStatus, AuthInvalid, check, get_provider
    from env import get_env
    from logger import get_logger

    logger = get_logger("auth")
    console = Console()
    quiet = get_env().quiet

    if not args.check_only:
        try:
            get_provider(args.provider).ensure_ready()
        except AuthInvalid as e:
            logger.error(f"OAuth login failed: {e}")
            if not quiet:
                console.print(Text("OAuth INVALID - login failed", style="red"))
            return 12

    result = check(args.provider)

    if result.status == AuthHealthStatus.OK:
        if not quiet:
            console.print(Text(result.message, style="green"))
        return 0

    if not quiet:
        console.print(Text(result.message, style="red"))

    if result.status == AuthHealthStatus.AUTH_INVALID:
        return 12
    return 20
