from __future__ import annotations

"""bootstrap.py

Process bootstrap for spotility.

Rules:
1) Only bootstrap (and CLI handlers applying flag overrides) mutate os.environ.
2) Call bootstrap_base_env() once at the true entrypoint.
3) Call bootstrap_run_context() after argparse parsing, before init_logging().

Everything else treats environment variables as the source of truth.
"""

import os
from datetime import datetime

from dotenv import load_dotenv

from env import config_dir, reset_env_caches


_BOOTSTRAPPED = False


def bootstrap_base_env(*, required: bool = False) -> None:
    global _BOOTSTRAPPED
    if _BOOTSTRAPPED:
        return

    dotenv_path = config_dir() / ".env"

    if dotenv_path.exists():
        # Shell / CI variables always win over the file.
        load_dotenv(dotenv_path, override=False)
    elif required:
        raise RuntimeError(
            f"Missing required env file: {dotenv_path}\n"
            "Expected config/.env under SPOTILITY_HOME (default ./spotility)."
        )

    os.environ.setdefault(
        "SPOTILITY_RUN_ID",
        datetime.now().strftime("%Y-%m-%d_%H-%M-%S"),
    )

    reset_env_caches()
    _BOOTSTRAPPED = True


def bootstrap_run_context(
    *,
    command: str,
    verbose: bool | None = None,
    quiet: bool | None = None,
) -> None:
    """Establish run-scoped context used by logging + workflows."""

    os.environ["SPOTILITY_COMMAND"] = command

    if verbose is not None:
        os.environ["SPOTILITY_VERBOSE"] = "1" if verbose else "0"
    if quiet is not None:
        os.environ["SPOTILITY_QUIET"] = "1" if quiet else "0"

    # Context changes must invalidate cached env views.
    reset_env_caches()
