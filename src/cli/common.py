from __future__ import annotations

import argparse
import logging
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from env import get_env, reset_env_caches


# ----------------------------
# Help dispatch (subparser-local)
# ----------------------------


def dispatch_subparser_help(
    parser: argparse.ArgumentParser, path: list[str] | None
) -> int:
    """
    Implements consistent `X help [subcmd ...]` behavior for a subtree parser.
    """
    if not path:
        parser.print_help()
        return 0

    try:
        parser.parse_args(path + ["--help"])
    except SystemExit:
        pass
    return 0


# ----------------------------
# Shared flags
# ----------------------------


def add_output_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--verbose", action="store_true", help="Debug output")
    parser.add_argument("--quiet", action="store_true", help="Suppress console output")


def add_credential_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--id", dest="client_id", help="Spotify API client id (env: SPOTIFY_API_ID)"
    )
    parser.add_argument(
        "--secret",
        dest="client_secret",
        help="Spotify API client secret (env: SPOTIFY_API_SECRET)",
    )


def add_db_path_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--db-path",
        "--db_path",
        dest="db_path",
        help="Rating database path (env: SPOTILITY_DB_PATH)",
    )


def apply_overrides(args: argparse.Namespace) -> None:
    """
    Flags win over environment: stamp them into os.environ, the configuration
    boundary every other module reads from.
    """
    overrides = {
        "SPOTIFY_API_ID": getattr(args, "client_id", None),
        "SPOTIFY_API_SECRET": getattr(args, "client_secret", None),
        "SPOTIFY_API_USERNAME": getattr(args, "username", None),
        "SPOTILITY_DB_PATH": getattr(args, "db_path", None),
    }
    for key, value in overrides.items():
        if value:
            os.environ[key] = str(value)
    reset_env_caches()


def resolve_db_path() -> Path:
    return get_env().db_path


# ----------------------------
# Outcome reporting
# ----------------------------


def report_outcome(log: logging.Logger, outcome) -> int:
    from branding import SYMBOLS
    from runner import RunResult, exit_code_for

    marks = {
        RunResult.OK: SYMBOLS.OK,
        RunResult.PARTIAL: SYMBOLS.PARTIAL,
        RunResult.SKIPPED: SYMBOLS.SKIPPED,
    }

    log.debug("Run summary:")
    for stage in outcome.stages:
        mark = marks.get(stage.state, SYMBOLS.FAIL)
        suffix = f" ({stage.reason})" if stage.reason else ""
        log.debug(f"  {mark} {stage.name}: {stage.state.value}{suffix}")

    code = exit_code_for(outcome)
    if outcome.overall == RunResult.OK:
        log.info("Done: OK")
    elif outcome.overall == RunResult.SKIPPED:
        log.info("Done: nothing to do")
    elif outcome.overall == RunResult.PARTIAL:
        log.warning("Done: partially applied")
    else:
        log.error(f"Done: {outcome.overall.value}")
    return code


# ----------------------------
# Logs filesystem helpers
# ----------------------------


def resolve_log_dir(*, command: str | None, explicit: str | None) -> Path:
    from env.paths import logs_dir

    if explicit:
        return Path(explicit).expanduser().resolve()

    base = logs_dir()
    return (base / command).resolve() if command else base


def find_log_file(log_dir: Path, name: str) -> Path | None:
    if not log_dir.exists():
        return None

    for p in (log_dir / name, log_dir / f"{name}.log"):
        if p.exists() and p.is_file():
            return p

    for p in log_dir.rglob("*.log"):
        if p.stem == name:
            return p

    return None


def print_tail(path: Path, lines: int) -> None:
    try:
        data = path.read_text(encoding="utf-8", errors="replace").splitlines()
    except OSError as e:
        print(f"[error reading log] {e}")
        return

    tail = data[-lines:] if lines > 0 else data
    for line in tail:
        print(line)


@dataclass(frozen=True)
class RunFile:
    run_id: str
    path: Path
    mtime: float
    size: int


def list_run_files(log_dir: Path) -> list[RunFile]:
    if not log_dir.exists():
        return []

    items: list[RunFile] = []
    for p in log_dir.rglob("*.log"):
        try:
            st = p.stat()
        except OSError:
            continue
        items.append(RunFile(run_id=p.stem, path=p, mtime=st.st_mtime, size=st.st_size))

    items.sort(key=lambda r: r.mtime, reverse=True)
    return items


def format_mtime(ts: float) -> str:
    return datetime.fromtimestamp(ts).strftime("%Y-%m-%d %H:%M:%S")


def print_table(headers: list[str], rows: list[list[str]]) -> None:
    """
    Simple fixed-width table printer for CLI output.
    """
    if not rows:
        print("(no results)")
        return

    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(str(cell)))

    fmt = "  ".join(f"{{:{w}}}" for w in widths)

    print(fmt.format(*headers))
    print(fmt.format(*("-" * w for w in widths)))

    for row in rows:
        print(fmt.format(*(str(c) for c in row)))
