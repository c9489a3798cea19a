from __future__ import annotations

import os
from pathlib import Path

# ---------------------------------------------------------------------
# Application home
# ---------------------------------------------------------------------

DEFAULT_HOME_NAME = "spotility"


def app_home() -> Path:
    """
    Root for config, logs, tokens and the rating database.

    SPOTILITY_HOME if set, else ./spotility under the working directory.
    Never derived from the install location.
    """
    raw = os.environ.get("SPOTILITY_HOME")
    if raw:
        return Path(raw).expanduser().resolve()
    return (Path.cwd() / DEFAULT_HOME_NAME).resolve()


def config_dir() -> Path:
    return app_home() / "config"


# ---------------------------------------------------------------------
# Base directories (override-friendly)
# ---------------------------------------------------------------------


def _resolve_dir(env_var: str, default: Path) -> Path:
    """
    Resolve a directory path from an environment variable or default.
    Ensures the directory exists.

    Resolved on every call so run-context changes to os.environ are honoured.
    """
    raw = os.environ.get(env_var)
    path = Path(raw).expanduser().resolve() if raw else default
    path.mkdir(parents=True, exist_ok=True)
    return path


def logs_dir() -> Path:
    return _resolve_dir("SPOTILITY_LOGS_DIR", app_home() / "logs")


def auth_dir() -> Path:
    """OAuth token cache lives here."""
    return _resolve_dir("SPOTILITY_AUTH_DIR", app_home() / "auth")


def data_dir() -> Path:
    """Rating database and exported feeds."""
    return _resolve_dir("SPOTILITY_DATA_DIR", app_home() / "data")


# ---------------------------------------------------------------------
# Utility paths
# ---------------------------------------------------------------------


def auth_token_cache(filename: str = ".spotify_token_cache") -> Path:
    return auth_dir() / filename


def default_db_path() -> Path:
    return data_dir() / "ratings.json"


def module_logs_dir(command: str) -> Path:
    """
    Base log directory for a CLI command (e.g. top, rate).
    """
    path = logs_dir() / command
    path.mkdir(parents=True, exist_ok=True)
    return path
