from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from env.paths import default_db_path

# ------------------------------------------------------------
# Errors / helpers
# ------------------------------------------------------------


class ConfigError(RuntimeError):
    pass


def _require(name: str) -> str:
    v = os.environ.get(name)
    if not v:
        raise ConfigError(f"Missing required environment variable: {name}")
    return v


def _as_bool(v: str) -> bool:
    return v.strip().lower() in {"1", "true", "yes", "on"}


def _as_int(v: str, default: int) -> int:
    try:
        return int(v)
    except Exception:
        return default


def _as_float(v: str, default: float) -> float:
    try:
        return float(v)
    except Exception:
        return default


# ------------------------------------------------------------
# Logging environment (SAFE ANYWHERE)
# ------------------------------------------------------------


@dataclass(frozen=True)
class LoggingEnvironment:
    log_level: str
    log_retention: int
    verbose: bool
    quiet: bool


def get_logging_env() -> LoggingEnvironment:
    return LoggingEnvironment(
        log_level=os.environ.get("LOG_LEVEL", "INFO"),
        log_retention=_as_int(os.environ.get("LOG_RETENTION", "30"), 30),
        verbose=_as_bool(os.environ.get("SPOTILITY_VERBOSE", "0")),
        quiet=_as_bool(os.environ.get("SPOTILITY_QUIET", "0")),
    )


# ------------------------------------------------------------
# Full runtime environment
# ------------------------------------------------------------

DEFAULT_REDIRECT_URI = "http://localhost:8888/callback/"


class Environment:
    def __init__(self):
        # Logging snapshot (immutable)
        self._logging = get_logging_env()

        # ---- SPOTIFY API ----
        # Credentials are only required by commands that talk to Spotify,
        # so they are validated lazily (see client_id / client_secret).
        self._client_id = os.environ.get("SPOTIFY_API_ID", "")
        self._client_secret = os.environ.get("SPOTIFY_API_SECRET", "")
        self.redirect_uri = os.environ.get(
            "SPOTIFY_REDIRECT_URI", DEFAULT_REDIRECT_URI
        )
        self.username = os.environ.get("SPOTIFY_API_USERNAME", "")

        # ---- RUN CONTEXT ----
        self.command = os.environ.get("SPOTILITY_COMMAND", "bootstrap")

        db_path = os.environ.get("SPOTILITY_DB_PATH")
        self.db_path = Path(db_path).expanduser() if db_path else default_db_path()

        # ---- WRITE RETRIES ----
        self.max_retries = _as_int(os.environ.get("SPOTILITY_MAX_RETRIES", "3"), 3)
        self.retry_delay = _as_float(
            os.environ.get("SPOTILITY_RETRY_DELAY_SEC", "2.0"), 2.0
        )

        # ---- RATING SCALE ----
        self.rating_labels_raw = os.environ.get("SPOTILITY_RATING_LABELS", "")
        self.default_rating = _as_float(
            os.environ.get("SPOTILITY_DEFAULT_RATING", "3.0"), 3.0
        )

    @property
    def client_id(self) -> str:
        if not self._client_id:
            return _require("SPOTIFY_API_ID")
        return self._client_id

    @property
    def client_secret(self) -> str:
        if not self._client_secret:
            return _require("SPOTIFY_API_SECRET")
        return self._client_secret

    @property
    def rating_labels(self) -> dict[str, float]:
        from ratings.scale import DEFAULT_LABELS, parse_labels

        if not self.rating_labels_raw.strip():
            return dict(DEFAULT_LABELS)
        try:
            return parse_labels(self.rating_labels_raw)
        except ValueError as e:
            raise ConfigError(f"Invalid SPOTILITY_RATING_LABELS: {e}") from e

    def as_dict(self) -> dict:
        return {
            "Logging": {
                "log_level": self.log_level,
                "log_retention": self.log_retention,
                "verbose": self.verbose,
                "quiet": self.quiet,
            },
            "Run": {
                "command": self.command,
                "db_path": str(self.db_path),
            },
            "Behavior": {
                "max_retries": self.max_retries,
                "retry_delay": self.retry_delay,
                "default_rating": self.default_rating,
                "rating_labels": self.rating_labels_raw or "(default)",
            },
            "API": {
                "client_id": "set" if self._client_id else "missing",
                "client_secret": "set" if self._client_secret else "missing",
                "redirect_uri": self.redirect_uri,
                "username": self.username or "(unset)",
            },
        }

    # ---- logging passthrough ----
    @property
    def log_level(self) -> str:
        return self._logging.log_level

    @property
    def log_retention(self) -> int:
        return self._logging.log_retention

    @property
    def verbose(self) -> bool:
        return self._logging.verbose

    @property
    def quiet(self) -> bool:
        return self._logging.quiet


_ENV: Optional[Environment] = None


def reset_env_caches() -> None:
    """Invalidate cached views of environment variables."""
    global _ENV
    _ENV = None


def get_env() -> Environment:
    global _ENV
    if _ENV is None:
        _ENV = Environment()
    return _ENV
