"""
utils.py

Timestamp and JSON file helpers shared by the remote layer and the rating store.

This module provides:
- ISO-8601 timestamp parsing/formatting (UTC, "Z" suffix)
- JSON reads
- Atomic JSON writes (temp file + rename)
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import isodate

# ============================================================
# Timestamps
# ============================================================


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO-8601 timestamp such as Spotify's "2023-06-01T12:00:00Z".

    Naive timestamps are taken to be UTC.

    Raises:
        ValueError: If value is not a valid ISO-8601 date-time
    """
    if not isinstance(value, str):
        raise ValueError(f"Expected ISO-8601 string, got {type(value).__name__}")

    try:
        dt = isodate.parse_datetime(value.strip())
    except (isodate.ISO8601Error, ValueError) as e:
        raise ValueError(f"Invalid ISO-8601 timestamp: {value!r}") from e

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_timestamp(dt: datetime) -> str:
    """
    Format as UTC ISO-8601 with a "Z" suffix. Sub-second precision is kept
    only when present so second-precision values stay compact.

    Examples:
        2023-01-01 00:00:00+00:00 -> "2023-01-01T00:00:00Z"
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)

    fmt = "%Y-%m-%dT%H:%M:%S.%f" if dt.microsecond else "%Y-%m-%dT%H:%M:%S"
    return isodate.strftime(dt, fmt) + "Z"


# ============================================================
# File I/O Helpers
# ============================================================


def read_json(path: Path) -> Any:
    """
    Read and parse a JSON file.

    Raises:
        FileNotFoundError: If file doesn't exist
        json.JSONDecodeError: If file is not valid JSON
    """
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def write_json_atomic(path: Path, data: Any) -> None:
    """
    Write data to a JSON file via a sibling temp file and an atomic rename,
    so readers never observe a half-written file.

    Parent directories are created. On failure the temp file is removed and
    the original exception re-raised; the previous target is left untouched.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    tmp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False, sort_keys=True)
        tmp_path.replace(path)
    except BaseException:
        try:
            tmp_path.unlink()
        except FileNotFoundError:
            pass
        raise
