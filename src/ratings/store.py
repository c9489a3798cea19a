"""
store.py

Local rating database: track id -> (added_at, rating).

On disk this is one JSON object:

    {"<track id>": {"added_at": "2023-06-01T12:00:00Z", "rating": 3.0}, ...}

Lifecycle per command: load (or create) -> mutate -> save. Saves are atomic
(temp file + rename); concurrent writers against the same file are not
supported.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Iterator

from errors import NotFoundError, ParseError, StoreIOError
from logger import get_logger
from providers.base import LikedItemRecord
from ratings.scale import DEFAULT_RATING
from utils import format_timestamp, parse_timestamp, read_json, write_json_atomic

logger = get_logger(__name__)


@dataclass
class RatingEntry:
    added_at: datetime
    rating: float = DEFAULT_RATING

    def __post_init__(self) -> None:
        if isinstance(self.rating, bool) or not isinstance(self.rating, (int, float)):
            raise ValueError(f"rating must be a number, got {self.rating!r}")
        if not math.isfinite(self.rating):
            raise ValueError(f"rating must be a finite number, got {self.rating!r}")
        self.rating = float(self.rating)

    def to_json(self) -> dict[str, Any]:
        return {"added_at": format_timestamp(self.added_at), "rating": self.rating}

    @classmethod
    def from_json(cls, data: Any) -> RatingEntry:
        if not isinstance(data, dict):
            raise ValueError(f"expected object, got {type(data).__name__}")
        if "added_at" not in data or "rating" not in data:
            raise ValueError("missing 'added_at' or 'rating'")
        return cls(added_at=parse_timestamp(data["added_at"]), rating=data["rating"])


class RatingStore:
    def __init__(self, entries: dict[str, RatingEntry] | None = None):
        self._entries: dict[str, RatingEntry] = dict(entries or {})

    # ---- mapping protocol ----

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._entries

    def __getitem__(self, item_id: str) -> RatingEntry:
        try:
            return self._entries[item_id]
        except KeyError:
            raise NotFoundError(f"Track {item_id} is not in the rating database") from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RatingStore):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"RatingStore({len(self._entries)} entries)"

    def items(self) -> list[tuple[str, RatingEntry]]:
        return list(self._entries.items())

    # ---- persistence ----

    @classmethod
    def from_json(cls, data: Any) -> RatingStore:
        if not isinstance(data, dict):
            raise ParseError(
                f"Rating database must be a JSON object, got {type(data).__name__}"
            )

        entries: dict[str, RatingEntry] = {}
        for item_id, raw in data.items():
            try:
                entries[item_id] = RatingEntry.from_json(raw)
            except ValueError as e:
                raise ParseError(f"Bad entry for {item_id}: {e}") from e
        return cls(entries)

    def to_json(self) -> dict[str, Any]:
        return {item_id: entry.to_json() for item_id, entry in self._entries.items()}

    @classmethod
    def load(cls, path: Path) -> RatingStore:
        """
        Raises:
            NotFoundError: If path does not exist
            ParseError: If the file is not a valid rating database
            StoreIOError: On any other filesystem failure
        """
        path = Path(path)
        try:
            data = read_json(path)
        except FileNotFoundError as e:
            raise NotFoundError(f"Rating database not found: {path}") from e
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ParseError(f"Rating database is not valid JSON: {path}: {e}") from e
        except OSError as e:
            raise StoreIOError(f"Cannot read rating database {path}: {e}") from e

        store = cls.from_json(data)
        logger.debug(f"Loaded {len(store)} ratings from {path}")
        return store

    @classmethod
    def load_or_create(cls, path: Path) -> RatingStore:
        """Like load(), but a missing file yields an empty store."""
        try:
            return cls.load(path)
        except NotFoundError:
            logger.debug(f"No rating database at {path}; starting empty")
            return cls()

    def save(self, path: Path) -> None:
        path = Path(path)
        try:
            write_json_atomic(path, self.to_json())
        except OSError as e:
            raise StoreIOError(f"Cannot write rating database {path}: {e}") from e
        logger.debug(f"Saved {len(self)} ratings to {path}")

    # ---- mutation ----

    def merge_new(
        self,
        records: Iterable[LikedItemRecord],
        default_rating: float = DEFAULT_RATING,
    ) -> int:
        """
        Insert unseen tracks with the default rating. Existing entries are never
        touched. Returns how many were inserted.
        """
        inserted = 0
        for record in records:
            if record.item_id in self._entries:
                continue
            self._entries[record.item_id] = RatingEntry(
                added_at=record.added_at, rating=default_rating
            )
            inserted += 1
        return inserted

    def set_rating(self, item_id: str, rating: float) -> float:
        """
        Overwrite the rating of a known track, keeping added_at. Returns the
        previous rating.

        Raises:
            NotFoundError: If item_id is not in the store
            ValueError: If rating is NaN
        """
        entry = self[item_id]
        if math.isnan(rating):
            raise ValueError("rating must not be NaN")

        previous = entry.rating
        entry.rating = float(rating)
        return previous
