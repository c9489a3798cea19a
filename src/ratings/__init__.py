from __future__ import annotations

from ratings.ranker import WeightedEntry, format_feed, rank
from ratings.scale import DEFAULT_LABELS, DEFAULT_RATING, describe_rating, parse_rating
from ratings.store import RatingEntry, RatingStore

__all__ = [
    "DEFAULT_LABELS",
    "DEFAULT_RATING",
    "RatingEntry",
    "RatingStore",
    "WeightedEntry",
    "describe_rating",
    "format_feed",
    "parse_rating",
    "rank",
]
