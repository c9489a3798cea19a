"""
ranker.py

Turns the rating database into a weight feed for the weighted-shuffle plugin.

Order: rating ascending (1 = best), ties broken by most recently added first.
Weights step down linearly from 10 by 10/n, so the best track gets 10.00 and
the last one gets 10/n (never 0).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from ratings.store import RatingStore

MAX_WEIGHT = 10.0
FEED_SEPARATOR = "|"


@dataclass(frozen=True)
class WeightedEntry:
    item_id: str
    weight: float

    def __str__(self) -> str:
        return f"{self.item_id}:{self.weight:.2f}"


def rank(store: RatingStore) -> list[WeightedEntry]:
    entries = store.items()
    n = len(entries)
    if n == 0:
        return []

    # Two stable sorts: the recency order survives as the tie-break for ratings.
    entries.sort(key=lambda pair: pair[1].added_at, reverse=True)
    entries.sort(key=lambda pair: pair[1].rating)

    step = MAX_WEIGHT / n
    return [
        WeightedEntry(item_id=item_id, weight=round(MAX_WEIGHT - step * i, 2))
        for i, (item_id, _) in enumerate(entries)
    ]


def format_feed(entries: Iterable[WeightedEntry]) -> str:
    """
    "b:10.00|a:6.67|c:3.33"
    """
    return FEED_SEPARATOR.join(str(e) for e in entries)
