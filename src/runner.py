from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

from auth.errors import AuthError
from branding import SPOTILITY_HEADER, SYMBOLS
from egress import copy_to_clipboard, write_feed
from errors import NotFoundError, SpotilityError
from logger import get_logger
from providers.base import PlayableItem, RemoteLibrary
from ratings import (
    DEFAULT_LABELS,
    DEFAULT_RATING,
    RatingStore,
    describe_rating,
    format_feed,
    rank,
)
from stages.fetch import fetch_liked
from stages.playlist import (
    MAX_RETRIES,
    RETRY_DELAY_SEC,
    ensure_empty_playlist,
    populate_playlist,
)

log = get_logger("spotility.runner")


class RunResult(str, Enum):
    OK = "ok"
    PARTIAL = "partial"
    SKIPPED = "skipped"
    NOT_FOUND = "not_found"
    AUTH_INVALID = "auth_invalid"
    FAILED = "failed"


@dataclass(frozen=True)
class StageResult:
    name: str
    state: RunResult
    reason: Optional[str] = None


@dataclass(frozen=True)
class RunOutcome:
    overall: RunResult
    stages: list[StageResult]
    data: dict[str, Any] = field(default_factory=dict)


_EXIT_CODES: dict[RunResult, int] = {
    RunResult.OK: 0,
    RunResult.SKIPPED: 0,
    RunResult.PARTIAL: 3,
    RunResult.NOT_FOUND: 4,
    RunResult.AUTH_INVALID: 12,
    RunResult.FAILED: 20,
}


def exit_code_for(outcome: RunOutcome) -> int:
    return _EXIT_CODES[outcome.overall]


# ------------------------------------------------------------
# Stage execution
# ------------------------------------------------------------

# A stage returns None for plain success, or a StageResult to report
# partial/skipped outcomes.
Stage = tuple[str, Callable[[], Optional[StageResult]]]


def _run_stage(name: str, fn: Callable[[], Optional[StageResult]]) -> StageResult:
    log.debug(SPOTILITY_HEADER(name))
    try:
        result = fn()
    except NotFoundError as e:
        log.error(f"{SYMBOLS.FAIL} {name}: {e}")
        return StageResult(name=name, state=RunResult.NOT_FOUND, reason=str(e))
    except AuthError as e:
        log.error(f"{SYMBOLS.FAIL} {name}: OAuth invalid: {e}")
        return StageResult(name=name, state=RunResult.AUTH_INVALID, reason=str(e))
    except SpotilityError as e:
        log.error(f"{SYMBOLS.FAIL} {name}: {e}")
        return StageResult(name=name, state=RunResult.FAILED, reason=str(e))

    return result or StageResult(name=name, state=RunResult.OK)


def _run_stages(stages: list[Stage], data: dict[str, Any]) -> RunOutcome:
    """
    Run stages in order. The first non-OK stage decides the overall result;
    a PARTIAL stage lets later stages run, anything else blocks them.
    """
    results: list[StageResult] = []
    overall = RunResult.OK
    block_reason: Optional[str] = None

    for name, fn in stages:
        if block_reason is not None:
            results.append(
                StageResult(
                    name=name,
                    state=RunResult.SKIPPED,
                    reason=f"blocked_by_{block_reason}",
                )
            )
            continue

        r = _run_stage(name, fn)
        results.append(r)

        if r.state != RunResult.OK and overall == RunResult.OK:
            overall = r.state
        if r.state not in (RunResult.OK, RunResult.PARTIAL):
            block_reason = r.state.value

    return RunOutcome(overall=overall, stages=results, data=data)


# ------------------------------------------------------------
# Workflows
# ------------------------------------------------------------


def run_top(
    library: RemoteLibrary,
    amount: int,
    owner_id: str,
    name: Optional[str] = None,
    *,
    ordered: bool = False,
    max_retries: int = MAX_RETRIES,
    retry_delay: float = RETRY_DELAY_SEC,
    sleep: Callable[[float], None] = time.sleep,
) -> RunOutcome:
    """Copy the newest `amount` liked tracks into a (cleared) playlist."""
    playlist_name = name or f"Top {amount}"
    data: dict[str, Any] = {"playlist_name": playlist_name}

    def fetch() -> None:
        data["records"] = fetch_liked(library, amount)
        log.info(f"Fetched {len(data['records'])} liked tracks")

    def prepare() -> None:
        data["playlist_id"] = ensure_empty_playlist(library, owner_id, playlist_name)

    def populate() -> Optional[StageResult]:
        report = populate_playlist(
            library,
            data["playlist_id"],
            [r.item_id for r in data["records"]],
            max_retries=max_retries,
            retry_delay=retry_delay,
            ordered=ordered,
            sleep=sleep,
        )
        data["report"] = report
        log.info(f"Added {report.added} tracks to '{playlist_name}'")

        if report.ok:
            return None
        for outcome in report.failed:
            log.error(f"Failed to add chunk {outcome.index}: {outcome.error}")
        return StageResult(
            name="Populate",
            state=RunResult.PARTIAL,
            reason=f"{len(report.failed)} of {len(report.outcomes)} chunks failed",
        )

    return _run_stages(
        [("Fetch", fetch), ("Playlist", prepare), ("Populate", populate)], data
    )


def run_update_db(
    library: RemoteLibrary,
    limit: int,
    db_path: Path,
    *,
    default_rating: float = DEFAULT_RATING,
) -> RunOutcome:
    """Add the newest `limit` liked tracks to the rating database (insert-if-absent)."""
    data: dict[str, Any] = {}

    def fetch() -> None:
        data["records"] = fetch_liked(library, limit)

    def merge() -> None:
        store = RatingStore.load_or_create(db_path)
        if len(store) == 0:
            log.info(f"No local database, creating new one at {db_path}")

        data["inserted"] = store.merge_new(data["records"], default_rating)
        data["store"] = store
        log.info(f"{data['inserted']} new tracks, {len(store)} in database")

    def save() -> None:
        data["store"].save(db_path)

    return _run_stages([("Fetch", fetch), ("Merge", merge), ("Save", save)], data)


def run_weights(
    db_path: Path,
    *,
    output_file: Optional[Path] = None,
    clipboard: Callable[[str], None] = copy_to_clipboard,
) -> RunOutcome:
    """Rank the rating database and hand the feed to a file or the clipboard."""
    data: dict[str, Any] = {}

    def load() -> None:
        data["store"] = RatingStore.load(db_path)

    def build() -> None:
        log.info("Creating weights")
        data["entries"] = rank(data["store"])
        data["feed"] = format_feed(data["entries"])

    def egress() -> None:
        if output_file is not None:
            log.info(f"Writing weights to {output_file}")
            write_feed(output_file, data["feed"])
        else:
            log.info("Copying weights to clipboard")
            clipboard(data["feed"])

    return _run_stages([("Load", load), ("Rank", build), ("Egress", egress)], data)


def run_rate(
    library: RemoteLibrary,
    rating: float,
    db_path: Path,
    *,
    labels: Mapping[str, float] = DEFAULT_LABELS,
    confirm: Optional[Callable[[PlayableItem], bool]] = None,
) -> RunOutcome:
    """
    Rate the currently playing track. A track missing from the database is
    reported as not_found and the database is left untouched.
    """
    data: dict[str, Any] = {}

    def current() -> Optional[StageResult]:
        item = library.get_currently_playing()
        if item is None:
            log.info("No currently playing song")
            return StageResult("Current", RunResult.SKIPPED, "nothing_playing")

        data["item"] = item
        if confirm is not None and not confirm(item):
            log.info(f"Not rating {item.name}")
            return StageResult("Current", RunResult.SKIPPED, "declined")

        log.info(f"Rating song {item.name}")
        return None

    def update() -> None:
        store = RatingStore.load(db_path)
        previous = store.set_rating(data["item"].item_id, rating)
        data["store"] = store
        data["previous"] = previous
        log.info(
            f"{describe_rating(previous, labels)} -> {describe_rating(rating, labels)}"
        )

    def save() -> None:
        data["store"].save(db_path)

    return _run_stages(
        [("Current", current), ("Update", update), ("Save", save)], data
    )
