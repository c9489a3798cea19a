"""
playlist.py

Managed playlist upkeep:
- find-or-create the target playlist and clear it
- append tracks in 100-item chunks, each chunk an independent task with a
  bounded, fixed-delay retry

Chunk failures are isolated: a chunk that exhausts its retries is reported in
the PopulateReport and never aborts its siblings.

Concurrent chunks may land in the playlist in any order relative to each
other. Pass ordered=True to write chunks one at a time in input order.
"""

from __future__ import annotations

import time
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Callable, Iterator, Optional, Sequence

from errors import RemoteError
from logger import get_logger
from providers.base import RemoteLibrary

logger = get_logger(__name__)


# ----------------------------
# Constants
# ----------------------------

# Spotify limits
PLAYLIST_SEARCH_LIMIT = 50
CHUNK_SIZE = 100

MAX_RETRIES = 3
RETRY_DELAY_SEC = 2.0


# ----------------------------
# Results
# ----------------------------


@dataclass(frozen=True)
class ChunkOutcome:
    index: int
    items: tuple[str, ...]
    attempts: int
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class PopulateReport:
    playlist_id: str
    outcomes: list[ChunkOutcome] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(o.ok for o in self.outcomes)

    @property
    def succeeded(self) -> list[ChunkOutcome]:
        return [o for o in self.outcomes if o.ok]

    @property
    def failed(self) -> list[ChunkOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def failed_items(self) -> list[str]:
        return [item for o in self.failed for item in o.items]

    @property
    def added(self) -> int:
        return sum(len(o.items) for o in self.succeeded)


# ----------------------------
# Playlist lookup / reset
# ----------------------------


def find_playlist(
    library: RemoteLibrary, name: str, *, search_limit: int = PLAYLIST_SEARCH_LIMIT
) -> Optional[str]:
    """
    Exact, case-sensitive name match within the user's first `search_limit`
    playlists. Playlists beyond that window are not searched.
    """
    for playlist in library.search_playlists(search_limit):
        if playlist.name == name:
            return playlist.playlist_id
    return None


def ensure_empty_playlist(
    library: RemoteLibrary,
    owner_id: str,
    name: str,
    *,
    search_limit: int = PLAYLIST_SEARCH_LIMIT,
) -> str:
    """
    Return the id of an empty playlist called `name`.

    An existing playlist is cleared in place; otherwise a private,
    non-collaborative playlist is created for `owner_id`.
    RemoteError propagates unchanged.
    """
    playlist_id = find_playlist(library, name, search_limit=search_limit)

    if playlist_id is not None:
        logger.info(f"Clearing existing playlist '{name}' ({playlist_id})")
        library.replace_items(playlist_id, [])
        return playlist_id

    playlist_id = library.create_playlist(
        owner_id, name, public=False, collaborative=False
    )
    logger.info(f"Created playlist '{name}' ({playlist_id})")
    return playlist_id


# ----------------------------
# Populate
# ----------------------------


def chunked(items: Sequence[str], size: int = CHUNK_SIZE) -> Iterator[tuple[str, ...]]:
    if size <= 0:
        raise ValueError(f"chunk size must be > 0, got {size}")
    for i in range(0, len(items), size):
        yield tuple(items[i : i + size])


def _write_chunk(
    library: RemoteLibrary,
    playlist_id: str,
    index: int,
    items: tuple[str, ...],
    *,
    max_retries: int,
    retry_delay: float,
    sleep: Callable[[float], None],
) -> ChunkOutcome:
    attempt = 0
    while True:
        attempt += 1
        try:
            library.add_items(playlist_id, items)
            return ChunkOutcome(index=index, items=items, attempts=attempt)
        except RemoteError as e:
            if attempt > max_retries:
                logger.error(
                    f"Chunk {index} ({len(items)} items) failed after "
                    f"{attempt} attempts: {e}"
                )
                return ChunkOutcome(index=index, items=items, attempts=attempt, error=e)

            logger.warning(
                f"Chunk {index} attempt {attempt}/{max_retries + 1} failed, "
                f"retrying in {retry_delay:.1f}s: {e}"
            )
            sleep(retry_delay)


def populate_playlist(
    library: RemoteLibrary,
    playlist_id: str,
    item_ids: Sequence[str],
    *,
    chunk_size: int = CHUNK_SIZE,
    max_retries: int = MAX_RETRIES,
    retry_delay: float = RETRY_DELAY_SEC,
    ordered: bool = False,
    sleep: Callable[[float], None] = time.sleep,
    max_workers: Optional[int] = None,
) -> PopulateReport:
    """
    Append item_ids to the playlist in chunks and report per-chunk outcomes.

    Only RemoteError is retried. Any other exception is not retried and is
    re-raised once every chunk has settled.
    """
    if not 0 < chunk_size <= CHUNK_SIZE:
        raise ValueError(f"chunk_size must be in 1..{CHUNK_SIZE}, got {chunk_size}")

    chunks = list(chunked(item_ids, chunk_size))
    report = PopulateReport(playlist_id=playlist_id)
    if not chunks:
        return report

    workers = 1 if ordered else (max_workers or len(chunks))
    logger.debug(
        f"Adding {len(item_ids)} items to {playlist_id} in {len(chunks)} chunks "
        f"(workers={workers})"
    )

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="populate") as pool:
        futures: list[Future] = [
            pool.submit(
                _write_chunk,
                library,
                playlist_id,
                index,
                chunk,
                max_retries=max_retries,
                retry_delay=retry_delay,
                sleep=sleep,
            )
            for index, chunk in enumerate(chunks)
        ]
        wait(futures)

    # Outcomes in chunk order; unexpected errors surface only after the drain
    report.outcomes = [f.result() for f in futures]

    if report.failed:
        logger.warning(
            f"{len(report.failed)}/{len(chunks)} chunks failed "
            f"({len(report.failed_items)} items not added)"
        )
    return report
