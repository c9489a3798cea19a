"""
fetch.py

Bulk retrieval of the user's liked tracks.

Splits a requested total into 50-item pages (the Spotify maximum), issues every
page at once on a thread pool, and concatenates the results in offset order.

Failure handling is scatter-gather: every page is allowed to settle before the
call returns, then the first failure (in page order) fails the whole fetch.
No partial result is returned and no request is left running after return.
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Optional

from errors import RemoteError
from logger import get_logger
from providers.base import LikedItemRecord, RemoteLibrary

logger = get_logger(__name__)

# Spotify caps saved-track pages at 50
PAGE_SIZE = 50


@dataclass(frozen=True)
class Page:
    offset: int
    limit: int


class FetchError(RemoteError):
    """One or more pages failed; `failures` holds every (page, error) pair."""

    def __init__(self, message: str, failures: list[tuple[Page, BaseException]]):
        super().__init__(message)
        self.failures = failures


def plan_pages(total: int, page_size: int = PAGE_SIZE) -> list[Page]:
    """
    Page windows covering `total` items: full pages, then a short last page.

    Examples:
        plan_pages(120) -> [Page(0, 50), Page(50, 50), Page(100, 20)]
        plan_pages(100) -> [Page(0, 50), Page(50, 50)]
    """
    if total < 0:
        raise ValueError(f"total must be >= 0, got {total}")
    if not 0 < page_size <= PAGE_SIZE:
        raise ValueError(f"page_size must be in 1..{PAGE_SIZE}, got {page_size}")

    return [
        Page(offset=offset, limit=min(page_size, total - offset))
        for offset in range(0, total, page_size)
    ]


def fetch_liked(
    library: RemoteLibrary,
    total: int,
    *,
    page_size: int = PAGE_SIZE,
    max_workers: Optional[int] = None,
) -> list[LikedItemRecord]:
    """
    Fetch the `total` most recently liked tracks.

    All pages are submitted together (one worker per page unless max_workers
    caps it). Order: ascending offset across pages, remote order within a page.

    Raises:
        FetchError: If any page failed, after all pages have settled
    """
    pages = plan_pages(total, page_size)
    if not pages:
        return []

    workers = max_workers or len(pages)
    logger.debug(f"Fetching {total} liked tracks in {len(pages)} pages")

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="fetch") as pool:
        futures: list[Future] = [
            pool.submit(library.fetch_page, page.offset, page.limit)
            for page in pages
        ]
        wait(futures)

    records: list[LikedItemRecord] = []
    failures: list[tuple[Page, BaseException]] = []

    for page, future in zip(pages, futures):
        error = future.exception()
        if error is not None:
            logger.warning(
                f"Page offset={page.offset} limit={page.limit} failed: {error}"
            )
            failures.append((page, error))
            continue
        records.extend(future.result())

    if failures:
        first_page, first_error = failures[0]
        if not isinstance(first_error, RemoteError):
            raise first_error
        raise FetchError(
            f"Fetching liked tracks failed at offset {first_page.offset} "
            f"({len(failures)}/{len(pages)} pages failed): {first_error}",
            failures,
        ) from first_error

    logger.debug(f"Fetched {len(records)} liked tracks")
    return records
