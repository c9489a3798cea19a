"""
Thread-safe in-memory RemoteLibrary for tests.
"""
import threading
import time
from datetime import datetime, timedelta, timezone

from errors import RemoteError
from providers.base import LikedItemRecord, PlaylistSummary, RemoteLibrary

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def liked(n, prefix="t"):
    """n liked records, newest first, like Spotify returns them."""
    return [
        LikedItemRecord(item_id=f"{prefix}{i}", added_at=BASE_TIME - timedelta(hours=i))
        for i in range(n)
    ]


class FakeLibrary(RemoteLibrary):
    name = "fake"

    def __init__(self, liked_items=None, playlists=None, playing=None):
        self.liked_items = list(liked_items or [])
        self.playlists = list(playlists or [])
        self.playing = playing
        self.playlist_items = {}

        # offset -> exception to raise for that page
        self.page_errors = {}
        # offset -> seconds to sleep before answering
        self.page_delays = {}
        # first item of a chunk -> number of add_items failures before success
        self.add_failures = {}

        self.calls = []
        self._lock = threading.Lock()
        self._created = 0

    def _record(self, *call):
        with self._lock:
            self.calls.append(call)

    def calls_to(self, name):
        return [c for c in self.calls if c[0] == name]

    # ---- reads ----

    def fetch_page(self, offset, limit):
        self._record("fetch_page", offset, limit)
        delay = self.page_delays.get(offset)
        if delay:
            time.sleep(delay)
        if offset in self.page_errors:
            raise self.page_errors[offset]
        return self.liked_items[offset : offset + limit]

    def search_playlists(self, limit):
        self._record("search_playlists", limit)
        return self.playlists[:limit]

    def get_currently_playing(self):
        self._record("get_currently_playing")
        return self.playing

    # ---- writes ----

    def create_playlist(self, owner_id, name, public, collaborative):
        self._record("create_playlist", owner_id, name, public, collaborative)
        with self._lock:
            self._created += 1
            playlist_id = f"new{self._created}"
            self.playlists.append(PlaylistSummary(playlist_id=playlist_id, name=name))
            self.playlist_items[playlist_id] = []
        return playlist_id

    def replace_items(self, playlist_id, items):
        self._record("replace_items", playlist_id, list(items))
        with self._lock:
            self.playlist_items[playlist_id] = list(items)

    def add_items(self, playlist_id, items):
        items = list(items)
        self._record("add_items", playlist_id, items)
        with self._lock:
            remaining = self.add_failures.get(items[0], 0)
            if remaining:
                self.add_failures[items[0]] = remaining - 1
                raise RemoteError(f"add_items failed for chunk starting {items[0]}")
            self.playlist_items.setdefault(playlist_id, []).extend(items)
