from __future__ import annotations

from typing import Any, Callable, Optional, Sequence, TypeVar

import requests
from spotipy.exceptions import SpotifyException
from spotipy.oauth2 import SpotifyOauthError

from errors import RemoteError
from logger import get_logger
from providers.base import (
    LikedItemRecord,
    PlayableItem,
    PlaylistSummary,
    RemoteLibrary,
)
from utils import parse_timestamp

logger = get_logger(__name__)
T = TypeVar("T")

_REMOTE_FAILURES = (SpotifyException, SpotifyOauthError, requests.RequestException)


def _describe(e: Exception) -> str:
    status = getattr(e, "http_status", None)
    msg = getattr(e, "msg", None) or str(e)
    return f"HTTP {status}: {msg}" if status else msg


class SpotifyLibrary(RemoteLibrary):
    """
    RemoteLibrary over an authenticated spotipy.Spotify client.
    """

    name = "spotify"

    def __init__(self, client: Any):
        self.client = client

    def _call(self, operation: str, fn: Callable[..., T], *args, **kwargs) -> T:
        try:
            return fn(*args, **kwargs)
        except _REMOTE_FAILURES as e:
            logger.debug(f"spotify.{operation} failed: {_describe(e)}")
            raise RemoteError(f"{operation} failed: {_describe(e)}") from e

    # -----------------------------------------------------------------
    # Reads
    # -----------------------------------------------------------------

    def fetch_page(self, offset: int, limit: int) -> list[LikedItemRecord]:
        page = self._call(
            "fetch_page",
            self.client.current_user_saved_tracks,
            limit=limit,
            offset=offset,
        )

        records: list[LikedItemRecord] = []
        for item in (page or {}).get("items", []):
            track = item.get("track") or {}
            track_id = track.get("id")
            if not track_id:
                # Local files have no Spotify id
                logger.debug(f"Skipping saved item without id: {track.get('name')}")
                continue
            try:
                added_at = parse_timestamp(item.get("added_at"))
            except ValueError as e:
                raise RemoteError(f"fetch_page returned bad added_at: {e}") from e
            records.append(LikedItemRecord(item_id=track_id, added_at=added_at))
        return records

    def search_playlists(self, limit: int) -> list[PlaylistSummary]:
        page = self._call(
            "search_playlists", self.client.current_user_playlists, limit=limit
        )
        return [
            PlaylistSummary(playlist_id=p["id"], name=p.get("name", ""))
            for p in (page or {}).get("items", [])
            if p and p.get("id")
        ]

    def get_currently_playing(self) -> Optional[PlayableItem]:
        current = self._call(
            "get_currently_playing", self.client.current_user_playing_track
        )
        if not current:
            return None

        item = current.get("item")
        if not item or not item.get("id"):
            return None

        return PlayableItem(
            item_id=item["id"],
            name=item.get("name", ""),
            kind=item.get("type", "track"),
        )

    # -----------------------------------------------------------------
    # Writes
    # -----------------------------------------------------------------

    def create_playlist(
        self, owner_id: str, name: str, public: bool, collaborative: bool
    ) -> str:
        created = self._call(
            "create_playlist",
            self.client.user_playlist_create,
            owner_id,
            name,
            public=public,
            collaborative=collaborative,
        )
        return created["id"]

    def replace_items(self, playlist_id: str, items: Sequence[str]) -> None:
        self._call(
            "replace_items",
            self.client.playlist_replace_items,
            playlist_id,
            list(items),
        )

    def add_items(self, playlist_id: str, items: Sequence[str]) -> None:
        self._call(
            "add_items",
            self.client.playlist_add_items,
            playlist_id,
            list(items),
        )
