from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence


@dataclass(frozen=True)
class LikedItemRecord:
    item_id: str
    added_at: datetime


@dataclass(frozen=True)
class PlaylistSummary:
    playlist_id: str
    name: str


@dataclass(frozen=True)
class PlayableItem:
    item_id: str
    name: str
    kind: str = "track"  # "track" | "episode"


class RemoteLibrary(ABC):
    """
    Abstract interface over the user's remote library (Spotify, or a test double).

    Implementations raise errors.RemoteError for any transport, auth or
    remote-side failure.
    """

    name: str

    @abstractmethod
    def fetch_page(self, offset: int, limit: int) -> list[LikedItemRecord]:
        """One window of liked items, newest first. limit <= 50."""
        raise NotImplementedError

    @abstractmethod
    def search_playlists(self, limit: int) -> list[PlaylistSummary]:
        """The first `limit` playlists of the current user. limit <= 50."""
        raise NotImplementedError

    @abstractmethod
    def create_playlist(
        self, owner_id: str, name: str, public: bool, collaborative: bool
    ) -> str:
        raise NotImplementedError

    @abstractmethod
    def replace_items(self, playlist_id: str, items: Sequence[str]) -> None:
        raise NotImplementedError

    @abstractmethod
    def add_items(self, playlist_id: str, items: Sequence[str]) -> None:
        """Append up to 100 items."""
        raise NotImplementedError

    @abstractmethod
    def get_currently_playing(self) -> Optional[PlayableItem]:
        raise NotImplementedError
