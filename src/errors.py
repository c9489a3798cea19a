from __future__ import annotations


class SpotilityError(Exception):
    """Base exception for spotility operations."""


class RemoteError(SpotilityError):
    """Network, auth or remote-side failure talking to Spotify."""


class NotFoundError(SpotilityError):
    """Missing rating database file or missing track id in it."""


class ParseError(SpotilityError):
    """Rating database bytes could not be decoded."""


class StoreIOError(SpotilityError):
    """Filesystem failure while reading or writing the rating database."""


__all__ = [
    "SpotilityError",
    "RemoteError",
    "NotFoundError",
    "ParseError",
    "StoreIOError",
]
