from __future__ import annotations

from providers.spotify.library import SpotifyLibrary


def get_library() -> SpotifyLibrary:
    """
    Build a SpotifyLibrary from the configured auth provider.

    The token is resolved once here, before any fan-out, so an empty cache
    triggers a single interactive login rather than one per worker thread.
    Refreshing a cached token is delegated to spotipy.
    """
    from auth.registry import get_provider

    provider = get_provider("spotify")
    provider.ensure_ready()
    return SpotifyLibrary(provider.build_client())


__all__ = ["SpotifyLibrary", "get_library"]
