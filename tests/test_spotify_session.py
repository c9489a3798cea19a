import threading
from unittest.mock import MagicMock

import pytest
import requests
from spotipy.oauth2 import SpotifyOAuth

from auth.providers.spotify import SPOTIFY_SCOPES, SpotifyOAuthProvider
from providers.spotify import get_library
from stages.fetch import fetch_liked


@pytest.fixture
def credentials(monkeypatch):
    monkeypatch.setenv("SPOTIFY_API_ID", "client-id")
    monkeypatch.setenv("SPOTIFY_API_SECRET", "client-secret")

    from env import reset_env_caches

    reset_env_caches()


@pytest.fixture
def login(monkeypatch):
    """Stand in for the browser login and the token endpoint; count logins."""
    prompts = []
    lock = threading.Lock()

    def fake_auth_response(self, *args, **kwargs):
        with lock:
            prompts.append(threading.current_thread().name)
        return "auth-code"

    def fake_post(self, url, *args, **kwargs):
        response = MagicMock()
        response.json.return_value = {
            "access_token": "token",
            "token_type": "Bearer",
            "expires_in": 3600,
            "refresh_token": "refresh",
            "scope": SPOTIFY_SCOPES,
        }
        return response

    monkeypatch.setattr(SpotifyOAuth, "get_auth_response", fake_auth_response)
    monkeypatch.setattr(requests.Session, "post", fake_post)
    return prompts


def test_empty_token_cache_prompts_once_before_fan_out(credentials, login):
    library = get_library()

    def saved_tracks(limit, offset):
        # Every worker resolves a token, as spotipy does per request
        library.client.auth_manager.get_access_token(as_dict=False)
        return {"items": []}

    library.client.current_user_saved_tracks = saved_tracks

    fetch_liked(library, 200)

    assert len(login) == 1


def test_cached_token_skips_login(credentials, login):
    SpotifyOAuthProvider().ensure_ready()
    get_library()

    assert len(login) == 1


def test_client_has_no_transport_retries(credentials):
    client = SpotifyOAuthProvider().build_client()

    retry = client._session.get_adapter("https://api.spotify.com/v1/me").max_retries

    assert retry.total == 0
    assert retry.status == 0
    assert not retry.backoff_factor
