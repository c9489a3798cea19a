from __future__ import annotations

from typing import Any

import requests
import spotipy
from spotipy.cache_handler import CacheFileHandler
from spotipy.exceptions import SpotifyException
from spotipy.oauth2 import SpotifyOAuth, SpotifyOauthError

from auth.base import AuthHealthResult, AuthHealthStatus, AuthProvider
from auth.errors import AuthFailed, AuthInvalid
from env import ConfigError, get_env
from env.paths import auth_token_cache
from logger import get_logger

SPOTIFY_SCOPES = (
    "playlist-modify-public playlist-modify-private user-library-read "
    "playlist-read-private user-read-currently-playing"
)

REQUEST_TIMEOUT_SEC = 30

# Transport-level retries are off: the stages own the retry policy
# (none for fetch, fixed-delay per chunk for playlist writes).
TRANSPORT_RETRIES = 0


def _is_auth_error(exc: BaseException) -> bool:
    if isinstance(exc, (SpotifyOauthError, AuthInvalid)):
        return True
    return getattr(exc, "http_status", None) == 401


class SpotifyOAuthProvider(AuthProvider):
    name = "spotify"

    def __init__(self) -> None:
        self._logger = get_logger("auth.spotify")

    def ensure_ready(self) -> None:
        """
        Ensures a usable token is cached; spotipy prompts for login (browser +
        pasted redirect URL) when none is, and refreshes expired tokens itself.
        """
        manager = self._auth_manager()
        try:
            manager.get_access_token(as_dict=False)
        except SpotifyOauthError as e:
            self._logger.error(f"OAuth authentication failed: {e}")
            raise AuthInvalid(str(e)) from e

    def build_client(self) -> Any:
        manager = self._auth_manager()
        try:
            return spotipy.Spotify(
                auth_manager=manager,
                requests_timeout=REQUEST_TIMEOUT_SEC,
                retries=TRANSPORT_RETRIES,
                status_retries=TRANSPORT_RETRIES,
                backoff_factor=0,
            )
        except Exception as e:
            self._logger.error(f"Failed to build Spotify client: {e}")
            raise AuthFailed(str(e)) from e

    def health_check(self) -> AuthHealthResult:
        """
        Validates OAuth by fetching the current user's profile.
        """
        self._logger.info("oauth.check.start")

        try:
            user = self.build_client().current_user()
        except (
            AuthInvalid,
            AuthFailed,
            SpotifyException,
            SpotifyOauthError,
            requests.RequestException,
        ) as e:
            if _is_auth_error(e):
                self._logger.error("oauth.check.auth_invalid", exc_info=e)
                return AuthHealthResult(
                    provider=self.name,
                    status=AuthHealthStatus.AUTH_INVALID,
                    message="OAuth INVALID - reauthentication required",
                )

            self._logger.error("oauth.check.failed", exc_info=e)
            return AuthHealthResult(
                provider=self.name,
                status=AuthHealthStatus.FAILED,
                message=f"OAuth check failed: {e}",
            )

        self._logger.info("oauth.check.ok")
        return AuthHealthResult(
            provider=self.name,
            status=AuthHealthStatus.OK,
            message=f"OAuth OK ({(user or {}).get('id', 'unknown user')})",
        )

    # -----------------------------------------------------------------
    # Internals
    # -----------------------------------------------------------------

    def _auth_manager(self) -> SpotifyOAuth:
        env = get_env()
        try:
            client_id = env.client_id
            client_secret = env.client_secret
        except ConfigError as e:
            raise AuthInvalid(str(e)) from e

        cache_path = auth_token_cache()
        self._logger.debug(f"Using token cache {cache_path}")

        return SpotifyOAuth(
            client_id=client_id,
            client_secret=client_secret,
            redirect_uri=env.redirect_uri,
            scope=SPOTIFY_SCOPES,
            cache_handler=CacheFileHandler(cache_path=str(cache_path)),
        )
