"""Spotify HTTP client for the authorization-code flow."""

import logging
from typing import Any, cast
from urllib.parse import urlencode

import httpx

from soundbridge.config.settings import SpotifySettings
from soundbridge.domain.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Hey future me - read-only profile scopes. Adding more means every user sees a
# bigger consent screen, so only add what a feature actually needs.
SPOTIFY_SCOPES = (
    "user-read-private",
    "user-read-email",
    "user-top-read",
)


class SpotifyClient:
    """HTTP client for Spotify OAuth and profile operations."""

    AUTHORIZE_URL = "https://accounts.spotify.com/authorize"
    TOKEN_URL = "https://accounts.spotify.com/api/token"  # nosec B105 - this is a public API endpoint URL, not a password
    API_BASE_URL = "https://api.spotify.com/v1"

    # Hey future me, this init is deceptively simple - we DON'T create the HTTP client here
    # because we need to be async-friendly. The actual client gets lazy-loaded in _get_client().
    # If you try to create httpx.AsyncClient here, you'll get weird asyncio loop issues.
    def __init__(self, settings: SpotifySettings) -> None:
        """
        Initialize Spotify client.

        Args:
            settings: Spotify configuration settings
        """
        self.settings = settings
        self._client: httpx.AsyncClient | None = None

    # Listen up, future me: the timeout is the ONLY thing stopping a hung Spotify from
    # pinning a request forever. Keep it finite - it's SPOTIFY_HTTP_TIMEOUT in settings.
    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.settings.http_timeout)
        return self._client

    # Hey, this close() is IMPORTANT - if you don't call it, you'll leak connections.
    # The lifespan calls it on shutdown.
    async def close(self) -> None:
        """Close HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _require_credentials(self) -> None:
        if not self.settings.client_id or not self.settings.client_id.strip():
            raise ConfigurationError(
                "SPOTIFY_CLIENT_ID is not configured. "
                "Set it in your environment or .env file. "
                "Get credentials at https://developer.spotify.com/dashboard"
            )
        if not self.settings.redirect_uri or not self.settings.redirect_uri.strip():
            raise ConfigurationError(
                "SPOTIFY_REDIRECT_URI is not configured. "
                "Set it to this service's callback URL "
                "(e.g., http://localhost:5000/auth/spotify/callback)"
            )

    # Listen future me, this builds the URL we send users to. `state` is whatever the
    # calling app wants back - Spotify echoes it untouched on the callback. We don't
    # sign or validate it, so treat it as routing info, never as proof of anything.
    def get_authorization_url(self, state: str) -> str:
        """
        Generate Spotify OAuth authorization URL.

        Args:
            state: Opaque value Spotify echoes back on the callback

        Returns:
            Authorization URL

        Raises:
            ConfigurationError: If client_id or redirect_uri is not configured
        """
        self._require_credentials()

        params = {
            "response_type": "code",
            "client_id": self.settings.client_id,
            "scope": " ".join(SPOTIFY_SCOPES),
            "redirect_uri": self.settings.redirect_uri,
            "state": state,
        }

        return f"{self.AUTHORIZE_URL}?{urlencode(params)}"

    # Yo future me, this is THE critical step after user auth. The code is single-use and
    # short-lived, and redirect_uri MUST match EXACTLY what went into the auth URL or Spotify
    # rejects it. Client credentials go in HTTP Basic auth (httpx builds the header from the
    # tuple). Body HAS to be form-urlencoded, not JSON.
    async def exchange_code(self, code: str) -> dict[str, Any]:
        """
        Exchange authorization code for access and refresh tokens.

        Args:
            code: Authorization code from the Spotify callback

        Returns:
            Token response with access_token, refresh_token, expires_in

        Raises:
            ConfigurationError: If client credentials are missing
            httpx.HTTPError: If the request fails or returns a non-2xx status
        """
        self._require_credentials()
        if not self.settings.client_secret or not self.settings.client_secret.strip():
            raise ConfigurationError(
                "SPOTIFY_CLIENT_SECRET is not configured. "
                "Set it in your environment or .env file."
            )

        client = await self._get_client()

        data = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": self.settings.redirect_uri,
        }

        response = await client.post(
            self.TOKEN_URL,
            data=data,
            auth=(self.settings.client_id, self.settings.client_secret),
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        response.raise_for_status()
        return cast(dict[str, Any], response.json())

    async def get_current_user(self, access_token: str) -> dict[str, Any]:
        """
        Get the profile of the user the token belongs to.

        Args:
            access_token: OAuth access token

        Returns:
            Spotify user profile JSON

        Raises:
            httpx.HTTPError: If the request fails
        """
        client = await self._get_client()

        response = await client.get(
            f"{self.API_BASE_URL}/me",
            headers={"Authorization": f"Bearer {access_token}"},
        )
        response.raise_for_status()
        return cast(dict[str, Any], response.json())
