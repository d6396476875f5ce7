"""Spotify OAuth Authentication Service.

Hey future me - this service wraps SpotifyClient's raw HTTP calls and turns
them into domain results!

Why a separate service?
1. AuthFlowService only has to deal with ONE failure type (SpotifyAuthError)
2. Response parsing (missing tokens, garbage JSON) lives in one place
3. Testable - can mock the service in flow tests

OAuth Flow:
1. get_authorization_url() -> URL the user is redirected to
2. User visits URL, grants access, Spotify calls our callback with ?code=
3. authenticate(code) -> tokens + profile as a CredentialBundle

Token Storage:
- This service does NOT store tokens!
- Caller (AuthFlowService) parks them in the session code store
"""

import logging
from typing import Any

import httpx

from soundbridge.domain.entities import CredentialBundle
from soundbridge.domain.exceptions import SpotifyAuthError
from soundbridge.infrastructure.integrations.spotify_client import SpotifyClient

logger = logging.getLogger(__name__)


class SpotifyAuthService:
    """Service for Spotify OAuth authentication.

    Hey future me - this is the CLEAN interface for OAuth!
    Router and flow code never touch httpx directly.
    """

    def __init__(self, client: SpotifyClient) -> None:
        """Initialize auth service.

        Args:
            client: Spotify HTTP client (shared, owned by the app lifespan)
        """
        self._client = client

    def get_authorization_url(self, state: str) -> str:
        """Build the Spotify authorize URL carrying `state`.

        Raises:
            ConfigurationError: If Spotify credentials are not configured
        """
        return self._client.get_authorization_url(state)

    # Hey future me - this is the ALL-OR-NOTHING part! Token exchange and profile fetch
    # either both succeed or we raise SpotifyAuthError. There's no "tokens but no profile"
    # bundle. Upstream detail goes to the log here and nowhere else.
    async def authenticate(self, code: str) -> CredentialBundle:
        """Exchange an authorization code and fetch the user's profile.

        Args:
            code: Authorization code from the Spotify callback

        Returns:
            CredentialBundle with tokens and profile (expires_at set by the store)

        Raises:
            SpotifyAuthError: On network errors, non-2xx responses or malformed JSON
            ConfigurationError: If Spotify credentials are not configured
        """
        try:
            token_data = await self._client.exchange_code(code)
            access_token, refresh_token = self._parse_tokens(token_data)

            user = await self._client.get_current_user(access_token)
            if not isinstance(user, dict):
                raise SpotifyAuthError("Spotify profile response is not a JSON object")
        except httpx.HTTPStatusError as e:
            logger.error(
                "Spotify auth request failed: %s %s -> %s %s",
                e.request.method,
                e.request.url.path,
                e.response.status_code,
                e.response.text[:200],
            )
            raise SpotifyAuthError(
                f"Spotify returned {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.error("Spotify auth request error: %s: %s", type(e).__name__, e)
            raise SpotifyAuthError(f"Spotify request failed: {e}") from e
        except ValueError as e:
            # response.json() raises a ValueError subclass on non-JSON bodies
            logger.error("Spotify returned malformed JSON: %s", e)
            raise SpotifyAuthError("Spotify returned malformed JSON") from e

        logger.info("Spotify login completed for user %s", user.get("id", "<unknown>"))

        return CredentialBundle(
            access_token=access_token,
            refresh_token=refresh_token,
            user=user,
        )

    @staticmethod
    def _parse_tokens(token_data: Any) -> tuple[str, str]:
        """Pull access and refresh tokens out of a token response.

        Raises:
            SpotifyAuthError: If either token is missing or not a string
        """
        if not isinstance(token_data, dict):
            raise SpotifyAuthError("Spotify token response is not a JSON object")

        access_token = token_data.get("access_token")
        refresh_token = token_data.get("refresh_token")
        if not isinstance(access_token, str) or not access_token:
            raise SpotifyAuthError("Spotify token response has no access_token")
        if not isinstance(refresh_token, str) or not refresh_token:
            raise SpotifyAuthError("Spotify token response has no refresh_token")

        return access_token, refresh_token
