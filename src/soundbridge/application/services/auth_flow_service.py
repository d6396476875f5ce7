"""Authorization flow for handing Spotify credentials to client apps.

Hey future me - this is the three-step dance, with NO server-side state
between the steps:

1. begin(app_redirect)     -> Spotify authorize URL, app target rides in `state`
2. complete(code, state)   -> tokens + profile -> session code -> app redirect
3. exchange(session_code)  -> CredentialBundle (once!)

The only thing carried from step 1 to step 2 is what Spotify echoes back in
`state`. If a user abandons the Spotify page, nothing was stored, nothing to
clean up.
"""

import logging
from dataclasses import dataclass
from urllib.parse import urlencode

from soundbridge.application.services.session_store import SessionCodeStore
from soundbridge.application.services.spotify_auth_service import (
    SpotifyAuthService,
)
from soundbridge.domain.entities import CredentialBundle
from soundbridge.domain.exceptions import (
    ConfigurationError,
    SessionCodeNotFoundException,
    SpotifyAuthError,
    ValidationException,
)

logger = logging.getLogger(__name__)

ERROR_NO_CODE = "no_code"
ERROR_AUTHENTICATION_FAILED = "authentication_failed"


def build_app_redirect(target: str, **params: str) -> str:
    """Add query parameters to an app redirect target.

    Works for deep links (myapp://cb), targets that already carry a query, and
    targets with a #fragment (parameters go before the fragment, never into it).
    The rest of the target is kept byte for byte.
    """
    base, hash_mark, fragment = target.partition("#")
    separator = "&" if "?" in base else "?"
    return f"{base}{separator}{urlencode(params)}{hash_mark}{fragment}"


@dataclass
class CallbackResult:
    """Outcome of the Spotify callback step."""

    redirect_url: str
    session_code: str | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        """Whether a session code was minted."""
        return self.session_code is not None


class AuthFlowService:
    """Orchestrates Spotify login and the one-time credential handoff."""

    def __init__(
        self,
        auth_service: SpotifyAuthService,
        session_store: SessionCodeStore,
        default_app_redirect: str,
    ) -> None:
        """Initialize the flow.

        Args:
            auth_service: Spotify OAuth operations
            session_store: Where credential bundles wait for the app
            default_app_redirect: App target used when Spotify drops `state`
        """
        self._auth_service = auth_service
        self._session_store = session_store
        self._default_app_redirect = default_app_redirect

    def begin(self, app_redirect: str | None) -> str:
        """Start a login: build the Spotify authorize URL.

        Args:
            app_redirect: Where the calling app wants to land after login

        Returns:
            Spotify authorize URL with app_redirect as `state`

        Raises:
            ValidationException: If app_redirect is missing or blank
            ConfigurationError: If Spotify credentials are not configured
        """
        if not app_redirect or not app_redirect.strip():
            raise ValidationException("redirect_uri parameter is required")

        return self._auth_service.get_authorization_url(state=app_redirect)

    # Yo future me, this method NEVER raises - every failure in the exchange, including a
    # missing client secret, becomes ?error=authentication_failed on the app redirect. The
    # user's browser must always end up back in the app, never on one of our JSON error
    # pages. No retries: Spotify auth codes are single-use.
    async def complete(self, code: str | None, state: str | None) -> CallbackResult:
        """Finish a login from Spotify's callback.

        Args:
            code: Authorization code (absent when the user denied access)
            state: App redirect target echoed back by Spotify

        Returns:
            CallbackResult with the app redirect URL
        """
        target = state if state and state.strip() else self._default_app_redirect

        if not code:
            logger.info("Spotify callback without authorization code")
            return CallbackResult(
                redirect_url=build_app_redirect(target, error=ERROR_NO_CODE),
                error=ERROR_NO_CODE,
            )

        try:
            bundle = await self._auth_service.authenticate(code)
        except SpotifyAuthError as e:
            logger.warning("Spotify authentication failed: %s", e.message)
            return self._authentication_failed(target)
        except ConfigurationError as e:
            logger.error("Spotify callback cannot complete: %s", e.message)
            return self._authentication_failed(target)

        session_code = await self._session_store.put(bundle)
        return CallbackResult(
            redirect_url=build_app_redirect(target, code=session_code),
            session_code=session_code,
        )

    @staticmethod
    def _authentication_failed(target: str) -> CallbackResult:
        return CallbackResult(
            redirect_url=build_app_redirect(target, error=ERROR_AUTHENTICATION_FAILED),
            error=ERROR_AUTHENTICATION_FAILED,
        )

    async def exchange(self, session_code: str | None) -> CredentialBundle:
        """Trade a session code for its credentials (single use).

        Raises:
            ValidationException: If the code is missing or blank
            SessionCodeNotFoundException: If the code is unknown, expired or used
        """
        if not session_code or not session_code.strip():
            raise ValidationException("code parameter is required")

        bundle = await self._session_store.take(session_code.strip())
        if bundle is None:
            logger.info("Rejected session code %s...", session_code[:8])
            raise SessionCodeNotFoundException()

        return bundle
