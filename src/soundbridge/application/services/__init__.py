"""Application services - OAuth flow and session code handoff."""

from soundbridge.application.services.auth_flow_service import (
    AuthFlowService,
    CallbackResult,
    build_app_redirect,
)
from soundbridge.application.services.session_store import (
    InMemorySessionCodeStore,
    SessionCodeStore,
)
from soundbridge.application.services.spotify_auth_service import (
    SpotifyAuthService,
)

__all__ = [
    "AuthFlowService",
    "CallbackResult",
    "InMemorySessionCodeStore",
    "SessionCodeStore",
    "SpotifyAuthService",
    "build_app_redirect",
]
