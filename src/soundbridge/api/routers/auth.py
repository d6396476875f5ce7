"""Spotify login and session code exchange endpoints.

Hey future me - this router is deliberately THIN. All decisions live in
AuthFlowService; routes just pull query params and shape HTTP responses.

ENDPOINTS:
- GET /auth/spotify?redirect_uri=myapp://cb     → 302 to Spotify
- GET /auth/spotify/callback?code=..&state=..   → 302 back to the app
- GET /auth/exchange?code=<session code>        → tokens + profile (once)
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import RedirectResponse

from soundbridge.api.dependencies import get_auth_flow
from soundbridge.application.services.auth_flow_service import AuthFlowService

logger = logging.getLogger(__name__)

router = APIRouter()


# Params are Optional on purpose: a missing value must produce OUR 400 message, not
# FastAPI's generic validation error.
@router.get("/spotify")
async def start_spotify_login(
    redirect_uri: str | None = Query(
        default=None, description="Where the calling app wants to land after login"
    ),
    flow: AuthFlowService = Depends(get_auth_flow),
) -> RedirectResponse:
    """Redirect the user to Spotify's consent page."""
    authorization_url = flow.begin(redirect_uri)
    return RedirectResponse(authorization_url, status_code=status.HTTP_302_FOUND)


@router.get("/spotify/callback")
async def spotify_callback(
    code: str | None = Query(default=None, description="Spotify authorization code"),
    state: str | None = Query(default=None, description="App redirect target"),
    error: str | None = Query(default=None, description="Spotify error (e.g. access_denied)"),
    flow: AuthFlowService = Depends(get_auth_flow),
) -> RedirectResponse:
    """Finish the Spotify login and hand a session code to the calling app."""
    if error:
        logger.info("Spotify callback reported error: %s", error)

    result = await flow.complete(code=code, state=state)
    return RedirectResponse(result.redirect_url, status_code=status.HTTP_302_FOUND)


@router.get("/exchange")
async def exchange_session_code(
    code: str | None = Query(default=None, description="Session code from the callback redirect"),
    flow: AuthFlowService = Depends(get_auth_flow),
) -> dict[str, Any]:
    """Trade a session code for tokens and profile. Works exactly once per code."""
    bundle = await flow.exchange(code)
    return {"success": True, **bundle.to_response()}
