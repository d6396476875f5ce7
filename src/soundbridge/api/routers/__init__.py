"""API router initialization."""

# Hey future me, this is the router aggregator - main.py mounts api_router at the app root
# (no /api prefix: mobile apps and the Spotify dashboard already point at /auth/...).

from fastapi import APIRouter

from soundbridge.api.routers import auth, health

api_router = APIRouter()

api_router.include_router(health.router, tags=["Health"])
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])

__all__ = ["api_router", "auth", "health"]
