"""External integration client implementations."""

from soundbridge.infrastructure.integrations.spotify_client import (
    SPOTIFY_SCOPES,
    SpotifyClient,
)

__all__ = [
    "SPOTIFY_SCOPES",
    "SpotifyClient",
]
