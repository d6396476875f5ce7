"""Configuration module for SoundBridge."""

from .settings import (
    DatabaseSettings,
    SessionSettings,
    Settings,
    SpotifySettings,
    get_settings,
)

__all__ = [
    "DatabaseSettings",
    "SessionSettings",
    "Settings",
    "SpotifySettings",
    "get_settings",
]
