"""Shared fixtures for SoundBridge tests."""

from collections.abc import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from soundbridge.config import (
    DatabaseSettings,
    SessionSettings,
    Settings,
    SpotifySettings,
)
from soundbridge.main import create_app

TEST_CLIENT_ID = "test-client-id"
TEST_CLIENT_SECRET = "test-client-secret"
TEST_CALLBACK_URL = "http://testserver/auth/spotify/callback"


@pytest.fixture
def spotify_settings() -> SpotifySettings:
    """Spotify settings with fake client credentials."""
    return SpotifySettings(
        client_id=TEST_CLIENT_ID,
        client_secret=TEST_CLIENT_SECRET,
        redirect_uri=TEST_CALLBACK_URL,
        http_timeout=5.0,
    )


@pytest.fixture
def settings(spotify_settings: SpotifySettings) -> Settings:
    """Application settings backed by an in-memory SQLite database."""
    return Settings(
        log_level="WARNING",
        spotify=spotify_settings,
        database=DatabaseSettings(url="sqlite+aiosqlite:///:memory:"),
        session=SessionSettings(
            code_ttl_seconds=300,
            sweep_interval_seconds=300,
            default_app_redirect="soundbridge://auth",
        ),
    )


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    """FastAPI app built from test settings."""
    return create_app(settings)


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    """Test client with the app lifespan running."""
    with TestClient(app) as test_client:
        yield test_client
