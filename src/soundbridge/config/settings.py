"""Application settings loaded from environment variables and .env."""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENV_FILE = ".env"


class SpotifySettings(BaseSettings):
    """Spotify OAuth client settings (SPOTIFY_* env vars)."""

    model_config = SettingsConfigDict(
        env_prefix="SPOTIFY_", env_file=_ENV_FILE, extra="ignore"
    )

    client_id: str = Field(default="", description="Spotify app client ID")
    client_secret: str = Field(default="", description="Spotify app client secret")
    # Hey future me - this is OUR callback URL, registered in the Spotify dashboard.
    # Not to be confused with the redirect_uri query param that calling apps send to
    # /auth/spotify - that one travels through Spotify inside `state`.
    redirect_uri: str = Field(
        default="http://localhost:5000/auth/spotify/callback",
        description="This service's OAuth callback URL",
    )
    http_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Timeout in seconds for token and profile requests",
    )

    @property
    def is_configured(self) -> bool:
        """Check that client credentials are present."""
        return bool(self.client_id.strip() and self.client_secret.strip())


class DatabaseSettings(BaseSettings):
    """Database connection settings."""

    model_config = SettingsConfigDict(
        env_prefix="DATABASE_", env_file=_ENV_FILE, extra="ignore"
    )

    url: str = Field(
        default="sqlite+aiosqlite:///./soundbridge.db",
        description="SQLAlchemy database URL (DATABASE_URL)",
    )
    echo: bool = False
    pool_pre_ping: bool = True
    pool_size: int = 5
    max_overflow: int = 10
    pool_timeout: int = 30

    # Hey future me - hosting providers hand out "postgres://user:pw@host/db" URLs.
    # SQLAlchemy's async engine needs an explicit async driver, so we rewrite those
    # to asyncpg. Anything that already names a driver is left alone.
    @field_validator("url")
    @classmethod
    def _use_async_driver(cls, value: str) -> str:
        for prefix in ("postgres://", "postgresql://"):
            if value.startswith(prefix):
                return "postgresql+asyncpg://" + value[len(prefix) :]
        return value


class SessionSettings(BaseSettings):
    """Session code exchange settings (SESSION_* env vars)."""

    model_config = SettingsConfigDict(
        env_prefix="SESSION_", env_file=_ENV_FILE, extra="ignore"
    )

    code_ttl_seconds: int = Field(
        default=300, gt=0, description="Lifetime of an unused session code"
    )
    sweep_interval_seconds: int = Field(
        default=300, gt=0, description="Seconds between expired-code sweeps"
    )
    default_app_redirect: str = Field(
        default="soundbridge://auth",
        description="App deep link used when Spotify does not echo state back",
    )


class Settings(BaseSettings):
    """Top-level application settings."""

    model_config = SettingsConfigDict(env_file=_ENV_FILE, extra="ignore")

    app_name: str = "soundbridge"
    host: str = "0.0.0.0"  # nosec B104 - bound inside a container
    port: int = 5000
    log_level: str = "INFO"
    log_json_format: bool = False
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    spotify: SpotifySettings = Field(default_factory=SpotifySettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    session: SessionSettings = Field(default_factory=SessionSettings)


# Yo, cached on purpose - env is read once per process. Tests that need other values
# should build Settings(...) directly and override the get_settings dependency.
@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
