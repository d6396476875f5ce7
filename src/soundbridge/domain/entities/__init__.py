"""Domain entities."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


# Hey future me, this is what a finished Spotify login boils down to! It lives in the
# session store between the callback redirect and the app's exchange call - nobody else
# should keep a reference once it's handed to put(). expires_at is set BY THE STORE
# (now + TTL), so callers build bundles with the default and let put() stamp it.
@dataclass
class CredentialBundle:
    """OAuth tokens plus the Spotify profile they belong to."""

    access_token: str
    refresh_token: str
    user: dict[str, Any] = field(default_factory=dict)
    expires_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def is_expired(self, now: datetime | None = None) -> bool:
        """Check whether the bundle's session code has outlived its TTL.

        A naive `now` is taken to be UTC.
        """
        current = now or datetime.now(UTC)
        if current.tzinfo is None:
            current = current.replace(tzinfo=UTC)
        return self.expires_at <= current

    def to_response(self) -> dict[str, Any]:
        """Serialize for the exchange endpoint (expiry stays internal)."""
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "user": self.user,
        }


__all__ = ["CredentialBundle"]
