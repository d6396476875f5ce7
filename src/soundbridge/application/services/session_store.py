"""Single-use session code store.

Hey future me - this is the heart of the app handoff!

After a successful Spotify login we can't put raw tokens into the redirect URL
(they'd end up in app logs, browser history, etc.). Instead we park the
CredentialBundle here under a random session code, redirect the app with just
the code, and the app trades the code for the bundle ONCE via /auth/exchange.

Rules:
- put() stamps expires_at = now + TTL and never overwrites an existing code
- take() is get-and-delete under the lock - two concurrent takes on the same
  code can't both win
- sweep() drops everything past expires_at (SessionCleanupWorker calls it)
- unknown/expired/consumed codes are NOT errors here - take() returns None
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from typing import Any

from soundbridge.application.services.code_generator import generate_session_code
from soundbridge.domain.entities import CredentialBundle

logger = logging.getLogger(__name__)

DEFAULT_CODE_TTL_SECONDS = 300


class SessionCodeStore(ABC):
    """Interface for session code stores.

    An external key-value store with native per-key TTL (Redis GETDEL + EX)
    can implement this for multi-process deployments.
    """

    @abstractmethod
    async def put(self, bundle: CredentialBundle) -> str:
        """Store a bundle under a fresh session code.

        Args:
            bundle: Credentials to hand off (expires_at is overwritten)

        Returns:
            The new session code
        """
        pass

    @abstractmethod
    async def take(self, code: str) -> CredentialBundle | None:
        """Remove and return the bundle for a code.

        Args:
            code: Session code from put()

        Returns:
            The bundle, or None if unknown, expired or already taken
        """
        pass

    @abstractmethod
    async def sweep(self, now: datetime | None = None) -> int:
        """Remove all entries with expires_at <= now.

        Args:
            now: Reference time (defaults to current UTC time; naive means UTC)

        Returns:
            Number of entries removed
        """
        pass


class InMemorySessionCodeStore(SessionCodeStore):
    """In-memory session code store guarded by an asyncio lock.

    Process-local only: a restart drops every pending code, and a second
    worker process won't see codes minted by the first.
    """

    # Listen up future me, the _lock is what makes take() single-use. Every method that
    # touches self._entries goes through "async with self._lock" and NEVER awaits anything
    # else while holding it - store ops stay O(1) and can't stall on I/O.
    def __init__(
        self,
        ttl_seconds: int = DEFAULT_CODE_TTL_SECONDS,
        code_factory: Callable[[], str] = generate_session_code,
    ) -> None:
        """Initialize the store.

        Args:
            ttl_seconds: Lifetime of a session code
            code_factory: Session code generator (override in tests)
        """
        self._ttl = timedelta(seconds=ttl_seconds)
        self._code_factory = code_factory
        self._entries: dict[str, CredentialBundle] = {}
        self._lock = asyncio.Lock()

    @property
    def ttl_seconds(self) -> int:
        """Configured session code lifetime."""
        return int(self._ttl.total_seconds())

    async def put(self, bundle: CredentialBundle) -> str:
        """Store a bundle under a fresh session code."""
        async with self._lock:
            code = self._code_factory()
            # A 256-bit collision won't happen, but if a factory ever repeats itself we
            # mint another code instead of clobbering someone else's credentials.
            while code in self._entries:
                logger.warning("Session code collision, regenerating")
                code = self._code_factory()

            self._entries[code] = replace(
                bundle, expires_at=datetime.now(UTC) + self._ttl
            )

        logger.debug(f"Stored session code {code[:8]}... (ttl={self.ttl_seconds}s)")
        return code

    # Hey future me, pop() under the lock IS the atomic read-then-delete. An expired entry
    # still gets popped (it's garbage anyway) but we report None, same as an unknown code.
    async def take(self, code: str) -> CredentialBundle | None:
        """Remove and return the bundle for a code."""
        async with self._lock:
            bundle = self._entries.pop(code, None)

        if bundle is None:
            return None

        if bundle.is_expired():
            logger.debug(f"Session code {code[:8]}... expired before exchange")
            return None

        return bundle

    # Yo, build the key list FIRST, then delete - mutating a dict while iterating it blows up.
    async def sweep(self, now: datetime | None = None) -> int:
        """Remove all entries with expires_at <= now."""
        current = now or datetime.now(UTC)
        async with self._lock:
            expired_codes = [
                code
                for code, bundle in self._entries.items()
                if bundle.is_expired(current)
            ]
            for code in expired_codes:
                del self._entries[code]

        if expired_codes:
            logger.info(f"Swept {len(expired_codes)} expired session code(s)")
        return len(expired_codes)

    def __len__(self) -> int:
        return len(self._entries)

    # Not locked - read-only snapshot for logs/monitoring, a slightly stale count is fine.
    def get_stats(self) -> dict[str, Any]:
        """Get store statistics.

        Returns:
            Dictionary with total, active and expired entry counts
        """
        now = datetime.now(UTC)
        total_entries = len(self._entries)
        expired_entries = sum(
            1 for bundle in list(self._entries.values()) if bundle.is_expired(now)
        )

        return {
            "total_entries": total_entries,
            "active_entries": total_entries - expired_entries,
            "expired_entries": expired_entries,
            "ttl_seconds": self.ttl_seconds,
        }
