"""Session Cleanup Worker - evicts expired session codes.

Hey future me - this worker keeps the session store from growing forever!

Apps are supposed to exchange their session code right after the redirect,
but plenty never do (app killed, user closed the browser, deep link broken).
take() already refuses expired codes, but the entries would still sit in
memory. Every sweep_interval seconds this worker calls store.sweep() and
drops everything past expires_at.

It runs for the lifetime of the process, independent of request traffic,
and needs no coordination beyond the store's own lock.
"""

import asyncio
import logging
from datetime import UTC, datetime
from typing import Any

from soundbridge.application.services.session_store import SessionCodeStore

logger = logging.getLogger(__name__)


class SessionCleanupWorker:
    """Worker that periodically sweeps expired session codes.

    Lifecycle:
    - Created in lifecycle.py during app startup
    - Runs as asyncio task via start()
    - Stopped via stop() during shutdown (task is cancelled if it's sleeping)
    """

    def __init__(
        self,
        session_store: SessionCodeStore,
        sweep_interval: int = 300,
    ) -> None:
        """Initialize the cleanup worker.

        Args:
            session_store: Store to sweep
            sweep_interval: Seconds between sweeps (default: 300)
        """
        self._session_store = session_store
        self._sweep_interval = sweep_interval
        self._running = False
        self._stats: dict[str, Any] = {
            "total_codes_evicted": 0,
            "last_sweep_at": None,
            "codes_evicted_last_cycle": 0,
        }

    async def start(self) -> None:
        """Start the cleanup loop.

        Runs continuously until stop() is called.
        """
        self._running = True
        logger.info(
            f"SessionCleanupWorker started (sweep_interval={self._sweep_interval}s)"
        )

        while self._running:
            await asyncio.sleep(self._sweep_interval)
            if not self._running:
                break
            try:
                await self.run_once()
            except Exception as e:
                # Log but don't crash - we'll try again next cycle
                logger.exception(f"SessionCleanupWorker error: {e}")

    def stop(self) -> None:
        """Signal the worker to stop."""
        self._running = False
        logger.info("SessionCleanupWorker stopping...")

    async def run_once(self, now: datetime | None = None) -> int:
        """Run a single sweep.

        Args:
            now: Reference time (defaults to current UTC time)

        Returns:
            Number of session codes evicted
        """
        evicted = await self._session_store.sweep(now)

        self._stats["total_codes_evicted"] += evicted
        self._stats["last_sweep_at"] = datetime.now(UTC)
        self._stats["codes_evicted_last_cycle"] = evicted

        if evicted == 0:
            logger.debug("No expired session codes to evict")
        return evicted

    @property
    def is_running(self) -> bool:
        """Whether the loop is active."""
        return self._running

    def get_stats(self) -> dict[str, Any]:
        """Get worker statistics.

        Returns:
            Dictionary with eviction statistics
        """
        return {
            **self._stats,
            "running": self._running,
            "sweep_interval": self._sweep_interval,
        }


# Hey future me - factory function for easy worker creation from app context
def create_session_cleanup_worker(
    session_store: SessionCodeStore,
    sweep_interval: int = 300,
) -> SessionCleanupWorker:
    """Create a SessionCleanupWorker with the given configuration.

    Args:
        session_store: Store to sweep
        sweep_interval: Seconds between sweeps

    Returns:
        Configured SessionCleanupWorker instance
    """
    return SessionCleanupWorker(
        session_store=session_store,
        sweep_interval=sweep_interval,
    )
