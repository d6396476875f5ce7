"""Worker system - Background maintenance tasks."""

from soundbridge.application.workers.session_cleanup_worker import (
    SessionCleanupWorker,
    create_session_cleanup_worker,
)

__all__ = [
    "SessionCleanupWorker",
    "create_session_cleanup_worker",
]
