"""Liveness and database connectivity endpoints.

- /        → plain-text "server is up" string
- /db-test → runs SELECT now() against DATABASE_URL
"""

from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from soundbridge.api.dependencies import get_database
from soundbridge.infrastructure.persistence.database import Database

router = APIRouter()

LIVENESS_MESSAGE = "Server running ✅"


@router.get("/", response_class=PlainTextResponse)
async def root() -> str:
    """Liveness check - no dependency checks."""
    return LIVENESS_MESSAGE


@router.get("/db-test")
async def db_test(db: Database = Depends(get_database)) -> dict[str, Any]:
    """Check database connectivity.

    Returns 500 with a generic message if the query fails
    (DatabaseUnavailableError, see exception_handlers.py).
    """
    server_time = await db.ping()
    return {"success": True, "time": server_time}
