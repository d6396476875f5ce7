"""Dependency injection for API routes."""

import logging
from typing import cast

from fastapi import HTTPException, Request

from soundbridge.application.services.auth_flow_service import AuthFlowService
from soundbridge.infrastructure.persistence.database import Database

logger = logging.getLogger(__name__)


# Hey future me, everything here comes from app.state - the lifespan builds it ONCE per
# process. If an attribute is missing, startup didn't finish; answer 503 instead of a
# confusing AttributeError 500. Tests override these via app.dependency_overrides.
def get_auth_flow(request: Request) -> AuthFlowService:
    """Get the auth flow service from app state.

    Raises:
        HTTPException: 503 if the service is not initialized
    """
    if not hasattr(request.app.state, "auth_flow"):
        raise HTTPException(status_code=503, detail="Auth flow not initialized")
    return cast(AuthFlowService, request.app.state.auth_flow)


def get_database(request: Request) -> Database:
    """Get the database from app state.

    Raises:
        HTTPException: 503 if the database is not initialized
    """
    if not hasattr(request.app.state, "db"):
        raise HTTPException(status_code=503, detail="Database not initialized")
    return cast(Database, request.app.state.db)
