"""Database engine management and connectivity check."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from soundbridge.config import DatabaseSettings
from soundbridge.domain.exceptions import DatabaseUnavailableError

logger = logging.getLogger(__name__)


class Database:
    """Database connection and session manager."""

    def __init__(self, settings: DatabaseSettings) -> None:
        """Initialize database with settings."""
        self.settings = settings

        engine_kwargs: dict[str, Any] = {
            "echo": settings.echo,
            "pool_pre_ping": settings.pool_pre_ping,
        }

        # Only apply pool settings for PostgreSQL
        if "postgresql" in settings.url:
            engine_kwargs.update(
                {
                    "pool_size": settings.pool_size,
                    "max_overflow": settings.max_overflow,
                    "pool_timeout": settings.pool_timeout,
                }
            )

        # Hey future me - create_async_engine doesn't connect yet! A bad DATABASE_URL host
        # only shows up on the first query (that's what /db-test is for). A URL with an
        # unknown driver DOES blow up here, at startup - which is what we want.
        self._engine = create_async_engine(settings.url, **engine_kwargs)

        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session_scope(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide a transactional scope for database operations."""
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                # Rollback on any exception - this is intentionally broad to ensure
                # transaction integrity. All exceptions are re-raised for proper handling.
                await session.rollback()
                raise

    # Yo, SELECT now() renders as NOW() on Postgres and CURRENT_TIMESTAMP on SQLite -
    # SQLAlchemy's func.now() handles the dialect difference for us. The driver error is
    # logged with full detail but callers only ever see DatabaseUnavailableError.
    async def ping(self) -> Any:
        """Run a trivial query and return the database server time.

        Returns:
            Server time as a datetime

        Raises:
            DatabaseUnavailableError: If the query fails for any reason
        """
        try:
            async with self.session_scope() as session:
                result = await session.execute(select(func.now()))
                return result.scalar_one()
        except Exception as e:
            logger.error(
                "Database connectivity check failed: %s: %s", type(e).__name__, e
            )
            raise DatabaseUnavailableError() from e

    async def close(self) -> None:
        """Close database connection."""
        await self._engine.dispose()
