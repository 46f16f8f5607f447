"""Database Session Manager — async connection pool, request sessions and error translation.

Invariants:
    - persistence_guard is the ONLY place SQLAlchemy exceptions become PersistenceError
    - Every guarded failure rolls the session back before re-raising
    - Request sessions are wrapped in the same guard (label "request") so reads
      issued directly by routes fail the same way repository writes do
    - Connection pool uses pool_pre_ping for stale connection detection

Design Decisions:
    - Singleton db_manager initialized on startup: FastAPI lifespan manages lifecycle
      (ADR: no global import side effects)
    - expire_on_commit=False: prevents lazy-load issues in async context
    - Repositories label their own operations ("vote update", "tag insert"); the
      request-level guard only catches what no repository labelled
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from devconnect.core.errors import PersistenceError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def persistence_guard(
    session: AsyncSession, operation: str,
) -> AsyncGenerator[None, None]:
    """Roll back and translate SQLAlchemy failures into PersistenceError."""
    try:
        yield
    except IntegrityError as e:
        await session.rollback()
        logger.error(f"DB integrity error during {operation}: {e}")
        raise PersistenceError("Integrity constraint violated", operation)
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"DB error during {operation}: {e}")
        raise PersistenceError("Database operation failed", operation)


class DatabaseSessionManager:
    """Owns the engine and hands out guarded request sessions."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        self.engine = create_async_engine(
            database_url,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_pre_ping=True,
            pool_recycle=3600,
        )
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        session = self._session_factory()
        try:
            async with persistence_guard(session, "request"):
                yield session
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except PersistenceError as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs):
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)


async def close_db() -> None:
    global db_manager
    if db_manager is not None:
        await db_manager.dispose()
        db_manager = None


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
