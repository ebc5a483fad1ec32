"""Database Connection Manager — async engine, transactional connections, health checks.

Invariants:
    - Every connection runs inside a transaction: commit on success, rollback on error
    - Connection pool uses pool_pre_ping for stale connection detection
    - All SQLAlchemy exceptions leave as MapperError (core/errors.py), classified by
      driver code (core/driver_errors.py)
    - asyncio.CancelledError is never caught: a cancelled request aborts its query

Design Decisions:
    - One manager per process, created in the FastAPI lifespan and stored on app.state
      (no module-level singleton)
    - Core connections over ORM sessions: there are no mapped classes, only
      dynamically built statements
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from psql_mapper.core.driver_errors import classify_driver_error
from psql_mapper.core.errors import DatabaseError

logger = logging.getLogger(__name__)


class DatabaseSessionManager:
    """Owns the shared async engine and hands out transactional connections."""

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

    @classmethod
    def from_engine(cls, engine: AsyncEngine) -> "DatabaseSessionManager":
        """Wrap an already configured engine (scripts and test fixtures)."""
        manager = cls.__new__(cls)
        manager.engine = engine
        return manager

    @asynccontextmanager
    async def connection(self) -> AsyncGenerator[AsyncConnection, None]:
        """Provide a connection in a transaction, translating driver errors."""
        try:
            async with self.engine.begin() as conn:
                yield conn
        except DBAPIError as e:
            error = classify_driver_error(e)
            logger.warning(
                f"DB driver error: {error.message}",
                extra={"error_code": error.code},
            )
            raise error from e
        except SQLAlchemyError as e:
            logger.error(f"SQLAlchemy error: {e}")
            raise DatabaseError(type(e).__name__) from e

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.connection() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    return DatabaseSessionManager(database_url, **kwargs)
