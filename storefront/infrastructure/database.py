"""Database Session Manager — async connection pool with automatic rollback and health checks.

Invariants:
    - Every session rolls back uncommitted work on exception (no partial commits leak)
    - Connection pool uses pool_pre_ping for stale connection detection
    - All SQLAlchemy, driver, connection and timeout faults mapped to StorageFailure
    - Domain errors raised inside a session propagate unchanged after rollback

Design Decisions:
    - No module-level singleton: the manager is built in the FastAPI lifespan, stored on
      app.state and injected into services as a StorageHandle
    - expire_on_commit=False: prevents lazy-load issues in async context
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy import text

from storefront.core.errors import StorageFailure, StorefrontError

logger = logging.getLogger(__name__)


def _connect_args(
    database_url: str, connect_timeout: float | None, command_timeout: float | None,
) -> dict:
    """Driver-level timeouts. Only asyncpg understands these keys."""
    if not database_url.startswith("postgresql+asyncpg"):
        return {}
    args = {}
    if connect_timeout is not None:
        args["timeout"] = connect_timeout
    if command_timeout is not None:
        args["command_timeout"] = command_timeout
    return args


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and health checks."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
        connect_timeout: float | None = None, command_timeout: float | None = None,
    ):
        engine_kwargs = {
            "pool_pre_ping": True,
            "connect_args": _connect_args(
                database_url, connect_timeout, command_timeout,
            ),
        }
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_engine(cls, engine: AsyncEngine) -> "DatabaseSessionManager":
        """Wrap an existing engine (test fixtures, scripts)."""
        manager = cls.__new__(cls)
        manager.engine = engine
        manager._session_factory = async_sessionmaker(
            engine, class_=AsyncSession, expire_on_commit=False,
        )
        return manager

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except StorefrontError:
            await session.rollback()
            raise
        except IntegrityError as e:
            await session.rollback()
            logger.error(f"DB integrity error: {e}", extra={"operation": "commit"})
            raise StorageFailure("Integrity constraint violated", "commit")
        except OperationalError as e:
            await session.rollback()
            logger.error(f"DB operational error: {e}", extra={"operation": "execute"})
            raise StorageFailure("Connection or operational error", "execute")
        except DBAPIError as e:
            await session.rollback()
            logger.error(f"DB driver error: {e}", extra={"operation": "query"})
            raise StorageFailure("Database driver error", "query")
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"SQLAlchemy error: {e}", extra={"operation": "unknown"})
            raise StorageFailure("Database operation failed", "unknown")
        except (TimeoutError, OSError) as e:
            logger.error(f"DB connection error: {e}", extra={"operation": "connect"})
            raise StorageFailure("Connection timed out or was refused", "connect")
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except StorageFailure as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


def get_storage(request: Request) -> DatabaseSessionManager:
    """FastAPI dependency for the storage handle built in the lifespan."""
    storage = getattr(request.app.state, "storage", None)
    if storage is None:
        raise RuntimeError("Database not initialized")
    return storage
