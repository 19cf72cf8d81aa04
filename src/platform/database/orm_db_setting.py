"""
SQLAlchemy async engine and session management

This module provides:
1. AsyncEngineManager: event-loop-aware engine / session maker
2. Base: declarative base for all ORM models
3. Database: session factory injected into the PostgreSQL stores
4. storage_conflict_guard: maps transient PostgreSQL failures to StorageConflictError

Every store method opens its own short session; the ledger counters are only ever
changed by single conditional UPDATE statements, so no unit of work spans calls.
"""

import asyncio
from contextlib import asynccontextmanager, contextmanager
from typing import AsyncGenerator, Iterator, Optional

from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import StorageConflictError
from src.platform.logging.loguru_io import Logger


# serialization_failure, deadlock_detected, lock_not_available
TRANSIENT_SQLSTATES = frozenset({'40001', '40P01', '55P03'})


class AsyncEngineManager:
    """
    Keeps the engine bound to the running event loop.

    Test clients and the CLI start their own loops; reusing an engine across loops raises
    "Task got Future attached to a different loop", so a loop change recreates it.
    """

    def __init__(self) -> None:
        self._engine: Optional[AsyncEngine] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._session_maker: Optional[async_sessionmaker[AsyncSession]] = None

    def get_engine(self) -> AsyncEngine:
        try:
            current_loop = asyncio.get_running_loop()
        except RuntimeError:
            if self._engine is None:
                self._engine = self._create_engine()
            return self._engine

        if self._loop is not current_loop:
            if self._engine is not None:
                Logger.base.warning('🔄 [DB] Event loop changed, recreating engine')
                self._session_maker = None
            Logger.base.info(f'🔗 [DB] Creating engine for event loop {id(current_loop)}')
            self._engine = self._create_engine()
            self._loop = current_loop

        return self._engine  # type: ignore[return-value]

    def get_session_maker(self) -> async_sessionmaker[AsyncSession]:
        engine = self.get_engine()
        if self._session_maker is None:
            self._session_maker = async_sessionmaker(
                engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
        return self._session_maker

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
        self._engine = None
        self._loop = None
        self._session_maker = None

    @staticmethod
    def _create_engine() -> AsyncEngine:
        return create_async_engine(
            settings.DATABASE_URL_ASYNC,
            echo=False,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_POOL_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,
            pool_pre_ping=settings.DB_POOL_PRE_PING,
        )


_engine_manager = AsyncEngineManager()


def get_engine() -> AsyncEngine:
    return _engine_manager.get_engine()


async def dispose_engine() -> None:
    await _engine_manager.dispose()


class Base(DeclarativeBase):
    pass


async def create_db_and_tables() -> None:
    """Create database tables if they don't exist"""
    # Models register themselves on Base.metadata when imported
    import src.service.ticketing.driven_adapter.model  # noqa: F401

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all, checkfirst=True)
    Logger.base.info('🗄️  [DB] Tables ensured')


async def drop_db_and_tables() -> None:
    import src.service.ticketing.driven_adapter.model  # noqa: F401

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.drop_all, checkfirst=True)


def is_transient_db_error(error: DBAPIError) -> bool:
    if error.connection_invalidated:
        return True
    sqlstate = getattr(error.orig, 'sqlstate', None) or getattr(error.orig, 'pgcode', None)
    return sqlstate in TRANSIENT_SQLSTATES


@contextmanager
def storage_conflict_guard(operation: str) -> Iterator[None]:
    """Re-raise transient database failures as StorageConflictError so callers can retry."""
    try:
        yield
    except DBAPIError as e:
        if is_transient_db_error(e):
            Logger.base.warning(f'⚠️ [DB] Transient failure during {operation}: {e.orig}')
            raise StorageConflictError(f'Storage conflict during {operation}') from e
        raise


class Database:
    """Session factory for dependency injection"""

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Context manager for database sessions; rolls back on exception"""
        session_maker = _engine_manager.get_session_maker()
        async with session_maker() as session:
            yield session
