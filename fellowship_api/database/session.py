# fellowship_api/database/session.py
"""
Async SQLAlchemy session management for the fellowship PostgreSQL database.

Usage:
    database_service = DatabaseService(settings)

    async with database_service.get_session() as session:
        result = await session.execute(select(GroupVerse).where(GroupVerse.id == verse_id))
        verse = result.scalar_one_or_none()

The engine is created on first use so importing the application never opens
a connection.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from fellowship_api.config import Settings


class DatabaseService:
    """
    Owns the async engine and hands out sessions.

    Attributes:
        _engine: Async SQLAlchemy engine
        _session_factory: Async session factory
        _logger: Logger instance
    """

    def __init__(self, settings: Settings):
        self._settings = settings
        self._logger = logging.getLogger("fellowship.database")
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker] = None

    def _initialize_engine(self) -> None:
        """
        Create the engine and session factory.

        Configuration:
            - asyncpg driver for PostgreSQL, aiosqlite for local SQLite files
            - Pool size/overflow/recycle from settings
            - Pool pre-ping for connection health validation
        """
        database_url = self._settings.database_url

        # Log connection info (hide password)
        safe_url = database_url.split("@")[-1] if "@" in database_url else database_url
        self._logger.info(f"Initializing database engine: {safe_url}")

        if database_url.startswith("sqlite"):
            # Local and test databases: fresh connection per session
            self._engine = create_async_engine(
                database_url,
                poolclass=NullPool,
                echo=self._settings.debug,
            )
        else:
            self._engine = create_async_engine(
                database_url,
                pool_size=self._settings.db_pool_size,
                max_overflow=self._settings.db_max_overflow,
                pool_pre_ping=True,
                pool_recycle=self._settings.db_pool_recycle,
                echo=self._settings.debug,
            )
        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Get async database session as context manager.

        Commits on success and rolls back on error.

        Yields:
            AsyncSession: Async database session
        """
        if self._session_factory is None:
            self._initialize_engine()

        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def close(self) -> None:
        """Dispose of the engine and its pooled connections."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            self._logger.info("Database engine disposed")
