"""Database connection and session management."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from loguru import logger
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from ..config import settings
from .models import Base


class DatabaseManager:
    """Owns the async engine and hands out sessions for the news table."""

    def __init__(self, database_url: str | None = None, echo: bool | None = None):
        """Initialize database manager.

        Args:
            database_url: Database URL. If None, uses settings.database_url
            echo: Log emitted SQL. If None, uses settings.database_echo
        """
        self.database_url = database_url or settings.database_url
        self.echo = settings.database_echo if echo is None else echo
        self._engine: AsyncEngine | None = None
        self._sessionmaker: async_sessionmaker | None = None

    @property
    def engine(self) -> AsyncEngine:
        """Get or create the async engine."""
        if self._engine is None:
            # SQLite doesn't support pool settings
            if self.database_url.startswith("sqlite"):
                self._engine = create_async_engine(self.database_url, echo=self.echo)
            else:
                self._engine = create_async_engine(
                    self.database_url,
                    echo=self.echo,
                    pool_pre_ping=True,
                    pool_size=5,
                    max_overflow=10,
                )
            logger.info(f"Created database engine for {self.database_url}")
        return self._engine

    @property
    def sessionmaker(self) -> async_sessionmaker:
        """Get or create the async session maker."""
        if self._sessionmaker is None:
            self._sessionmaker = async_sessionmaker(
                self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
        return self._sessionmaker

    @property
    def sqlite_path(self) -> Path | None:
        """File backing a SQLite URL, or None for memory and other databases."""
        url = make_url(self.database_url)
        if url.get_backend_name() != "sqlite" or url.database in (None, "", ":memory:"):
            return None
        return Path(url.database)

    async def init_db(self) -> None:
        """Create the news table, and the SQLite file's directory, if missing."""
        if self.sqlite_path is not None:
            self.sqlite_path.parent.mkdir(parents=True, exist_ok=True)

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
            logger.info("Database tables initialized")

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get a session that commits on success and rolls back on error.

        Example:
            async with db_manager.get_session() as session:
                cache = NewsCacheRepository(session)
                entry = await cache.get("2024-03-08")
        """
        async with self.sessionmaker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def close(self) -> None:
        """Close database connections."""
        if self._engine:
            await self._engine.dispose()
            self._engine = None
            self._sessionmaker = None
            logger.info("Database connections closed")

    async def health_check(self) -> bool:
        """Check if database is accessible."""
        try:
            async with self.get_session() as session:
                await session.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return False


# Global database manager instance
_db_manager: DatabaseManager | None = None


def get_db_manager() -> DatabaseManager:
    """Get the global database manager instance."""
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
    return _db_manager


async def init_database() -> None:
    """Initialize the database with all tables."""
    await get_db_manager().init_db()


async def close_database() -> None:
    """Close database connections."""
    await get_db_manager().close()
