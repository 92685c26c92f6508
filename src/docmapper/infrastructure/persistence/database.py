"""Database abstraction layer using SQLAlchemy 2.0 async.

This module provides the engine and session management backing the bundled
document store. It supports SQLite (aiosqlite) and PostgreSQL (asyncpg)
drivers.
"""

from pathlib import Path
from typing import TYPE_CHECKING

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from docmapper.core.config import Settings, get_settings
from docmapper.core.logging import get_logger

if TYPE_CHECKING:
    from docmapper.infrastructure.persistence.document_store import SqlStoreConnector

logger = get_logger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class DatabaseManager:
    """Database connection and session manager.

    This class manages the async database engine and session factory.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine:
        """Get or create the database engine."""
        if self._engine is None:
            if self.settings.is_sqlite:
                engine_options: dict = {"connect_args": {"check_same_thread": False}}
            else:
                engine_options = {
                    "pool_size": self.settings.db_pool_size,
                    "max_overflow": self.settings.db_max_overflow,
                    "pool_timeout": self.settings.db_pool_timeout,
                    "pool_recycle": self.settings.db_pool_recycle,
                }

            self._engine = create_async_engine(
                self.settings.database_url,
                echo=self.settings.db_echo,
                **engine_options,
            )
            logger.info(
                "Database engine created",
                database_url=self._engine.url.render_as_string(hide_password=True),
            )
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Get or create the session factory."""
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(
                bind=self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
            logger.debug("Database session factory created")
        return self._session_factory

    async def create_tables(self) -> None:
        """Create the documents table if it does not exist."""
        # Registers DocumentModel with Base.metadata
        from docmapper.infrastructure.persistence.models import DocumentModel  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
            logger.info("Database tables created")

    async def drop_tables(self) -> None:
        """Drop all tables.

        WARNING: This will delete all documents. Only use in testing!
        """
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            logger.warning("Database tables dropped")

    async def disconnect(self) -> None:
        """Close the database engine and all connections."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Database engine disposed")

    async def check_connection(self) -> bool:
        """Check if database connection is working."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
                logger.debug("Database connection check successful")
                return True
        except Exception as e:
            logger.error("Database connection check failed", error=str(e))
            return False

    def connector(self) -> "SqlStoreConnector":
        """Store connector backed by this manager's sessions."""
        from docmapper.infrastructure.persistence.document_store import SqlStoreConnector

        return SqlStoreConnector(self.session_factory)


# Global database manager instance
_db_manager: DatabaseManager | None = None


def get_db_manager() -> DatabaseManager:
    """Get the global database manager instance."""
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
    return _db_manager


async def init_database(settings: Settings | None = None) -> "SqlStoreConnector":
    """Connect, create tables, and install the process-wide store connector.

    Returns:
        SqlStoreConnector: The installed connector.

    Raises:
        RuntimeError: If the database cannot be reached.
    """
    from docmapper.infrastructure.persistence.connector import set_default_store

    global _db_manager
    if settings is not None:
        _db_manager = DatabaseManager(settings)
    db = get_db_manager()

    if db.settings.is_sqlite and ":memory:" not in db.settings.database_url:
        # sqlite+aiosqlite:///path/to/file.db
        db_dir = Path(db.settings.database_url.split(":///")[-1]).parent
        db_dir.mkdir(parents=True, exist_ok=True)
        logger.info("Database directory created", path=str(db_dir))

    if not await db.check_connection():
        logger.error("Database connection failed")
        raise RuntimeError("Failed to connect to database")

    await db.create_tables()

    connector = db.connector()
    set_default_store(connector)
    return connector


async def close_database() -> None:
    """Dispose the global engine and uninstall the default store connector."""
    from docmapper.infrastructure.persistence.connector import set_default_store

    set_default_store(None)
    if _db_manager is not None:
        await _db_manager.disconnect()
