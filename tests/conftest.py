"""Pytest configuration for all tests."""

from typing import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from docmapper.core.config import Settings
from docmapper.core.hooks import HookRegistry
from docmapper.infrastructure.persistence import set_default_store
from docmapper.infrastructure.persistence.database import Base
from docmapper.infrastructure.persistence.document_store import SqlStoreConnector
from docmapper.infrastructure.persistence.models import DocumentModel  # noqa: F401


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(_env_file=None, environment="testing", log_format="console")


@pytest_asyncio.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create an in-memory SQLite engine with the documents table.

    StaticPool keeps every session on the same connection, so the
    in-memory database survives between sessions.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def store(session_factory: async_sessionmaker[AsyncSession]) -> SqlStoreConnector:
    """SQL-backed store connector over the in-memory database."""
    return SqlStoreConnector(session_factory)


@pytest.fixture
def hook_registry() -> HookRegistry:
    """Fresh hook registry without built-in hooks."""
    return HookRegistry()


@pytest.fixture(autouse=True)
def _reset_default_store() -> Generator[None, None, None]:
    """Make sure no test leaks a process-wide store connector."""
    yield
    set_default_store(None)
