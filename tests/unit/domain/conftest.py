"""Fixtures for entity and query unit tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest


@pytest.fixture
def mock_cursor() -> MagicMock:
    """Chainable cursor whose collect() returns no documents."""
    cursor = MagicMock()
    cursor.limit.return_value = cursor
    cursor.sort.return_value = cursor
    cursor.collect = AsyncMock(return_value=[])
    return cursor


@pytest.fixture
def mock_handle(mock_cursor: MagicMock) -> AsyncMock:
    """Collection handle with async writes and a sync find()."""
    handle = AsyncMock()
    handle.insert_one.return_value = "65a1f0c2e4b0a1b2c3d4e5f6"
    handle.update_one.return_value = True
    handle.delete_one.return_value = True
    handle.find = MagicMock(return_value=mock_cursor)
    return handle


@pytest.fixture
def mock_store(mock_handle: AsyncMock) -> AsyncMock:
    """Store connector resolving every collection to mock_handle."""
    store = AsyncMock()
    store.resolve.return_value = mock_handle
    return store
