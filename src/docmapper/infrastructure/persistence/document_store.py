"""Store connector backed by a SQL database through SQLAlchemy.

Documents of every collection live in the ``documents`` table as JSON.
Query documents are evaluated by ``matcher`` against the collection's rows,
so any query the entity and query layers produce runs unchanged on SQLite
or PostgreSQL.
"""

import secrets
import time
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from docmapper.core.logging import get_logger
from docmapper.infrastructure.persistence.connector import Document
from docmapper.infrastructure.persistence.matcher import (
    InvalidQueryError,
    match_document,
    sort_documents,
)
from docmapper.infrastructure.persistence.models import DocumentModel

logger = get_logger(__name__)


def generate_document_id() -> str:
    """Generate a 24-char hex identifier: 4-byte timestamp plus 8 random bytes."""
    return f"{int(time.time()):08x}{secrets.token_hex(8)}"


def _id_from_filter(filter_by_id: Document) -> str:
    if set(filter_by_id) != {"_id"}:
        raise InvalidQueryError(f"Expected a filter on _id only, got {sorted(filter_by_id)}")
    return str(filter_by_id["_id"])


def apply_update(body: dict[str, Any], update_document: Document) -> dict[str, Any]:
    """Return a copy of body with ``$set`` and ``$unset`` applied."""
    unknown = set(update_document) - {"$set", "$unset"}
    if unknown:
        raise InvalidQueryError(f"Unsupported update operators: {sorted(unknown)}")

    updated = dict(body)
    for key, value in update_document.get("$set", {}).items():
        if key == "_id":
            raise InvalidQueryError("_id cannot be modified")
        updated[key] = value
    for key in update_document.get("$unset", {}):
        updated.pop(key, None)
    return updated


class SqlCursor:
    """Lazy, one-shot result set of a find call."""

    def __init__(self, handle: "SqlCollectionHandle", query_document: Document) -> None:
        self._handle = handle
        self._query = query_document
        self._limit: int | None = None
        self._sort: dict[str, int] | None = None
        self._consumed = False

    def limit(self, count: int) -> "SqlCursor":
        """Cap the number of documents; 0 means no limit."""
        if count < 0:
            raise ValueError("Cursor limit must not be negative")
        self._limit = count or None
        return self

    def sort(self, key_order: dict[str, int]) -> "SqlCursor":
        """Order by ``{field: 1 | -1}``; applied before the limit."""
        if any(direction not in (1, -1) for direction in key_order.values()):
            raise ValueError("Sort directions must be 1 or -1")
        self._sort = dict(key_order)
        return self

    async def collect(self) -> list[Document]:
        """Run the query and return the matching documents."""
        if self._consumed:
            raise RuntimeError("Cursor has already been collected")
        self._consumed = True

        documents = await self._handle._load(self._query)
        matches = [document for document in documents if match_document(document, self._query)]
        if self._sort:
            sort_documents(matches, self._sort)
        if self._limit is not None:
            matches = matches[: self._limit]
        return matches


class SqlCollectionHandle:
    """Raw operations on one collection."""

    def __init__(self, name: str, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.name = name
        self._session_factory = session_factory

    async def insert_one(self, document: Document) -> str:
        body = dict(document)
        document_id = str(body.pop("_id", None) or generate_document_id())

        async with self._session_factory() as session:
            async with session.begin():
                session.add(DocumentModel(collection=self.name, id=document_id, body=body))

        logger.debug("Document inserted", collection=self.name, document_id=document_id)
        return document_id

    async def update_one(self, filter_by_id: Document, update_document: Document) -> bool:
        document_id = _id_from_filter(filter_by_id)

        async with self._session_factory() as session:
            async with session.begin():
                result = await session.execute(self._by_id(document_id))
                row = result.scalar_one_or_none()
                if row is None:
                    logger.debug("Update matched no document", collection=self.name, document_id=document_id)
                    return False
                # Reassign so the JSON column is flagged dirty
                row.body = apply_update(row.body, update_document)

        logger.debug("Document updated", collection=self.name, document_id=document_id)
        return True

    async def delete_one(self, filter_by_id: Document) -> bool:
        document_id = _id_from_filter(filter_by_id)

        async with self._session_factory() as session:
            async with session.begin():
                result = await session.execute(
                    delete(DocumentModel).where(
                        DocumentModel.collection == self.name,
                        DocumentModel.id == document_id,
                    )
                )

        removed = result.rowcount > 0
        logger.debug("Document deleted", collection=self.name, document_id=document_id, removed=removed)
        return removed

    def find(self, query_document: Document) -> SqlCursor:
        return SqlCursor(self, query_document)

    def _by_id(self, document_id: str):
        return select(DocumentModel).where(
            DocumentModel.collection == self.name,
            DocumentModel.id == document_id,
        )

    async def _load(self, query_document: Document) -> list[Document]:
        statement = select(DocumentModel).where(DocumentModel.collection == self.name)

        # Plain id lookups use the (collection, id) index instead of a scan
        document_id = query_document.get("_id")
        if isinstance(document_id, str):
            statement = statement.where(DocumentModel.id == document_id)

        async with self._session_factory() as session:
            result = await session.execute(statement.order_by(DocumentModel.pk))
            return [row.to_document() for row in result.scalars().all()]


class SqlStoreConnector:
    """Resolves collection names to SQL-backed handles."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def resolve(self, collection_name: str) -> SqlCollectionHandle:
        if not collection_name:
            raise ValueError("Collection name is required")
        return SqlCollectionHandle(collection_name, self._session_factory)
