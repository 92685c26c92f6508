"""Store connector contract consumed by entities and queries.

The connector resolves a collection name to a handle exposing raw
insert/update/delete/find operations. Any document store can be plugged in
by implementing these protocols; ``SqlStoreConnector`` is the bundled one.

Raw documents carry their identifier under ``_id``. Updates are documents
with ``$set`` and ``$unset`` sub-documents.
"""

from typing import Any, Protocol, runtime_checkable

Document = dict[str, Any]


@runtime_checkable
class Cursor(Protocol):
    """Lazy result set of a ``find`` call.

    ``limit`` and ``sort`` return the cursor for chaining. ``collect`` runs
    the query and may be called only once.
    """

    def limit(self, count: int) -> "Cursor": ...

    def sort(self, key_order: dict[str, int]) -> "Cursor": ...

    async def collect(self) -> list[Document]: ...


@runtime_checkable
class CollectionHandle(Protocol):
    """Raw operations on one collection."""

    name: str

    async def insert_one(self, document: Document) -> str: ...

    async def update_one(self, filter_by_id: Document, update_document: Document) -> bool: ...

    async def delete_one(self, filter_by_id: Document) -> bool: ...

    def find(self, query_document: Document) -> Cursor: ...


@runtime_checkable
class StoreConnector(Protocol):
    """Resolves collection names to handles."""

    async def resolve(self, collection_name: str) -> CollectionHandle: ...


# Process-wide connector used by entities and queries created without one
_default_store: StoreConnector | None = None


def set_default_store(store: StoreConnector | None) -> None:
    """Install (or clear, with None) the process-wide store connector."""
    global _default_store
    _default_store = store


def get_default_store() -> StoreConnector:
    """Get the process-wide store connector.

    Raises:
        RuntimeError: If no connector has been installed.
    """
    if _default_store is None:
        raise RuntimeError(
            "No store connector configured. Call set_default_store() or pass store= explicitly."
        )
    return _default_store
