"""Persistence: the store connector contract and the SQL document store."""

from docmapper.infrastructure.persistence.connector import (
    CollectionHandle,
    Cursor,
    Document,
    StoreConnector,
    get_default_store,
    set_default_store,
)

__all__ = [
    "CollectionHandle",
    "Cursor",
    "Document",
    "StoreConnector",
    "get_default_store",
    "set_default_store",
]
