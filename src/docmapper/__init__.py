"""DocMapper - Object-document mapping for async Python.

Entities persist themselves as flat documents through a pluggable store
connector, and queries compile filter/sort/limit builders into native
query documents.
"""

__version__ = "0.1.0"

from docmapper.core.exceptions import (
    DocMapperError,
    FilterConflictError,
    InvalidStateError,
    NotFoundError,
    QueryError,
    StoreError,
)
from docmapper.core.hooks import HookDecorator, HookEvent, HookRegistry
from docmapper.domain.entities import (
    Condition,
    EntityDescriptor,
    Filter,
    FilterOperator,
    HookContext,
    Sort,
    SortDirection,
)
from docmapper.domain.entities.entity import Entity, EntityState, Prop
from docmapper.domain.services import Query
from docmapper.infrastructure.hooks import get_hook_registry
from docmapper.infrastructure.persistence import get_default_store, set_default_store
from docmapper.infrastructure.persistence.database import close_database, init_database

__all__ = [
    "__version__",
    "Condition",
    "DocMapperError",
    "Entity",
    "EntityDescriptor",
    "EntityState",
    "Filter",
    "FilterConflictError",
    "FilterOperator",
    "HookContext",
    "HookDecorator",
    "HookEvent",
    "HookRegistry",
    "InvalidStateError",
    "NotFoundError",
    "Prop",
    "Query",
    "QueryError",
    "Sort",
    "SortDirection",
    "StoreError",
    "close_database",
    "get_default_store",
    "get_hook_registry",
    "init_database",
    "set_default_store",
]
