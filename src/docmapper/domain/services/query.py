"""Query builder for one entity type.

A Query holds mutable builder state (filters, condition, sort, limit) and
translates it afresh on every execution; nothing is cached between calls.

Example:
    query = Query(User)
    query.add_filter(Filter.greater_than("age", 12))
    query.add_filter(Filter.less_than("age", 40))
    query.set_sort(Sort("name"))
    teens_to_thirties = await query.get_all()
"""

from typing import Generic, Optional, TypeVar

from docmapper.core.config import Settings, get_settings
from docmapper.core.exceptions import NotFoundError, QueryError, store_errors
from docmapper.core.hooks import HookEvent, HookRegistry
from docmapper.core.logging import get_logger
from docmapper.core.query import CompiledQuery, compile_query
from docmapper.domain.entities.descriptor import EntityDescriptor, descriptor_for
from docmapper.domain.entities.entity import Entity
from docmapper.domain.entities.fields import ID_FIELD
from docmapper.domain.entities.filter import Condition, Filter, Sort
from docmapper.domain.entities.hook_context import HookContext
from docmapper.infrastructure.hooks import get_hook_registry
from docmapper.infrastructure.persistence.connector import StoreConnector, get_default_store

logger = get_logger(__name__)

E = TypeVar("E", bound=Entity)


class Query(Generic[E]):
    """Filter/sort/limit builder bound to one entity type.

    Args:
        entity: Entity subclass or EntityDescriptor to query.
        condition: How filters combine.
        store: Store connector; defaults to the process-wide one.
        hooks: Hook registry; defaults to the process-wide one.
        settings: Settings supplying the conflict policy and default limit.
    """

    def __init__(
        self,
        entity: "type[E] | EntityDescriptor[E]",
        condition: Condition = Condition.AND,
        *,
        store: Optional[StoreConnector] = None,
        hooks: Optional[HookRegistry] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.descriptor: EntityDescriptor[E] = descriptor_for(entity)
        self.collection_name = self.descriptor.collection_name
        self.settings = settings or get_settings()

        self.filters: list[Filter] = []
        self.condition = condition
        self.sort: Optional[Sort] = None
        self.limit: Optional[int] = self.settings.default_query_limit

        self._store = store
        self._hooks = hooks

    # =========================================================================
    # Builder state
    # =========================================================================

    def add_filter(self, filter: Filter) -> "Query[E]":
        """Append a filter.

        Raises:
            QueryError: If the entity declares props and the key is not one of them.
        """
        self._check_key(filter.key)
        self.filters.append(filter)
        return self

    def set_sort(self, sort: Optional[Sort]) -> "Query[E]":
        """Replace the sort; None removes it."""
        if sort is not None:
            self._check_key(sort.key)
        self.sort = sort
        return self

    def set_condition(self, condition: Condition) -> "Query[E]":
        self.condition = condition
        return self

    def set_limit(self, limit: Optional[int]) -> "Query[E]":
        """Cap the result count; None means unlimited.

        Raises:
            QueryError: If limit is not a positive integer.
        """
        if limit is not None and (isinstance(limit, bool) or not isinstance(limit, int) or limit < 1):
            raise QueryError(
                f"Limit must be a positive integer or None, got {limit!r}",
                operation="query",
                collection=self.collection_name,
            )
        self.limit = limit
        return self

    def build(self) -> CompiledQuery:
        """Translate the current builder state to a native query."""
        return compile_query(
            self.filters,
            condition=self.condition,
            sort=self.sort,
            limit=self.limit,
            conflict_policy=self.settings.filter_conflict_policy,
            collection=self.collection_name,
        )

    # =========================================================================
    # Execution
    # =========================================================================

    async def get_all(self) -> list[E]:
        """Run the query and decode every matching document.

        Raises:
            FilterConflictError: If And-filters conflict under the reject policy.
            StoreError: If the store call fails.
        """
        compiled = self.build()

        with store_errors("query", self.collection_name):
            store = self._store if self._store is not None else get_default_store()
            handle = await store.resolve(self.collection_name)
            cursor = handle.find(compiled.document)
            if compiled.limit is not None:
                cursor = cursor.limit(compiled.limit)
            if compiled.sort is not None:
                cursor = cursor.sort(compiled.sort)
            documents = await cursor.collect()

        results = [
            self.descriptor.new(store=self._store, hooks=self._hooks).decode(document)
            for document in documents
        ]

        logger.debug(
            "Query executed",
            collection=self.collection_name,
            query=compiled.document,
            limit=compiled.limit,
            sort=compiled.sort,
            count=len(results),
        )

        hooks = self._hooks if self._hooks is not None else get_hook_registry()
        await hooks.trigger(
            event=HookEvent.ON_QUERY_AFTER_EXECUTE,
            data={"query": compiled.document, "count": len(results)},
            context=HookContext(collection=self.collection_name, operation="query"),
            filters={"collection": self.collection_name},
        )
        return results

    async def get_first(self) -> Optional[E]:
        """Set the limit to 1 and return the first match, or None."""
        self.set_limit(1)
        results = await self.get_all()
        return results[0] if results else None

    @classmethod
    async def get_for_id(
        cls,
        entity: "type[E] | EntityDescriptor[E]",
        entity_id: str,
        *,
        store: Optional[StoreConnector] = None,
        hooks: Optional[HookRegistry] = None,
        settings: Optional[Settings] = None,
    ) -> E:
        """Load one entity by identifier.

        Raises:
            NotFoundError: If no document has that identifier.
        """
        query: Query[E] = cls(entity, store=store, hooks=hooks, settings=settings)
        query.add_filter(Filter.equals(ID_FIELD, entity_id))

        result = await query.get_first()
        if result is None:
            raise NotFoundError(
                f"{query.collection_name} with id '{entity_id}' does not exist.",
                operation="get_for_id",
                collection=query.collection_name,
                entity_id=entity_id,
            )
        return result

    def _check_key(self, key: str) -> None:
        if not self.descriptor.accepts_key(key):
            raise QueryError(
                f"'{key}' is not a field of {self.collection_name}",
                operation="query",
                collection=self.collection_name,
            )

    def __repr__(self) -> str:
        return (
            f"<Query(collection={self.collection_name}, condition={self.condition.name}, "
            f"filters={len(self.filters)}, limit={self.limit})>"
        )

