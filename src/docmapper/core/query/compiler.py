"""Query compiler for filter lists.

Filters are first folded into a query tree (see ``ast``) and then rendered
to the store's native query document in one final pass.

Under the And condition, comparisons on the same field merge into one
range node, so ``age > 12`` and ``age < 40`` become
``{"age": {"$gt": 12, "$lt": 40}}``. Combinations that cannot merge
(an equality plus anything else on the same field, or the same comparator
twice) are conflicts, resolved by the configured policy:

- ``reject``: raise FilterConflictError.
- ``last_wins``: the later filter replaces the earlier one.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Literal

from docmapper.core.exceptions import FilterConflictError, QueryError
from docmapper.core.logging import get_logger
from docmapper.domain.entities.fields import store_field_name
from docmapper.domain.entities.filter import Condition, Filter, FilterOperator, Sort

from .ast import AllOf, AnyOf, FieldEquals, FieldRange, Node

logger = get_logger(__name__)

ConflictPolicy = Literal["reject", "last_wins"]


class QueryTreeBuilder:
    """Builds a query tree incrementally from filters."""

    def __init__(
        self,
        condition: Condition = Condition.AND,
        conflict_policy: ConflictPolicy = "reject",
        collection: str | None = None,
    ) -> None:
        if conflict_policy not in ("reject", "last_wins"):
            raise QueryError(f"Unknown filter conflict policy: {conflict_policy}")
        self.condition = condition
        self.conflict_policy = conflict_policy
        self.collection = collection
        self._fields: dict[str, FieldEquals | FieldRange] = {}
        self._branches: list[Node] = []

    def add(self, filter: Filter) -> "QueryTreeBuilder":
        """Fold one filter into the tree."""
        field = store_field_name(filter.key)

        if self.condition is Condition.OR:
            self._branches.append(self._leaf(field, filter))
            return self

        existing = self._fields.get(field)

        if filter.operator is FilterOperator.EQUALS:
            if existing is not None:
                self._conflict(field, existing, filter)
            self._fields[field] = FieldEquals(field, filter.value)
            return self

        symbol = filter.operator.symbol
        if isinstance(existing, FieldRange):
            if symbol in existing.bounds:
                self._conflict(field, existing, filter)
            existing.bounds[symbol] = filter.value
            return self

        if existing is not None:
            self._conflict(field, existing, filter)
        self._fields[field] = FieldRange(field, {symbol: filter.value})
        return self

    def extend(self, filters: Iterable[Filter]) -> "QueryTreeBuilder":
        for filter in filters:
            self.add(filter)
        return self

    def build(self) -> Node:
        """Return the tree for the filters added so far."""
        if self.condition is Condition.OR:
            return AnyOf(list(self._branches))
        return AllOf(list(self._fields.values()))

    @staticmethod
    def _leaf(field: str, filter: Filter) -> Node:
        if filter.operator is FilterOperator.EQUALS:
            return FieldEquals(field, filter.value)
        return FieldRange(field, {filter.operator.symbol: filter.value})

    def _conflict(self, field: str, existing: Node, filter: Filter) -> None:
        if self.conflict_policy == "reject":
            raise FilterConflictError(
                f"Filter {filter.operator.name} on '{field}' conflicts with an "
                f"earlier filter on the same field",
                field=field,
                operation="query",
                collection=self.collection,
            )
        logger.debug(
            "Filter replaces earlier filter on same field",
            field=field,
            operator=filter.operator.name,
            replaced=type(existing).__name__,
            collection=self.collection,
        )


def render(node: Node) -> dict[str, Any]:
    """Render a query tree to a native query document."""
    if isinstance(node, FieldEquals):
        return {node.field: node.value}

    if isinstance(node, FieldRange):
        return {node.field: dict(node.bounds)}

    if isinstance(node, AnyOf):
        if not node.branches:
            return {}
        return {"$or": [render(branch) for branch in node.branches]}

    if isinstance(node, AllOf):
        rendered = [render(clause) for clause in node.clauses]
        document: dict[str, Any] = {}
        for part in rendered:
            if document.keys() & part.keys():
                # Overlapping keys cannot share one flat document
                return {"$and": rendered}
            document.update(part)
        return document

    raise QueryError(f"Unknown query node type: {type(node).__name__}")


@dataclass
class CompiledQuery:
    """A native query document plus the cursor modifiers to apply to it.

    Attributes:
        document: Native query document passed to ``find``.
        limit: Maximum number of documents, or None for unlimited.
        sort: Single-key ordering ``{field: 1 | -1}``, or None.
    """

    document: dict[str, Any]
    limit: int | None = None
    sort: dict[str, int] | None = None


def compile_query(
    filters: Iterable[Filter],
    condition: Condition = Condition.AND,
    sort: Sort | None = None,
    limit: int | None = None,
    conflict_policy: ConflictPolicy = "reject",
    collection: str | None = None,
) -> CompiledQuery:
    """Compile filters, sort and limit to a store query.

    Examples:
        >>> compile_query([Filter.greater_than("age", 12), Filter.less_than("age", 40)]).document
        {'age': {'$gt': 12, '$lt': 40}}

        >>> compile_query([Filter.equals("name", "ada")], Condition.OR).document
        {'$or': [{'name': 'ada'}]}
    """
    builder = QueryTreeBuilder(condition, conflict_policy, collection)
    builder.extend(filters)

    return CompiledQuery(
        document=render(builder.build()),
        limit=limit,
        sort={store_field_name(sort.key): int(sort.direction)} if sort is not None else None,
    )
