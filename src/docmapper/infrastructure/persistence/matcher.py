"""Evaluates native query documents against raw documents.

Supported query language:
- ``{"field": value}``: equality; an array field matches when it contains value
- ``{"field": {"$op": operand, ...}}`` with ``$eq $ne $gt $gte $lt $lte $in $nin``
- ``{"$and": [...]}`` and ``{"$or": [...]}`` at any level
- dotted paths (``"address.city"``) reach into embedded documents

Ordering comparisons against a missing field, or between values of
different kinds (number vs string), never match.
"""

from typing import Any, Callable

COMPARATORS = {"$eq", "$ne", "$gt", "$gte", "$lt", "$lte", "$in", "$nin"}
LOGICAL = {"$and", "$or"}

_MISSING = object()


class InvalidQueryError(ValueError):
    """Raised when a query document uses unsupported syntax."""


def resolve_path(document: dict[str, Any], path: str) -> Any:
    """Resolve a dotted path, returning the missing sentinel when absent."""
    value: Any = document
    for part in path.split("."):
        if isinstance(value, dict) and part in value:
            value = value[part]
        else:
            return _MISSING
    return value


def is_missing(value: Any) -> bool:
    return value is _MISSING


def match_document(document: dict[str, Any], query: dict[str, Any]) -> bool:
    """Check whether a document satisfies every clause of a query document."""
    if not isinstance(query, dict):
        raise InvalidQueryError("Query must be a dict.")

    for key, condition in query.items():
        if key in LOGICAL:
            if not _match_logical(document, key, condition):
                return False
        elif key.startswith("$"):
            raise InvalidQueryError(f"Unsupported top-level operator: {key}")
        elif not _match_field(resolve_path(document, key), condition):
            return False
    return True


def _match_logical(document: dict[str, Any], operator: str, clauses: Any) -> bool:
    if not isinstance(clauses, list):
        raise InvalidQueryError(f"{operator} requires a list of clauses.")
    if operator == "$and":
        return all(match_document(document, clause) for clause in clauses)
    return any(match_document(document, clause) for clause in clauses)


def _match_field(value: Any, condition: Any) -> bool:
    if isinstance(condition, dict) and condition and all(k.startswith("$") for k in condition):
        return all(_match_operator(value, op, operand) for op, operand in condition.items())
    return _equals(value, condition)


def _match_operator(value: Any, operator: str, operand: Any) -> bool:
    if operator not in COMPARATORS:
        raise InvalidQueryError(f"Unsupported operator: {operator}")

    if operator == "$eq":
        return _equals(value, operand)
    if operator == "$ne":
        return not _equals(value, operand)
    if operator in ("$in", "$nin"):
        if not isinstance(operand, list):
            raise InvalidQueryError(f"{operator} requires a list.")
        found = any(_equals(value, candidate) for candidate in operand)
        return found if operator == "$in" else not found

    compare = _ORDERINGS[operator]
    if is_missing(value):
        return False
    if isinstance(value, list) and not isinstance(operand, list):
        return any(_ordered(element, operand, compare) for element in value)
    return _ordered(value, operand, compare)


def _equals(value: Any, operand: Any) -> bool:
    if is_missing(value):
        return operand is None
    if isinstance(value, list) and not isinstance(operand, list):
        return any(_same(element, operand) for element in value)
    return _same(value, operand)


def _same(left: Any, right: Any) -> bool:
    # True == 1 in Python but not in a document store
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    return left == right


def _kind(value: Any) -> str:
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (int, float)):
        return "number"
    return type(value).__name__


def _ordered(value: Any, operand: Any, compare: Callable[[Any, Any], bool]) -> bool:
    if value is None or operand is None or _kind(value) != _kind(operand):
        return False
    try:
        return compare(value, operand)
    except TypeError:
        return False


_ORDERINGS: dict[str, Callable[[Any, Any], bool]] = {
    "$gt": lambda a, b: a > b,
    "$gte": lambda a, b: a >= b,
    "$lt": lambda a, b: a < b,
    "$lte": lambda a, b: a <= b,
}


def sort_key(value: Any) -> tuple[int, Any]:
    """Key placing missing/null first, then numbers, strings, and everything else."""
    if is_missing(value) or value is None:
        return (0, 0)
    if isinstance(value, bool):
        return (3, int(value))
    if isinstance(value, (int, float)):
        return (1, value)
    if isinstance(value, str):
        return (2, value)
    return (4, repr(value))


def sort_documents(documents: list[dict[str, Any]], key_order: dict[str, int]) -> list[dict[str, Any]]:
    """Stable multi-key sort; later keys break ties of earlier ones."""
    for key, direction in reversed(list(key_order.items())):
        documents.sort(key=lambda d: sort_key(resolve_path(d, key)), reverse=direction < 0)
    return documents
