"""Filter and sort value objects used to narrow and order queries.

Both are immutable: a query holds an ordered list of filters and at most
one sort, and translates them afresh on every execution.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

Scalar = Union[str, int, float, bool, None]
FilterValue = Union[Scalar, list[Scalar]]


class FilterOperator(str, Enum):
    """Comparison operators, valued by their store symbol."""

    EQUALS = "$eq"
    NOT_EQUALS = "$ne"
    GREATER_THAN = "$gt"
    GREATER_OR_EQUAL = "$gte"
    LESS_THAN = "$lt"
    LESS_OR_EQUAL = "$lte"

    @property
    def symbol(self) -> str:
        return self.value


class SortDirection(int, Enum):
    """Sort direction, valued as the store expects it."""

    ASCENDING = 1
    DESCENDING = -1


class Condition(str, Enum):
    """How the filters of one query combine."""

    AND = "$and"
    OR = "$or"


@dataclass(frozen=True)
class Filter:
    """One field/operator/value comparison.

    Attributes:
        key: Field name. ``id`` (or ``_id``) addresses the document identifier.
        operator: Comparison operator.
        value: A scalar, a list of scalars, or an identifier string.
    """

    key: str
    operator: FilterOperator
    value: FilterValue

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("Filter key is required")
        if not isinstance(self.operator, FilterOperator):
            raise ValueError(f"Unknown filter operator: {self.operator!r}")

    @classmethod
    def equals(cls, key: str, value: FilterValue) -> "Filter":
        return cls(key, FilterOperator.EQUALS, value)

    @classmethod
    def not_equals(cls, key: str, value: FilterValue) -> "Filter":
        return cls(key, FilterOperator.NOT_EQUALS, value)

    @classmethod
    def greater_than(cls, key: str, value: FilterValue) -> "Filter":
        return cls(key, FilterOperator.GREATER_THAN, value)

    @classmethod
    def greater_or_equal(cls, key: str, value: FilterValue) -> "Filter":
        return cls(key, FilterOperator.GREATER_OR_EQUAL, value)

    @classmethod
    def less_than(cls, key: str, value: FilterValue) -> "Filter":
        return cls(key, FilterOperator.LESS_THAN, value)

    @classmethod
    def less_or_equal(cls, key: str, value: FilterValue) -> "Filter":
        return cls(key, FilterOperator.LESS_OR_EQUAL, value)


@dataclass(frozen=True)
class Sort:
    """Single-key ordering.

    Attributes:
        key: Field name to order by.
        direction: Ascending or descending.
    """

    key: str
    direction: SortDirection = SortDirection.ASCENDING

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("Sort key is required")
