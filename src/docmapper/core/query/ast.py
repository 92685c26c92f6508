"""Query tree nodes built from filters before rendering to a store document."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Node:
    """Base class for all query tree nodes."""
    pass


@dataclass
class FieldEquals(Node):
    """Scalar equality on one field (e.g., name = 'ada')."""
    field: str
    value: Any


@dataclass
class FieldRange(Node):
    """Conjunction of comparisons on one field (e.g., 12 < age < 40).

    ``bounds`` maps operator symbols to operands in the order they were added.
    """
    field: str
    bounds: dict[str, Any] = field(default_factory=dict)


@dataclass
class AllOf(Node):
    """Every clause must match."""
    clauses: list[Node] = field(default_factory=list)


@dataclass
class AnyOf(Node):
    """At least one branch must match."""
    branches: list[Node] = field(default_factory=list)
