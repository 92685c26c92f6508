"""Query tree and compiler API."""

from .ast import AllOf, AnyOf, FieldEquals, FieldRange, Node
from .compiler import CompiledQuery, QueryTreeBuilder, compile_query, render

__all__ = [
    "AllOf",
    "AnyOf",
    "CompiledQuery",
    "FieldEquals",
    "FieldRange",
    "Node",
    "QueryTreeBuilder",
    "compile_query",
    "render",
]
