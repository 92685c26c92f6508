"""Domain value objects for DocMapper.

``Entity`` and ``Prop`` live in ``docmapper.domain.entities.entity`` and are
re-exported from the top-level ``docmapper`` package; they are not imported
here because the hook system depends on ``hook_context`` from this package.
"""

from docmapper.domain.entities.descriptor import EntityDescriptor, descriptor_for
from docmapper.domain.entities.fields import (
    CREATED_AT_FIELD,
    ID_ALIAS,
    ID_FIELD,
    RESERVED_FIELDS,
    UPDATED_AT_FIELD,
)
from docmapper.domain.entities.filter import (
    Condition,
    Filter,
    FilterOperator,
    Sort,
    SortDirection,
)
from docmapper.domain.entities.hook_context import HookContext, HookResult

__all__ = [
    "CREATED_AT_FIELD",
    "Condition",
    "EntityDescriptor",
    "Filter",
    "FilterOperator",
    "HookContext",
    "HookResult",
    "ID_ALIAS",
    "ID_FIELD",
    "RESERVED_FIELDS",
    "Sort",
    "SortDirection",
    "UPDATED_AT_FIELD",
    "descriptor_for",
]
