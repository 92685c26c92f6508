"""Reserved document field names.

These keys are owned by the entity itself and never appear inside an
entity's props.
"""

ID_FIELD = "_id"
ID_ALIAS = "id"
CREATED_AT_FIELD = "createdAt"
UPDATED_AT_FIELD = "updatedAt"

RESERVED_FIELDS = frozenset({ID_FIELD, ID_ALIAS, CREATED_AT_FIELD, UPDATED_AT_FIELD})


def store_field_name(key: str) -> str:
    """Map a filter or sort key to the field name used in stored documents."""
    return ID_FIELD if key in (ID_FIELD, ID_ALIAS) else key
