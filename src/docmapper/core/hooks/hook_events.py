"""Hook event definitions.

All after-events fire only once the store call for the operation has
succeeded. A failed store call never triggers its event.
"""


class HookEvent:
    """Hook event names.

    Attributes in format: ON_<CATEGORY>_<TIMING>_<OPERATION>
    """

    # Entity Operations
    ON_ENTITY_AFTER_CREATE = "on_entity_after_create"
    ON_ENTITY_AFTER_UPDATE = "on_entity_after_update"
    ON_ENTITY_AFTER_DELETE = "on_entity_after_delete"
    ON_ENTITY_AFTER_FETCH = "on_entity_after_fetch"

    # Query Operations
    ON_QUERY_AFTER_EXECUTE = "on_query_after_execute"


def get_all_events() -> list[str]:
    """Get all available hook event names."""
    return [
        value
        for name, value in vars(HookEvent).items()
        if not name.startswith("_") and isinstance(value, str)
    ]
