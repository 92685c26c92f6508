"""Built-in hooks for DocMapper.

These hooks are registered with negative priority so that user hooks
run first. They CANNOT be unregistered.

Built-in hooks:
- lifecycle_log_hook: Logs entity create/update/delete events
"""

from typing import Any, Optional

from docmapper.core.hooks.hook_events import HookEvent
from docmapper.core.hooks.hook_registry import HookRegistry
from docmapper.core.logging import get_logger
from docmapper.domain.entities.hook_context import HookContext

logger = get_logger(__name__)

_LIFECYCLE_VERBS = {
    HookEvent.ON_ENTITY_AFTER_CREATE: "Created",
    HookEvent.ON_ENTITY_AFTER_UPDATE: "Updated",
    HookEvent.ON_ENTITY_AFTER_DELETE: "Deleted",
}


async def lifecycle_log_hook(
    event: str,
    data: Optional[dict[str, Any]],
    context: Optional[HookContext],
) -> Optional[dict[str, Any]]:
    """Log a completed entity lifecycle operation.

    Args:
        event: The hook event name.
        data: The entity's JSON representation.
        context: The hook context.

    Returns:
        Unmodified data.
    """
    verb = _LIFECYCLE_VERBS.get(event)
    if verb is None or context is None:
        return data

    logger.info(
        f"{verb} {context.collection} with id '{context.entity_id}'.",
        collection=context.collection,
        entity_id=context.entity_id,
        operation=context.operation,
        request_id=context.request_id,
    )
    return data


def register_builtin_hooks(registry: HookRegistry) -> list[str]:
    """Register all built-in hooks with the registry.

    Args:
        registry: The HookRegistry to register hooks with.

    Returns:
        List of registered hook IDs.
    """
    hook_ids: list[str] = []

    # Lifecycle logging runs after user hooks
    for event in _LIFECYCLE_VERBS:
        hook_ids.append(
            registry.register(
                event=event,
                callback=lifecycle_log_hook,
                priority=-100,
                is_builtin=True,
            )
        )

    logger.info(
        "Built-in hooks registered",
        hook_count=len(hook_ids),
        hook_ids=hook_ids,
    )

    return hook_ids


# Dictionary of built-in hook functions for reference
BUILTIN_HOOKS = {
    "lifecycle_log_hook": lifecycle_log_hook,
}
