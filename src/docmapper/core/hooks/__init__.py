"""Hook system core module.

Hooks are the observer interface of the entity lifecycle: entities and
queries trigger after-events on a HookRegistry once their store call has
succeeded.

Example usage:
    from docmapper.core.hooks import HookRegistry, HookDecorator

    registry = HookRegistry()
    hooks = HookDecorator(registry)

    @hooks.on_entity_after_create("user")
    async def audit_user(event, data, context):
        await audit_log.write(context.entity_id, data)
        return data
"""

from docmapper.core.hooks.hook_decorator import HookDecorator
from docmapper.core.hooks.hook_events import (
    HookEvent,
    get_all_events,
)
from docmapper.core.hooks.hook_registry import HookRegistry, RegisteredHook

__all__ = [
    "HookRegistry",
    "RegisteredHook",
    "HookDecorator",
    "HookEvent",
    "get_all_events",
]
