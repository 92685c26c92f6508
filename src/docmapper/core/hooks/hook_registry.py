"""Hook registry - Central hook registration and execution engine.

The HookRegistry is the observer interface of the entity lifecycle. It provides:
- Registration of hooks with filters and priority
- Execution of hooks in priority order
- Tag-based filtering for collection-specific hooks
- Error isolation and logging

Entities and queries trigger after-events on the registry once a store call
has succeeded. A failing hook never undoes the write it observed.
"""

import inspect
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from docmapper.core.hooks.hook_events import get_all_events
from docmapper.core.logging import get_logger
from docmapper.domain.entities.hook_context import HookContext, HookResult

logger = get_logger(__name__)


@dataclass
class RegisteredHook:
    """Internal representation of a registered hook.

    Attributes:
        id: Unique identifier for this hook registration.
        event: The event this hook is registered for.
        callback: The function to call (sync or async).
        filters: Tag-based filters (e.g., {"collection": "user"}).
        priority: Execution priority (higher = earlier).
        stop_on_error: Whether errors should abort the chain.
        is_builtin: Whether this is a built-in hook.
        registration_order: Order in which this hook was registered.
    """

    id: str
    event: str
    callback: Callable
    filters: dict[str, Any] = field(default_factory=dict)
    priority: int = 0
    stop_on_error: bool = False
    is_builtin: bool = False
    registration_order: int = 0


class HookRegistry:
    """Central hook registration and execution engine.

    Example:
        registry = HookRegistry()

        hook_id = registry.register(
            event=HookEvent.ON_ENTITY_AFTER_CREATE,
            callback=my_handler,
            filters={"collection": "user"},
            priority=10,
        )

        result = await registry.trigger(
            event=HookEvent.ON_ENTITY_AFTER_CREATE,
            data=user.to_json(),
            context=HookContext(collection="user", operation="create", entity_id=user.id),
            filters={"collection": "user"},
        )

        registry.unregister(hook_id)
    """

    def __init__(self) -> None:
        self._hooks: dict[str, list[RegisteredHook]] = {}
        self._registration_counter: int = 0
        self._hook_map: dict[str, RegisteredHook] = {}  # hook_id -> hook

    def register(
        self,
        event: str,
        callback: Callable,
        filters: Optional[dict[str, Any]] = None,
        priority: int = 0,
        stop_on_error: bool = False,
        is_builtin: bool = False,
    ) -> str:
        """Register a hook for an event.

        Args:
            event: Hook event name (e.g., "on_entity_after_create").
            callback: Function to execute. Should accept (event, data, context)
                      and may return replacement data for later hooks.
            filters: Optional tag-based filters. Hook only fires if
                     all filter conditions match (e.g., {"collection": "user"}).
            priority: Execution priority. Higher priority hooks run first.
                      Built-in hooks use negative priorities.
            stop_on_error: If True, errors in this hook abort the chain.
            is_builtin: If True, this hook cannot be unregistered.

        Returns:
            Unique hook_id string for later removal.

        Raises:
            ValueError: If event is not a HookEvent name.
        """
        if event not in get_all_events():
            raise ValueError(f"Unknown hook event: {event}")

        hook_id = f"hook_{uuid.uuid4().hex[:12]}"

        # FIFO ordering within same priority
        self._registration_counter += 1

        hook = RegisteredHook(
            id=hook_id,
            event=event,
            callback=callback,
            filters=filters or {},
            priority=priority,
            stop_on_error=stop_on_error,
            is_builtin=is_builtin,
            registration_order=self._registration_counter,
        )

        self._hooks.setdefault(event, []).append(hook)
        self._hook_map[hook_id] = hook

        logger.debug(
            "Hook registered",
            hook_id=hook_id,
            hook_event=event,
            priority=priority,
            filters=filters,
            is_builtin=is_builtin,
        )

        return hook_id

    def unregister(self, hook_id: str) -> bool:
        """Remove a registered hook.

        Args:
            hook_id: The unique ID returned from register().

        Returns:
            True if hook was removed, False if not found or is built-in.
        """
        hook = self._hook_map.get(hook_id)
        if not hook:
            logger.warning("Hook not found for unregister", hook_id=hook_id)
            return False

        if hook.is_builtin:
            logger.warning(
                "Cannot unregister built-in hook",
                hook_id=hook_id,
                hook_event=hook.event,
            )
            return False

        remaining = [h for h in self._hooks.get(hook.event, []) if h.id != hook_id]
        if remaining:
            self._hooks[hook.event] = remaining
        else:
            self._hooks.pop(hook.event, None)

        del self._hook_map[hook_id]

        logger.debug("Hook unregistered", hook_id=hook_id, hook_event=hook.event)
        return True

    async def trigger(
        self,
        event: str,
        data: Optional[dict[str, Any]] = None,
        context: Optional[HookContext] = None,
        filters: Optional[dict[str, Any]] = None,
    ) -> HookResult:
        """Execute all registered hooks for an event.

        Hooks are executed in priority order (higher priority first).
        Hooks with the same priority execute in registration order (FIFO).

        Args:
            event: Hook event name.
            data: Data passed to the first hook.
            context: HookContext describing the operation.
            filters: Trigger-time filters. Only hooks matching these
                     filters will be executed.

        Returns:
            HookResult with success status, any errors, and final data.
        """
        result = HookResult(success=True, data=data)

        matching_hooks = self._filter_hooks(self._hooks.get(event, []), filters)
        if not matching_hooks:
            return result

        sorted_hooks = sorted(
            matching_hooks,
            key=lambda h: (-h.priority, h.registration_order),
        )

        logger.debug(
            "Triggering hooks",
            hook_event=event,
            hook_count=len(sorted_hooks),
            filters=filters,
        )

        current_data = data
        for hook in sorted_hooks:
            try:
                hook_result = await self._execute_hook(hook, event, current_data, context)
                if hook_result is not None and isinstance(hook_result, dict):
                    current_data = hook_result
                    result.data = current_data

            except Exception as e:
                # Log error but continue (unless stop_on_error)
                logger.error(
                    "Hook execution failed",
                    hook_id=hook.id,
                    hook_event=event,
                    error=str(e),
                    stop_on_error=hook.stop_on_error,
                )
                result.errors.append(f"Hook {hook.id} failed: {e}")

                if hook.stop_on_error:
                    result.success = False
                    return result

        return result

    async def _execute_hook(
        self,
        hook: RegisteredHook,
        event: str,
        data: Optional[dict[str, Any]],
        context: Optional[HookContext],
    ) -> Any:
        """Execute a single hook callback, awaiting it when it is async."""
        outcome = hook.callback(event, data, context)
        if inspect.isawaitable(outcome):
            return await outcome
        return outcome

    def _filter_hooks(
        self,
        hooks: list[RegisteredHook],
        filters: Optional[dict[str, Any]],
    ) -> list[RegisteredHook]:
        """Filter hooks based on trigger filters.

        A hook matches if it has no filters, or all its filter keys
        match the trigger filters.
        """
        if not filters:
            return list(hooks)

        matching = []
        for hook in hooks:
            if all(
                filters.get(key) is not None and filters.get(key) == value
                for key, value in hook.filters.items()
            ):
                matching.append(hook)

        return matching

    def get_hooks_for_event(self, event: str) -> list[RegisteredHook]:
        """Get all hooks registered for an event."""
        return self._hooks.get(event, []).copy()

    def get_hook_by_id(self, hook_id: str) -> Optional[RegisteredHook]:
        """Get a hook by its ID."""
        return self._hook_map.get(hook_id)

    def clear(self, include_builtin: bool = False) -> int:
        """Remove all registered hooks.

        Args:
            include_builtin: If True, also remove built-in hooks.

        Returns:
            Number of hooks removed.
        """
        if include_builtin:
            count = len(self._hook_map)
            self._hooks.clear()
            self._hook_map.clear()
        else:
            to_remove = [
                hook_id for hook_id, hook in self._hook_map.items() if not hook.is_builtin
            ]
            for hook_id in to_remove:
                self.unregister(hook_id)
            count = len(to_remove)

        logger.debug("Hooks cleared", count=count, include_builtin=include_builtin)
        return count
