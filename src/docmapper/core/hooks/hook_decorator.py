"""Hook decorator API for user-friendly hook registration.

This module provides the decorator-based API for registering hooks,
enabling the `@hooks.on_entity_after_create("user")` syntax.
"""

from typing import Any, Callable, Optional, TypeVar

from docmapper.core.hooks.hook_events import HookEvent
from docmapper.core.hooks.hook_registry import HookRegistry

F = TypeVar("F", bound=Callable[..., Any])


class HookDecorator:
    """Provides decorator syntax for hook registration.

    Example:
        hooks = HookDecorator(registry)

        @hooks.on_entity_after_create("user")
        async def welcome(event, data, context):
            await send_welcome_mail(data["email"])
            return data
    """

    def __init__(self, registry: HookRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> HookRegistry:
        """Get the underlying hook registry."""
        return self._registry

    # =========================================================================
    # Entity Operation Hooks
    # =========================================================================

    def on_entity_after_create(
        self,
        collection: Optional[str] = None,
        priority: int = 0,
        stop_on_error: bool = False,
    ) -> Callable[[F], F]:
        """Register a hook for after an entity has been inserted.

        Args:
            collection: Optional collection name filter.
            priority: Execution priority (higher = earlier).
            stop_on_error: Abort chain on error.

        Returns:
            Decorator function.
        """
        return self._create_decorator(
            event=HookEvent.ON_ENTITY_AFTER_CREATE,
            collection=collection,
            priority=priority,
            stop_on_error=stop_on_error,
        )

    def on_entity_after_update(
        self,
        collection: Optional[str] = None,
        priority: int = 0,
        stop_on_error: bool = False,
    ) -> Callable[[F], F]:
        """Register a hook for after an entity has been updated or touched."""
        return self._create_decorator(
            event=HookEvent.ON_ENTITY_AFTER_UPDATE,
            collection=collection,
            priority=priority,
            stop_on_error=stop_on_error,
        )

    def on_entity_after_delete(
        self,
        collection: Optional[str] = None,
        priority: int = 0,
        stop_on_error: bool = False,
    ) -> Callable[[F], F]:
        """Register a hook for after an entity's document has been removed."""
        return self._create_decorator(
            event=HookEvent.ON_ENTITY_AFTER_DELETE,
            collection=collection,
            priority=priority,
            stop_on_error=stop_on_error,
        )

    def on_entity_after_fetch(
        self,
        collection: Optional[str] = None,
        priority: int = 0,
        stop_on_error: bool = False,
    ) -> Callable[[F], F]:
        """Register a hook for after an entity has been loaded by id."""
        return self._create_decorator(
            event=HookEvent.ON_ENTITY_AFTER_FETCH,
            collection=collection,
            priority=priority,
            stop_on_error=stop_on_error,
        )

    # =========================================================================
    # Query Operation Hooks
    # =========================================================================

    def on_query_after_execute(
        self,
        collection: Optional[str] = None,
        priority: int = 0,
        stop_on_error: bool = False,
    ) -> Callable[[F], F]:
        """Register a hook for after a query has returned its documents."""
        return self._create_decorator(
            event=HookEvent.ON_QUERY_AFTER_EXECUTE,
            collection=collection,
            priority=priority,
            stop_on_error=stop_on_error,
        )

    # =========================================================================
    # Generic Registration
    # =========================================================================

    def register(
        self,
        event: str,
        callback: Callable,
        filters: Optional[dict[str, Any]] = None,
        priority: int = 0,
        stop_on_error: bool = False,
    ) -> str:
        """Register a hook directly (non-decorator style).

        Returns:
            Unique hook_id for later removal.
        """
        return self._registry.register(
            event=event,
            callback=callback,
            filters=filters,
            priority=priority,
            stop_on_error=stop_on_error,
        )

    def unregister(self, hook_id: str) -> bool:
        """Unregister a hook by ID."""
        return self._registry.unregister(hook_id)

    def _create_decorator(
        self,
        event: str,
        collection: Optional[str],
        priority: int,
        stop_on_error: bool,
    ) -> Callable[[F], F]:
        def decorator(func: F) -> F:
            filters = {}
            if collection:
                filters["collection"] = collection

            self._registry.register(
                event=event,
                callback=func,
                filters=filters,
                priority=priority,
                stop_on_error=stop_on_error,
            )
            return func

        return decorator
