"""Infrastructure hooks module.

Contains built-in hooks and the process-wide hook registry.
"""

from docmapper.core.hooks import HookRegistry
from docmapper.infrastructure.hooks.builtin_hooks import (
    BUILTIN_HOOKS,
    lifecycle_log_hook,
    register_builtin_hooks,
)

# Global hook registry instance
_hook_registry: HookRegistry | None = None


def get_hook_registry() -> HookRegistry:
    """Get the global hook registry, registering built-in hooks on first use.

    Returns:
        HookRegistry: Global hook registry instance.
    """
    global _hook_registry
    if _hook_registry is None:
        _hook_registry = HookRegistry()
        register_builtin_hooks(_hook_registry)
    return _hook_registry


__all__ = [
    "BUILTIN_HOOKS",
    "get_hook_registry",
    "lifecycle_log_hook",
    "register_builtin_hooks",
]
