"""Hook context and result types for the hook system.

Contains the data structures passed to and returned from hook callbacks:
- HookContext: Context passed to all hook callbacks
- HookResult: Result of a hook trigger operation
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class HookContext:
    """Context passed to all hook callbacks.

    Attributes:
        collection: Collection the operation ran against.
        operation: Operation name ("create", "update", "delete", "fetch", "query").
        entity_id: Identifier of the entity involved, if any.
        request_id: Correlation ID for logging and tracing.

    Example:
        async def my_hook(event: str, data: dict, context: HookContext) -> dict:
            logger.info("entity changed", collection=context.collection, entity_id=context.entity_id)
            return data
    """

    collection: str
    operation: str
    entity_id: Optional[str] = None
    request_id: str = ""

    def __post_init__(self) -> None:
        if not self.request_id:
            self.request_id = f"hk_{uuid.uuid4().hex[:12]}"


@dataclass
class HookResult:
    """Result of a hook trigger operation.

    Attributes:
        success: Whether all hooks executed successfully.
        errors: List of error messages from hooks that failed.
        data: Data returned by the last hook in the chain.
    """

    success: bool = True
    errors: list[str] = field(default_factory=list)
    data: Optional[dict[str, Any]] = None
