"""Exceptions raised by entity lifecycle and query operations.

Every error carries the operation, collection and identifier involved so
that a failure can be diagnosed from the exception alone.
"""

from contextlib import contextmanager
from typing import Any, Iterator

from docmapper.core.logging import get_logger

logger = get_logger(__name__)


class DocMapperError(Exception):
    """Base class for all DocMapper errors."""

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        collection: str | None = None,
        entity_id: str | None = None,
    ) -> None:
        self.message = message
        self.operation = operation
        self.collection = collection
        self.entity_id = entity_id
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Structured representation for logs and API responses."""
        return {
            "error": type(self).__name__,
            "message": self.message,
            "operation": self.operation,
            "collection": self.collection,
            "entity_id": self.entity_id,
        }


class InvalidStateError(DocMapperError):
    """Raised when an operation is invoked in the wrong lifecycle state."""


class NotFoundError(DocMapperError):
    """Raised when no document matches the requested identifier."""


class StoreError(DocMapperError):
    """Raised when the store connector fails.

    The connector's exception is chained as ``__cause__`` and kept on
    ``cause``.
    """

    def __init__(self, message: str, *, cause: BaseException | None = None, **context: Any) -> None:
        self.cause = cause
        super().__init__(message, **context)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["cause"] = repr(self.cause) if self.cause is not None else None
        return data


class QueryError(DocMapperError):
    """Raised when a query is built with invalid input."""


class FilterConflictError(QueryError):
    """Raised when two And-filters on one field cannot be combined."""

    def __init__(self, message: str, *, field: str, **context: Any) -> None:
        self.field = field
        super().__init__(message, **context)


@contextmanager
def store_errors(
    operation: str,
    collection: str | None = None,
    entity_id: str | None = None,
) -> Iterator[None]:
    """Re-raise connector failures inside the block as StoreError.

    DocMapper's own errors pass through unchanged.
    """
    try:
        yield
    except DocMapperError:
        raise
    except Exception as e:
        logger.error(
            "Store operation failed",
            operation=operation,
            collection=collection,
            entity_id=entity_id,
            error=str(e),
        )
        raise StoreError(
            f"{operation} on {collection} failed: {e}",
            cause=e,
            operation=operation,
            collection=collection,
            entity_id=entity_id,
        ) from e
