"""Domain services for DocMapper."""

from docmapper.domain.services.query import Query

__all__ = ["Query"]
