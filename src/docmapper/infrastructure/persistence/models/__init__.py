"""SQLAlchemy models for the document store."""

from docmapper.infrastructure.persistence.models.document import DocumentModel

__all__ = ["DocumentModel"]
