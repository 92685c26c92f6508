"""SQLAlchemy model for the documents table.

Every collection shares one table; a row holds one schema-less document.
"""

from typing import Any

from sqlalchemy import Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from docmapper.infrastructure.persistence.database import Base


class DocumentModel(Base):
    """SQLAlchemy model for the documents table.

    Attributes:
        pk: Surrogate key; its order is insertion order.
        collection: Collection name.
        id: Document identifier, unique within its collection.
        body: The document without its identifier.
    """

    __tablename__ = "documents"
    __table_args__ = (UniqueConstraint("collection", "id", name="uq_documents_collection_id"),)

    pk: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    collection: Mapped[str] = mapped_column(
        String(128),
        nullable=False,
        index=True,
        comment="Collection name",
    )
    id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        comment="Document ID (24-char hex when generated)",
    )
    body: Mapped[dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        comment="Document fields, excluding _id",
    )

    def to_document(self) -> dict[str, Any]:
        """Raw document with the identifier under _id."""
        return {"_id": self.id, **self.body}

    def __repr__(self) -> str:
        return f"<Document(collection={self.collection}, id={self.id})>"
