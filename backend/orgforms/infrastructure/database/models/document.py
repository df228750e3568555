"""SQLAlchemy ORM models for schemaless documents and their list-value index."""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from orgforms.infrastructure.database.base import Base


class DocumentModel(Base):
    """ORM model: maps to the 'documents' table. One row per stored document of any collection."""

    __tablename__ = "documents"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    collection: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<DocumentModel(id='{self.id}', collection='{self.collection}')>"


class DocumentArrayValueModel(Base):
    """ORM model: maps to the 'document_array_values' table.

    One row per element of every top-level list in a document body, so
    "list field contains any of N values" is an indexed lookup.
    """

    __tablename__ = "document_array_values"
    __table_args__ = (
        Index("ix_document_array_values_field_value", "field", "value"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    document_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    field: Mapped[str] = mapped_column(String(255), nullable=False)
    value: Mapped[str] = mapped_column(String(1024), nullable=False)

    def __repr__(self) -> str:
        return f"<DocumentArrayValueModel(document_id='{self.document_id}', field='{self.field}', value='{self.value}')>"
