"""Concrete DocumentStore backed by SQLAlchemy.

Every operation opens its own short-lived session from the factory, so
the merge engine can run several queries concurrently without sharing an
``AsyncSession`` between coroutines.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from orgforms.application.interfaces import DocumentStore
from orgforms.domain.entities import ArrayContainsAny, Document, FieldEquals, Predicate
from orgforms.domain.exceptions import EntityNotFoundError, StorageError, UnsupportedQueryError
from orgforms.infrastructure.database.models import DocumentArrayValueModel, DocumentModel

logger = logging.getLogger(__name__)


def _array_rows(document_id: str, data: dict[str, Any]) -> list[DocumentArrayValueModel]:
    """Index rows for the string elements of every top-level list."""
    rows = []
    for field, value in data.items():
        if not isinstance(value, list):
            continue
        for element in dict.fromkeys(v for v in value if isinstance(v, str)):
            rows.append(DocumentArrayValueModel(document_id=document_id, field=field, value=element))
    return rows


class SQLAlchemyDocumentStore(DocumentStore):
    """Implements the DocumentStore port on the 'documents' table."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        array_contains_any_limit: int = 30,
    ):
        self._session_factory = session_factory
        self._array_limit = array_contains_any_limit

    def _to_entity(self, model: DocumentModel) -> Document:
        """Map ORM model → domain entity."""
        return Document(collection=model.collection, data=dict(model.data or {}), id=model.id)

    @asynccontextmanager
    async def _session(self, operation: str, collection: str) -> AsyncIterator[AsyncSession]:
        try:
            async with self._session_factory() as session:
                yield session
        except SQLAlchemyError as exc:
            logger.error("Document store %s on '%s' failed: %s", operation, collection, exc)
            raise StorageError(operation, collection, exc) from exc

    async def get(self, collection: str, document_id: str) -> Document | None:
        async with self._session("get", collection) as session:
            model = await session.get(DocumentModel, document_id)
        if model is None or model.collection != collection:
            return None
        return self._to_entity(model)

    async def list_all(self, collection: str) -> list[Document]:
        stmt = (
            select(DocumentModel)
            .where(DocumentModel.collection == collection)
            .order_by(DocumentModel.created_at)
        )
        async with self._session("list_all", collection) as session:
            result = await session.execute(stmt)
            return [self._to_entity(row) for row in result.scalars().all()]

    async def query(self, collection: str, predicate: Predicate) -> list[Document]:
        stmt = select(DocumentModel).where(DocumentModel.collection == collection)

        if isinstance(predicate, FieldEquals):
            if not isinstance(predicate.value, str):
                raise UnsupportedQueryError(f"FieldEquals on '{predicate.field}' only supports string values")
            stmt = stmt.where(DocumentModel.data[predicate.field].as_string() == predicate.value)
        elif isinstance(predicate, ArrayContainsAny):
            if not predicate.values:
                return []
            if len(predicate.values) > self._array_limit:
                raise UnsupportedQueryError(
                    f"ArrayContainsAny accepts at most {self._array_limit} values, got {len(predicate.values)}"
                )
            matching_ids = select(DocumentArrayValueModel.document_id).where(
                DocumentArrayValueModel.field == predicate.field,
                DocumentArrayValueModel.value.in_(predicate.values),
            )
            stmt = stmt.where(DocumentModel.id.in_(matching_ids))
        else:
            raise UnsupportedQueryError(f"Unsupported predicate {predicate!r}")

        async with self._session("query", collection) as session:
            result = await session.execute(stmt)
            documents = [self._to_entity(row) for row in result.scalars().all()]
        logger.debug("Predicate %r on '%s' matched %d documents", predicate, collection, len(documents))
        return documents

    async def create(self, document: Document) -> Document:
        model = DocumentModel(id=document.id, collection=document.collection, data=dict(document.data))
        async with self._session("create", document.collection) as session:
            session.add(model)
            session.add_all(_array_rows(document.id, document.data))
            await session.commit()
        return self._to_entity(model)

    async def update(self, document: Document) -> Document:
        async with self._session("update", document.collection) as session:
            model = await session.get(DocumentModel, document.id)
            if model is None or model.collection != document.collection:
                raise EntityNotFoundError(document.collection, document.id)
            model.data = dict(document.data)
            await session.execute(
                delete(DocumentArrayValueModel).where(DocumentArrayValueModel.document_id == document.id)
            )
            session.add_all(_array_rows(document.id, document.data))
            await session.commit()
        return self._to_entity(model)

    async def delete(self, collection: str, document_id: str) -> bool:
        async with self._session("delete", collection) as session:
            model = await session.get(DocumentModel, document_id)
            if model is None or model.collection != collection:
                return False
            await session.execute(
                delete(DocumentArrayValueModel).where(DocumentArrayValueModel.document_id == document_id)
            )
            await session.delete(model)
            await session.commit()
        return True
