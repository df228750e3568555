"""Shared fakes and fixtures."""

import pytest

from orgforms.application.interfaces import AuditLogRepository, DocumentStore
from orgforms.domain.authorization import Role
from orgforms.domain.entities import ArrayContainsAny, AuditEntry, Document, FieldEquals, Predicate, Principal


# ── Fakes ────────────────────────────────────────────────────────────


class InMemoryDocumentStore(DocumentStore):
    """Dict-backed store with the same predicate semantics as the SQL store."""

    def __init__(self):
        self.documents: dict[tuple[str, str], Document] = {}
        self.queries: list[Predicate] = []
        self.list_all_calls = 0

    def seed(self, collection: str, document_id: str, **data) -> Document:
        document = Document(collection=collection, data=dict(data), id=document_id)
        self.documents[(collection, document_id)] = document
        return document

    async def get(self, collection: str, document_id: str) -> Document | None:
        document = self.documents.get((collection, document_id))
        return Document(document.collection, dict(document.data), document.id) if document else None

    async def list_all(self, collection: str) -> list[Document]:
        self.list_all_calls += 1
        return [d for (c, _), d in self.documents.items() if c == collection]

    async def query(self, collection: str, predicate: Predicate) -> list[Document]:
        self.queries.append(predicate)
        matches = []
        for (c, _), document in self.documents.items():
            if c != collection:
                continue
            value = document.data.get(predicate.field)
            if isinstance(predicate, FieldEquals) and value == predicate.value:
                matches.append(document)
            elif isinstance(predicate, ArrayContainsAny) and isinstance(value, list):
                if set(value) & set(predicate.values):
                    matches.append(document)
        return matches

    async def create(self, document: Document) -> Document:
        self.documents[(document.collection, document.id)] = document
        return document

    async def update(self, document: Document) -> Document:
        self.documents[(document.collection, document.id)] = document
        return document

    async def delete(self, collection: str, document_id: str) -> bool:
        return self.documents.pop((collection, document_id), None) is not None


class InMemoryAuditLogRepository(AuditLogRepository):
    def __init__(self):
        self.entries: list[AuditEntry] = []

    async def create(self, entry: AuditEntry) -> AuditEntry:
        entry.id = str(len(self.entries) + 1)
        self.entries.append(entry)
        return entry

    async def get_recent(self, *, limit: int = 100) -> list[AuditEntry]:
        return list(reversed(self.entries))[:limit]


# ── Fixtures ─────────────────────────────────────────────────────────


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def audit_repository() -> InMemoryAuditLogRepository:
    return InMemoryAuditLogRepository()


@pytest.fixture
def admin() -> Principal:
    return Principal(id="admin-1", email="admin@example.com", role=Role.ADMIN, orgs=frozenset())


@pytest.fixture
def manager() -> Principal:
    return Principal(id="mgr-1", email="mgr@example.com", role=Role.MANAGER, orgs=frozenset({"A", "B"}))


@pytest.fixture
def operator() -> Principal:
    return Principal(id="op-1", email="op@example.com", role=Role.OPERATOR, orgs=frozenset({"A"}))


@pytest.fixture
def viewer() -> Principal:
    return Principal(id="user-1", email="user@example.com", role=Role.USER, orgs=frozenset({"A"}))
