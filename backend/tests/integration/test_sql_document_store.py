"""Integration tests for the SQLAlchemy document store on SQLite."""

import pytest

from orgforms.domain.authorization import AuditAction
from orgforms.domain.entities import ArrayContainsAny, AuditActor, AuditEntry, Document, FieldEquals
from orgforms.domain.exceptions import UnsupportedQueryError


@pytest.mark.asyncio
async def test_create_and_get(document_store):
    created = await document_store.create(Document("forms", {"name": "F", "org": ["A"]}, id="f1"))
    fetched = await document_store.get("forms", "f1")
    assert created.id == fetched.id == "f1"
    assert fetched.data == {"name": "F", "org": ["A"]}


@pytest.mark.asyncio
async def test_get_is_scoped_to_collection(document_store):
    await document_store.create(Document("forms", {"org": "A"}, id="x1"))
    assert await document_store.get("records", "x1") is None


@pytest.mark.asyncio
async def test_field_equals_matches_scalar_values_only(document_store):
    await document_store.create(Document("forms", {"org": "A"}, id="scalar"))
    await document_store.create(Document("forms", {"org": ["A"]}, id="list"))
    matches = await document_store.query("forms", FieldEquals("org", "A"))
    assert [d.id for d in matches] == ["scalar"]


@pytest.mark.asyncio
async def test_array_contains_any_uses_list_values(document_store):
    await document_store.create(Document("forms", {"org": ["A", "B"]}, id="ab"))
    await document_store.create(Document("forms", {"org": ["C"]}, id="c"))
    await document_store.create(Document("forms", {"org": "A"}, id="scalar"))
    matches = await document_store.query("forms", ArrayContainsAny("org", ("A", "C")))
    assert sorted(d.id for d in matches) == ["ab", "c"]


@pytest.mark.asyncio
async def test_array_contains_any_limit(document_store):
    with pytest.raises(UnsupportedQueryError):
        await document_store.query("forms", ArrayContainsAny("org", ("A", "B", "C", "D")))


@pytest.mark.asyncio
async def test_update_reindexes_list_values(document_store):
    document = await document_store.create(Document("forms", {"org": ["A"]}, id="f1"))
    document.data["org"] = ["B"]
    await document_store.update(document)
    assert await document_store.query("forms", ArrayContainsAny("org", ("A",))) == []
    assert [d.id for d in await document_store.query("forms", ArrayContainsAny("org", ("B",)))] == ["f1"]


@pytest.mark.asyncio
async def test_delete(document_store):
    await document_store.create(Document("forms", {"org": ["A"]}, id="f1"))
    assert await document_store.delete("forms", "f1") is True
    assert await document_store.delete("forms", "f1") is False
    assert await document_store.query("forms", ArrayContainsAny("org", ("A",))) == []


@pytest.mark.asyncio
async def test_list_all_returns_collection_only(document_store):
    await document_store.create(Document("forms", {"org": "A"}, id="f1"))
    await document_store.create(Document("records", {"org": "A"}, id="r1"))
    assert [d.id for d in await document_store.list_all("forms")] == ["f1"]


@pytest.mark.asyncio
async def test_audit_log_repository_round_trip(audit_log_repository):
    for path in ("/a", "/b"):
        await audit_log_repository.create(
            AuditEntry(
                action=AuditAction.CREATE,
                resource_type="forms",
                actor=AuditActor(id="u1", email="u@x", role="Admin", orgs=("A",)),
                method="POST",
                path=path,
                metadata={"ip": "127.0.0.1"},
            )
        )
    recent = await audit_log_repository.get_recent(limit=1)
    assert len(recent) == 1
    assert recent[0].path == "/b"
    assert recent[0].actor.orgs == ("A",)
    assert recent[0].metadata == {"ip": "127.0.0.1"}
