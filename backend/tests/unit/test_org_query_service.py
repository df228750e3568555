"""Unit tests for the multi-predicate org merge engine."""

import logging

import pytest

from orgforms.application.services import OrgQueryService
from orgforms.domain.entities import ArrayContainsAny, FieldEquals, Predicate
from orgforms.domain.exceptions import UnsupportedQueryError


@pytest.fixture
def seeded(store):
    store.seed("forms", "f1", org=["A", "B"], createdAt=1)
    store.seed("forms", "f2", org="A", createdAt=2)
    store.seed("forms", "f3", org="C", createdAt=3)
    store.seed("forms", "f4", org=["Z"], createdAt=4)
    store.seed("records", "r1", org="A", createdAt=5)
    return store


@pytest.mark.asyncio
async def test_list_and_scalar_orgs_are_merged_once(seeded):
    service = OrgQueryService(seeded)
    documents = await service.fetch_by_any_org("forms", {"A", "B"})
    assert sorted(d.id for d in documents) == ["f1", "f2"]


@pytest.mark.asyncio
async def test_one_array_predicate_plus_one_equality_per_org(seeded):
    service = OrgQueryService(seeded)
    await service.fetch_by_any_org("forms", ["B", "A"])
    assert seeded.queries[0] == ArrayContainsAny("org", ("A", "B"))
    assert set(seeded.queries[1:]) == {FieldEquals("org", "A"), FieldEquals("org", "B")}


@pytest.mark.asyncio
async def test_empty_orgs_issue_no_queries(seeded):
    service = OrgQueryService(seeded)
    assert await service.fetch_by_any_org("forms", []) == []
    assert seeded.queries == []


@pytest.mark.asyncio
async def test_merge_is_idempotent(seeded):
    service = OrgQueryService(seeded)
    first = await service.fetch_by_any_org("forms", ["A", "C"])
    second = await service.fetch_by_any_org("forms", ["A", "C"])
    assert sorted(d.id for d in first) == sorted(d.id for d in second) == ["f1", "f2", "f3"]


@pytest.mark.asyncio
async def test_failing_predicate_is_excluded(seeded, caplog):
    class HalfBrokenStore(type(seeded)):
        async def query(self, collection: str, predicate: Predicate):
            if isinstance(predicate, ArrayContainsAny):
                raise UnsupportedQueryError("too many values")
            return await super().query(collection, predicate)

    broken = HalfBrokenStore()
    broken.documents = seeded.documents
    service = OrgQueryService(broken)

    with caplog.at_level(logging.WARNING):
        documents = await service.fetch_by_any_org("forms", ["A", "B"])

    # f1 only matched the array predicate; the scalar match survives.
    assert [d.id for d in documents] == ["f2"]
    assert "excluding it from the merge" in caplog.text


@pytest.mark.asyncio
async def test_admin_reads_whole_collection(seeded, admin):
    service = OrgQueryService(seeded)
    documents = await service.visible_documents(admin, "forms")
    assert len(documents) == 4
    assert seeded.queries == []


@pytest.mark.asyncio
async def test_visible_page_sorts_newest_first(seeded, manager):
    service = OrgQueryService(seeded, page_size=1)
    page = await service.visible_page(manager, "forms", 1)
    assert page.total == 2
    assert page.total_pages == 2
    assert [d.id for d in page.data] == ["f2"]
