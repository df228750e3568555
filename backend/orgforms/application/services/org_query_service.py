"""Multi-predicate query merge engine.

The ``org`` field is stored either as a list or as a bare string, and the
store cannot express "list-or-scalar field intersects any of N values" as
one predicate. The engine runs one ``ArrayContainsAny`` predicate plus one
``FieldEquals`` predicate per org concurrently, and merges the results by
document id.
"""

import asyncio
import logging
from collections.abc import Iterable

from orgforms.application.interfaces import DocumentStore
from orgforms.domain.entities import ArrayContainsAny, Document, FieldEquals, Predicate, Principal
from orgforms.domain.org_sets import normalize_org_set
from orgforms.domain.pagination import DEFAULT_PAGE_SIZE, Page, paginate

logger = logging.getLogger(__name__)

ORG_FIELD = "org"


class OrgQueryService:
    """Fetches the documents of a collection visible to a set of orgs."""

    def __init__(self, store: DocumentStore, page_size: int = DEFAULT_PAGE_SIZE):
        self._store = store
        self._page_size = page_size

    async def fetch_by_any_org(self, collection: str, orgs: Iterable[str]) -> list[Document]:
        """Union of documents whose ``org`` (list or scalar) shares an element with ``orgs``.

        A failing predicate contributes nothing; the other predicates' results
        are still returned. Each document appears once.
        """
        org_values = sorted(normalize_org_set(list(orgs)))
        if not org_values:
            return []

        predicates: list[Predicate] = [ArrayContainsAny(ORG_FIELD, tuple(org_values))]
        predicates.extend(FieldEquals(ORG_FIELD, org) for org in org_values)

        results = await asyncio.gather(*(self._run(collection, p) for p in predicates))

        merged: dict[str, Document] = {}
        for documents in results:
            for document in documents:
                merged.setdefault(document.id, document)
        logger.debug(
            "Merged %d predicates on '%s' into %d documents",
            len(predicates),
            collection,
            len(merged),
        )
        return list(merged.values())

    async def _run(self, collection: str, predicate: Predicate) -> list[Document]:
        try:
            return await self._store.query(collection, predicate)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.warning(
                "Predicate %r on '%s' failed, excluding it from the merge: %s",
                predicate,
                collection,
                exc,
            )
            return []

    async def visible_documents(self, principal: Principal, collection: str) -> list[Document]:
        """Admin reads the full collection; everyone else goes through the merge."""
        if principal.is_admin:
            return await self._store.list_all(collection)
        return await self.fetch_by_any_org(collection, principal.orgs)

    async def visible_page(self, principal: Principal, collection: str, page: int) -> Page[Document]:
        documents = await self.visible_documents(principal, collection)
        return paginate(documents, page, self._page_size)

    @property
    def page_size(self) -> int:
        return self._page_size
