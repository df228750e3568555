"""Concrete ResourceOrgResolver strategies."""

from orgforms.application.interfaces import DocumentStore, ResourceOrgResolver
from orgforms.domain.entities import Document, Principal


class PrincipalOrgResolver(ResourceOrgResolver):
    """Creation targets: the new resource will belong to the requester's orgs."""

    def __init__(self, principal: Principal):
        self._principal = principal

    async def resolve_orgs(self) -> frozenset[str]:
        return self._principal.orgs


class DocumentOrgResolver(ResourceOrgResolver):
    """Existing targets: the stored document's ``org`` field.

    A missing document resolves to no orgs, so non-Admins are denied the
    same way as for a document owned by someone else. The fetched document
    is kept on ``document`` for the handler to reuse.
    """

    def __init__(self, store: DocumentStore, collection: str, document_id: str):
        self._store = store
        self._collection = collection
        self._document_id = document_id
        self.document: Document | None = None
        self.resolved = False

    async def resolve_orgs(self) -> frozenset[str]:
        self.document = await self._store.get(self._collection, self._document_id)
        self.resolved = True
        return self.document.orgs if self.document else frozenset()
