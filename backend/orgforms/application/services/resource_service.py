"""Shared use cases for org-scoped resources (forms, subforms, records, subrecords).

Every kind goes through the same authorization, merge-engine listing and
org-ownership rules; subclasses only shape the document body through the
``_prepare_create`` / ``_prepare_update`` hooks.
"""

import logging
from typing import Any

from orgforms.application.interfaces import DocumentStore
from orgforms.application.services.authorization_service import AuthorizationEngine
from orgforms.application.services.org_query_service import ORG_FIELD, OrgQueryService
from orgforms.application.services.resource_org_resolvers import (
    DocumentOrgResolver,
    PrincipalOrgResolver,
)
from orgforms.domain.authorization import Action, Decision
from orgforms.domain.entities import Document, Principal
from orgforms.domain.exceptions import AuthorizationDenied, EntityNotFoundError, ValidationFailure
from orgforms.domain.org_sets import org_list
from orgforms.domain.pagination import Page
from orgforms.domain.timestamps import utc_now_iso

logger = logging.getLogger(__name__)


class ResourceService:
    """CRUD + listing for one collection, scoped by the caller's orgs."""

    collection: str = ""
    entity_name: str = "Resource"
    # When set, a client-sent "id" becomes the document id instead of a generated one.
    accepts_client_id: bool = False

    def __init__(
        self,
        store: DocumentStore,
        authorization: AuthorizationEngine,
        org_query: OrgQueryService,
    ):
        self._store = store
        self._authz = authorization
        self._org_query = org_query

    # ── Reads ────────────────────────────────────────────────────────

    async def get(self, principal: Principal, document_id: str) -> Document:
        return await self._authorized_document(principal, Action.VIEW, document_id)

    async def list_visible(self, principal: Principal) -> list[Document]:
        self._require_listing(principal)
        return await self._org_query.visible_documents(principal, self.collection)

    async def list_page(self, principal: Principal, page: int) -> Page[Document]:
        self._require_listing(principal)
        return await self._org_query.visible_page(principal, self.collection, page)

    # ── Writes ───────────────────────────────────────────────────────

    async def create(self, principal: Principal, body: dict[str, Any]) -> Document:
        await self._authz.require(principal, Action.CREATE, PrincipalOrgResolver(principal))

        orgs = self._owner_orgs(principal, body.get(ORG_FIELD))
        data = await self._prepare_create(principal, dict(body))
        now = utc_now_iso()
        data[ORG_FIELD] = orgs
        data["createdAt"] = now
        data["updatedAt"] = now
        data["createdBy"] = principal.id
        requested_id = data.pop("id", None)

        document = Document(collection=self.collection, data=data)
        if self.accepts_client_id and requested_id:
            document.id = str(requested_id)
        document = await self._store.create(document)
        logger.info("Created %s %s for orgs %s", self.entity_name, document.id, orgs)
        return document

    async def update(self, principal: Principal, document_id: str, changes: dict[str, Any]) -> Document:
        document = await self._authorized_document(principal, Action.EDIT, document_id)

        changes = await self._prepare_update(principal, document, dict(changes))
        if ORG_FIELD in changes:
            changes[ORG_FIELD] = self._owner_orgs(principal, changes[ORG_FIELD], default_to_principal=False)

        document.merge(changes)
        return await self._store.update(document)

    async def delete(self, principal: Principal, document_id: str) -> None:
        await self._authorized_document(principal, Action.DELETE, document_id)
        await self._store.delete(self.collection, document_id)
        logger.info("Deleted %s %s", self.entity_name, document_id)

    # ── Hooks ────────────────────────────────────────────────────────

    async def _prepare_create(self, principal: Principal, data: dict[str, Any]) -> dict[str, Any]:
        return data

    async def _prepare_update(
        self, principal: Principal, document: Document, changes: dict[str, Any]
    ) -> dict[str, Any]:
        return changes

    # ── Internals ────────────────────────────────────────────────────

    def _require_listing(self, principal: Principal) -> None:
        decision = self._authz.authorize_listing(principal)
        if decision is not Decision.ALLOW:
            raise AuthorizationDenied(decision)

    async def _authorized_document(self, principal: Principal, action: Action, document_id: str) -> Document:
        resolver = DocumentOrgResolver(self._store, self.collection, document_id)
        await self._authz.require(principal, action, resolver)

        # Admin is allowed without the resolver ever reading the document.
        document = resolver.document if resolver.resolved else await self._store.get(self.collection, document_id)
        if document is None:
            raise EntityNotFoundError(self.entity_name, document_id)
        return document

    def _owner_orgs(self, principal: Principal, requested: Any, *, default_to_principal: bool = True) -> list[str]:
        """Orgs a written document will belong to.

        Non-Admins may only assign orgs they are a member of. The result is
        never empty.
        """
        orgs = org_list(requested)
        if not orgs and default_to_principal:
            orgs = sorted(principal.orgs)
        if not orgs:
            raise ValidationFailure(f"{self.entity_name} must belong to at least one org")
        if not principal.is_admin and not set(orgs) <= principal.orgs:
            logger.info(
                "Principal %s tried to assign %s outside its orgs %s",
                principal.id,
                self.entity_name,
                orgs,
            )
            raise AuthorizationDenied(Decision.FORBIDDEN)
        return orgs
