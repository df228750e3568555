"""Use cases for records and subrecords."""

import asyncio
import logging
from collections import Counter
from typing import Any

from orgforms.application.services.resource_service import ResourceService
from orgforms.domain.entities import Document, FieldEquals, Principal
from orgforms.domain.exceptions import ValidationFailure
from orgforms.domain.field_types import RecordData
from orgforms.domain.pagination import Page, paginate, slice_page
from orgforms.domain.record_search import FieldFilter, SortSpec, filter_documents, sort_documents

logger = logging.getLogger(__name__)

RECORDS = "records"
SUBRECORDS = "subrecords"

# Current key first; older subrecords were written with the short names.
_PARENT_KEYS = {
    "recordId": ("record_id", "record", "recordId"),
    "subformId": ("subform_id", "subform", "subformId"),
    "formId": ("form_id", "form", "formId"),
}


def _take_ref(data: dict[str, Any], key: str) -> str | None:
    value = None
    for alias in _PARENT_KEYS[key]:
        found = data.pop(alias, None)
        value = value or found
    return value


def _validated_data(data: dict[str, Any]) -> dict[str, Any] | None:
    """Validate the typed ``data`` map in place; None when it was not sent."""
    raw = data.pop("recordData", None)
    if "data" in data:
        raw = data.pop("data")
    if raw is None:
        return None
    return RecordData.from_payload(raw).to_payload()


class RecordService(ResourceService):
    collection = RECORDS
    entity_name = "Record"

    async def _prepare_create(self, principal: Principal, data: dict[str, Any]) -> dict[str, Any]:
        form_id = _take_ref(data, "formId")
        if not form_id:
            raise ValidationFailure("Record requires a formId")
        data["formId"] = form_id
        data["data"] = _validated_data(data) or {}
        return data

    async def _prepare_update(
        self, principal: Principal, document: Document, changes: dict[str, Any]
    ) -> dict[str, Any]:
        form_id = _take_ref(changes, "formId")
        if form_id:
            changes["formId"] = form_id
        typed = _validated_data(changes)
        if typed is not None:
            changes["data"] = typed
        return changes

    async def search(
        self,
        principal: Principal,
        *,
        form_id: str | None = None,
        filters: list[FieldFilter] | None = None,
        sort: SortSpec | None = None,
        page: int = 1,
    ) -> Page[Document]:
        """Visible records matching every filter, one page at a time.

        Without ``sort`` the page is ordered newest first like every listing.
        """
        documents = await self.list_visible(principal)
        if form_id:
            documents = [d for d in documents if d.data.get("formId") == form_id]
        documents = filter_documents(documents, filters or [])

        page_size = self._org_query.page_size
        if sort is None:
            return paginate(documents, page, page_size)
        return slice_page(sort_documents(documents, sort), page, page_size)

    async def subrecord_counts(self, principal: Principal, record_id: str) -> dict[str, int]:
        """Subrecords per subform for one record, counted from the store on every call."""
        await self.get(principal, record_id)

        current, legacy = await asyncio.gather(
            self._store.query(SUBRECORDS, FieldEquals("recordId", record_id)),
            self._store.query(SUBRECORDS, FieldEquals("record", record_id)),
        )
        merged = {d.id: d for d in [*current, *legacy]}
        counts = Counter(
            d.data.get("subformId") or d.data.get("subform") or "unknown"
            for d in merged.values()
        )
        return dict(counts)


class SubrecordService(ResourceService):
    collection = SUBRECORDS
    entity_name = "Subrecord"

    async def list_filtered(
        self,
        principal: Principal,
        *,
        record_id: str | None = None,
        subform_id: str | None = None,
    ) -> list[Document]:
        documents = await self.list_visible(principal)
        if record_id is not None:
            documents = [
                d for d in documents
                if (d.data.get("recordId") or d.data.get("record")) == record_id
            ]
        if subform_id is not None:
            documents = [
                d for d in documents
                if (d.data.get("subformId") or d.data.get("subform")) == subform_id
            ]
        return documents

    async def _prepare_create(self, principal: Principal, data: dict[str, Any]) -> dict[str, Any]:
        record_id = _take_ref(data, "recordId")
        subform_id = _take_ref(data, "subformId")
        if not record_id or not subform_id:
            raise ValidationFailure("Subrecord requires a recordId and a subformId")
        data["recordId"] = record_id
        data["subformId"] = subform_id
        data["data"] = _validated_data(data) or {}
        return data

    async def _prepare_update(
        self, principal: Principal, document: Document, changes: dict[str, Any]
    ) -> dict[str, Any]:
        for key in ("recordId", "subformId"):
            value = _take_ref(changes, key)
            if value:
                changes[key] = value
        typed = _validated_data(changes)
        if typed is not None:
            changes["data"] = typed
        return changes
