"""Use cases for forms and subforms."""

from typing import Any

from orgforms.application.schemas.forms import FieldDefinition, FormLine, flatten_lines
from orgforms.application.services.resource_service import ResourceService
from orgforms.domain.entities import Document, Principal
from orgforms.domain.exceptions import ValidationFailure

FORMS = "forms"
SUBFORMS = "subforms"


def _layout_fields(data: dict[str, Any]) -> list[dict[str, Any]] | None:
    """Flatten editor ``lines`` into ``fields``; None when neither key was sent."""
    lines = data.pop("lines", None)
    fields = data.get("fields")
    if lines is None and fields is None:
        return None
    parsed_lines = [FormLine.model_validate(line) for line in lines] if lines is not None else None
    parsed_fields = [FieldDefinition.model_validate(f) for f in fields] if fields is not None else None
    return flatten_lines(parsed_lines, parsed_fields)


class FormService(ResourceService):
    collection = FORMS
    entity_name = "Form"

    async def _prepare_create(self, principal: Principal, data: dict[str, Any]) -> dict[str, Any]:
        data["fields"] = _layout_fields(data) or []
        return data

    async def _prepare_update(
        self, principal: Principal, document: Document, changes: dict[str, Any]
    ) -> dict[str, Any]:
        fields = _layout_fields(changes)
        if fields is not None:
            changes["fields"] = fields
        return changes

    def field_definitions(self, form: Document) -> dict[str, dict[str, Any]]:
        return {
            f["name"]: f
            for f in form.data.get("fields") or []
            if isinstance(f, dict) and f.get("name")
        }


class SubformService(FormService):
    collection = SUBFORMS
    entity_name = "Subform"

    async def list_for_form(self, principal: Principal, form_id: str | None) -> list[Document]:
        documents = await self.list_visible(principal)
        if form_id is None:
            return documents
        return [d for d in documents if d.data.get("formId") == form_id]

    async def _prepare_create(self, principal: Principal, data: dict[str, Any]) -> dict[str, Any]:
        data = await super()._prepare_create(principal, data)
        form_id = data.pop("form_id", None) or data.pop("form", None) or data.get("formId")
        if not form_id:
            raise ValidationFailure("Subform requires a formId")
        data["formId"] = form_id
        return data

    async def _prepare_update(
        self, principal: Principal, document: Document, changes: dict[str, Any]
    ) -> dict[str, Any]:
        changes = await super()._prepare_update(principal, document, changes)
        form_id = changes.pop("form_id", None) or changes.pop("form", None)
        if form_id:
            changes["formId"] = form_id
        return changes
