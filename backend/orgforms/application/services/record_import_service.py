"""Bulk import of spreadsheet rows as records of one form."""

import logging
from dataclasses import dataclass, field
from typing import Any

from orgforms.application.services.form_service import FormService
from orgforms.application.services.record_service import RecordService
from orgforms.domain.entities import Document, Principal
from orgforms.domain.exceptions import (
    AuthorizationDenied,
    CoercionError,
    StorageError,
    ValidationFailure,
)
from orgforms.domain.field_types import FieldType, TypedValue, coerce, hotspot_image_of

logger = logging.getLogger(__name__)


@dataclass
class ImportProblem:
    row: int  # 1-based, as shown in the spreadsheet body
    message: str
    field: str | None = None


@dataclass
class ImportOutcome:
    created: list[Document] = field(default_factory=list)
    skipped_cells: list[ImportProblem] = field(default_factory=list)
    errors: list[ImportProblem] = field(default_factory=list)


def _is_blank(raw: Any) -> bool:
    return raw is None or (isinstance(raw, str) and not raw.strip())


def _hotspot_selection(typed: TypedValue, raw: str, definition: dict[str, Any]) -> TypedValue | None:
    """Selections are stored encoded against the form image, the way the record editor writes them."""
    image = hotspot_image_of(definition)
    if image is None:
        return typed
    encoded = image.resolve(raw)
    return None if encoded is None else TypedValue(FieldType.HOTSPOT, encoded)


class RecordImportService:
    """Coerces each mapped cell by the form field's type and creates one record per row.

    Cells that cannot be coerced are left out and reported. A row that
    cannot be stored is reported and the batch carries on.
    """

    def __init__(self, forms: FormService, records: RecordService):
        self._forms = forms
        self._records = records

    async def import_rows(
        self,
        principal: Principal,
        form_id: str,
        rows: list[dict[str, Any]],
        header_map: dict[str, str],
        org: Any = None,
    ) -> ImportOutcome:
        form = await self._forms.get(principal, form_id)
        fields = self._forms.field_definitions(form)
        if org is None and principal.is_admin:
            org = form.data.get("org")

        outcome = ImportOutcome()
        for row_number, row in enumerate(rows, start=1):
            values = self._coerce_row(row_number, row, header_map, fields, outcome)
            try:
                record = await self._records.create(
                    principal, {"formId": form_id, "data": values, "org": org}
                )
            except (ValidationFailure, AuthorizationDenied, StorageError) as exc:
                logger.warning("Import row %d for form %s failed: %s", row_number, form_id, exc)
                outcome.errors.append(ImportProblem(row=row_number, message=str(exc)))
                continue
            outcome.created.append(record)

        logger.info(
            "Imported %d/%d rows into form %s (%d cells skipped)",
            len(outcome.created),
            len(rows),
            form_id,
            len(outcome.skipped_cells),
        )
        return outcome

    def _coerce_row(
        self,
        row_number: int,
        row: dict[str, Any],
        header_map: dict[str, str],
        fields: dict[str, dict[str, Any]],
        outcome: ImportOutcome,
    ) -> dict[str, Any]:
        values: dict[str, Any] = {}
        for header, raw in row.items():
            field_name = header_map.get(header)
            if not field_name:
                continue
            definition = fields.get(field_name)
            if definition is None:
                outcome.skipped_cells.append(
                    ImportProblem(row=row_number, field=field_name, message="Field is not on the form")
                )
                continue
            field_type = definition.get("type") or "text"
            try:
                typed = coerce(raw, field_type)
            except CoercionError as exc:
                outcome.skipped_cells.append(ImportProblem(row=row_number, field=field_name, message=str(exc)))
                continue
            if typed is None:
                if not _is_blank(raw):
                    outcome.skipped_cells.append(
                        ImportProblem(
                            row=row_number,
                            field=field_name,
                            message=f"Cannot read {raw!r} as '{field_type}'",
                        )
                    )
                continue
            if typed.field_type is FieldType.HOTSPOT and isinstance(raw, str):
                typed = _hotspot_selection(typed, raw, definition)
                if typed is None:
                    outcome.skipped_cells.append(
                        ImportProblem(
                            row=row_number,
                            field=field_name,
                            message=f"{raw!r} is not an option of the hotspot image",
                        )
                    )
                    continue
            values[field_name] = typed.to_payload()
        return values
