"""Pydantic DTOs for records, subrecords, search and bulk import."""

from typing import Any

from pydantic import AliasChoices, BaseModel, Field

_DATA_ALIASES = AliasChoices("data", "recordData")


class RecordCreate(BaseModel):
    """Schema for creating a record. ``data`` maps field names to ``{type, value}``."""

    form_id: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("formId", "form", "form_id"),
    )
    data: dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=_DATA_ALIASES,
        examples=[{"Status": {"type": "select", "value": "Open"}}],
    )
    org: str | list[str] | None = None


class RecordUpdate(BaseModel):
    """Partial update: any key may be sent; unknown keys are merged as-is."""

    form_id: str | None = Field(None, validation_alias=AliasChoices("formId", "form", "form_id"))
    data: dict[str, Any] | None = Field(None, validation_alias=_DATA_ALIASES)
    org: str | list[str] | None = None

    model_config = {"extra": "allow"}


class SubrecordCreate(BaseModel):
    """Schema for creating a subrecord; ``record``/``subform`` are legacy aliases."""

    record_id: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("recordId", "record", "record_id"),
    )
    subform_id: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("subformId", "subform", "subform_id"),
    )
    data: dict[str, Any] = Field(default_factory=dict, validation_alias=_DATA_ALIASES)
    org: str | list[str] | None = None


class SubrecordUpdate(BaseModel):
    record_id: str | None = Field(None, validation_alias=AliasChoices("recordId", "record", "record_id"))
    subform_id: str | None = Field(None, validation_alias=AliasChoices("subformId", "subform", "subform_id"))
    data: dict[str, Any] | None = Field(None, validation_alias=_DATA_ALIASES)
    org: str | list[str] | None = None

    model_config = {"extra": "allow"}


class FieldFilterSchema(BaseModel):
    """Criteria for one field; the shape of ``value`` depends on the field type."""

    field: str = Field(..., min_length=1)
    value: Any = None


class SortSchema(BaseModel):
    field: str = Field(..., min_length=1)
    descending: bool = False


class RecordSearchRequest(BaseModel):
    form_id: str | None = Field(None, validation_alias=AliasChoices("formId", "form_id"))
    filters: list[FieldFilterSchema] = Field(default_factory=list)
    sort: SortSchema | None = None
    page: int = Field(1, ge=1)


class RecordImportRequest(BaseModel):
    """Spreadsheet rows plus a source-header → form-field map. Unmapped headers are ignored."""

    form_id: str = Field(..., min_length=1, validation_alias=AliasChoices("formId", "form_id"))
    rows: list[dict[str, Any]] = Field(..., min_length=1)
    header_map: dict[str, str] = Field(
        ..., validation_alias=AliasChoices("headerMap", "header_map"),
    )
    org: str | list[str] | None = None


class ImportIssue(BaseModel):
    row: int
    field: str | None = None
    message: str


class RecordImportResult(BaseModel):
    created: list[str]
    skipped_cells: list[ImportIssue] = Field(default_factory=list, alias="skippedCells")
    errors: list[ImportIssue] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


class SubrecordCountsResponse(BaseModel):
    record_id: str = Field(alias="recordId")
    counts: dict[str, int]

    model_config = {"populate_by_name": True}
