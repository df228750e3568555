"""Pydantic DTOs for forms and subforms."""

from typing import Any

from pydantic import AliasChoices, BaseModel, Field


class FieldDefinition(BaseModel):
    """A field placed on a form grid. Type-specific settings ride along as extras."""

    name: str = Field(..., min_length=1)
    type: str = Field("text", examples=["text", "number", "hotspot"])
    label: str | None = None
    row: int | None = None
    col: int | None = None
    colSpan: int | None = None

    model_config = {"extra": "allow"}


class FormLine(BaseModel):
    """One row of the form editor; flattened into ``fields`` on save."""

    fields: list[FieldDefinition] = Field(default_factory=list)


class FormCreate(BaseModel):
    """Schema for creating a form. Either ``lines`` or ``fields`` may be sent."""

    name: str = Field(..., min_length=1, max_length=255)
    desc: str | None = None
    lines: list[FormLine] | None = None
    fields: list[FieldDefinition] | None = None
    org: str | list[str] | None = None


class FormUpdate(BaseModel):
    """Partial update: any key may be sent; unknown keys are merged as-is."""

    name: str | None = Field(None, min_length=1, max_length=255)
    desc: str | None = None
    lines: list[FormLine] | None = None
    fields: list[FieldDefinition] | None = None
    org: str | list[str] | None = None

    model_config = {"extra": "allow"}


class SubformCreate(FormCreate):
    """Schema for creating a subform; ``form`` is accepted as an alias of ``formId``."""

    form_id: str | None = Field(
        None, validation_alias=AliasChoices("formId", "form", "form_id"),
    )


class SubformUpdate(FormUpdate):
    form_id: str | None = Field(
        None, validation_alias=AliasChoices("formId", "form", "form_id"),
    )


def flatten_lines(lines: list[FormLine] | None, fields: list[FieldDefinition] | None) -> list[dict[str, Any]]:
    """Editor lines win over a flat field list when both are sent."""
    if lines is not None:
        return [f.model_dump(exclude_none=True) for line in lines for f in line.fields]
    if fields is not None:
        return [f.model_dump(exclude_none=True) for f in fields]
    return []
