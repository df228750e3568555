"""Pydantic DTOs shared by every resource kind."""

from typing import Any

from pydantic import BaseModel, Field

from orgforms.domain.entities import Document
from orgforms.domain.pagination import Page


class PageResponse(BaseModel):
    """One page of a listing, sorted by ``createdAt`` descending."""

    data: list[dict[str, Any]]
    total: int
    total_pages: int = Field(alias="totalPages")
    page: int

    model_config = {"populate_by_name": True}

    @classmethod
    def from_page(cls, page: Page[Document]) -> "PageResponse":
        return cls(
            data=[d.to_payload() for d in page.data],
            total=page.total,
            total_pages=page.total_pages,
            page=page.page,
        )
