"""In-memory sort + slice for listing endpoints.

Sorting happens after the org merge step so the store never needs a
composite index over the union of org predicates.
"""

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from orgforms.domain.timestamps import SORT_FALLBACK, normalize_timestamp

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10


@dataclass
class Page(Generic[T]):
    data: list[T] = field(default_factory=list)
    total: int = 0
    total_pages: int = 0
    page: int = 1


def created_at_key(item: Any) -> int:
    """Sort key for documents and plain dicts: normalized ``createdAt``."""
    data = getattr(item, "data", item)
    raw = data.get("createdAt") if isinstance(data, dict) else None
    return normalize_timestamp(raw, fallback=SORT_FALLBACK)


def sort_newest_first(items: Sequence[T], key: Callable[[T], int] = created_at_key) -> list[T]:
    return sorted(items, key=key, reverse=True)


def slice_page(items: Sequence[T], page: int, page_size: int = DEFAULT_PAGE_SIZE) -> Page[T]:
    """Slice already-ordered items. Pages past the end come back empty."""
    if page < 1:
        raise ValueError("page must be >= 1")
    if page_size < 1:
        raise ValueError("page_size must be >= 1")
    total = len(items)
    start = (page - 1) * page_size
    return Page(
        data=list(items[start:start + page_size]),
        total=total,
        total_pages=math.ceil(total / page_size),
        page=page,
    )


def paginate(
    items: Sequence[T],
    page: int,
    page_size: int = DEFAULT_PAGE_SIZE,
    *,
    key: Callable[[T], int] = created_at_key,
) -> Page[T]:
    """Sort by ``createdAt`` descending, then slice out one page."""
    return slice_page(sort_newest_first(items, key), page, page_size)
