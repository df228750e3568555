"""Unit tests for in-memory pagination."""

import pytest

from orgforms.domain.pagination import paginate, slice_page


def _items(count: int) -> list[dict]:
    return [{"id": str(i), "createdAt": i * 1000} for i in range(count)]


def test_twenty_three_items_third_page():
    page = paginate(_items(23), page=3, page_size=10)
    assert page.total == 23
    assert page.total_pages == 3
    assert len(page.data) == 3
    assert page.page == 3


def test_first_page_is_newest_first():
    page = paginate(_items(23), page=1, page_size=10)
    assert [item["id"] for item in page.data[:3]] == ["22", "21", "20"]


def test_out_of_range_page_is_empty_with_totals():
    page = paginate(_items(23), page=99, page_size=10)
    assert page.data == []
    assert page.total == 23
    assert page.total_pages == 3


def test_mixed_timestamp_encodings_sort_together():
    items = [
        {"id": "iso", "createdAt": "2024-01-02T00:00:00Z"},
        {"id": "map", "createdAt": {"_seconds": 1704153600, "_nanoseconds": 0}},  # 2024-01-02T00:00
        {"id": "old", "createdAt": "2020-01-01T00:00:00Z"},
        {"id": "broken", "createdAt": "garbage"},
    ]
    ordered = [item["id"] for item in paginate(items, page=1).data]
    assert ordered[-2:] == ["old", "broken"]


def test_empty_input():
    page = paginate([], page=1)
    assert page.total == 0
    assert page.total_pages == 0
    assert page.data == []


def test_page_must_be_positive():
    with pytest.raises(ValueError):
        slice_page([], page=0)
