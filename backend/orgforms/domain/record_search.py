"""In-memory filtering and sorting of records by typed field values.

Criteria are interpreted according to the stored value's field type:

* text-like / unknown tags: case-insensitive substring;
* number / money: ``{"op": "gt"|"lt"|"between", "value"|"from"|"to"}``,
  or a plain string for substring matching;
* check / done: boolean equality;
* select: any-of against a string or list of strings;
* date / datetime: ``{"from": "YYYY-MM-DD", "to": "YYYY-MM-DD"}`` on the day part;
* map: substring on ``"lat, lng"``.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from orgforms.domain.entities.document import Document
from orgforms.domain.field_types import (
    BOOLEAN_TYPES,
    DATE_TYPES,
    NUMERIC_TYPES,
    FieldType,
    TypedValue,
    bare_value,
    numeric_value,
    parse_bool,
    parse_iso_timestamp,
    parse_number,
    search_text,
    sort_key,
)
from orgforms.domain.exceptions import ValidationFailure
from orgforms.domain.org_sets import org_list


@dataclass(frozen=True)
class FieldFilter:
    field: str
    value: Any


@dataclass(frozen=True)
class SortSpec:
    field: str
    descending: bool = False


def _is_blank(criteria: Any) -> bool:
    return criteria is None or criteria == "" or criteria == [] or criteria == {}


def _contains(typed: TypedValue, needle: Any) -> bool:
    haystack = search_text(typed)
    return bool(haystack) and str(needle).lower() in haystack.lower()


def _match_number(typed: TypedValue, criteria: Any) -> bool:
    if not isinstance(criteria, dict) or "op" not in criteria:
        return _contains(typed, criteria)
    number = numeric_value(typed)
    if number is None:
        return False
    op = criteria.get("op")
    if op == "gt":
        bound = parse_number(criteria.get("value"))
        return bound is not None and number > bound
    if op == "lt":
        bound = parse_number(criteria.get("value"))
        return bound is not None and number < bound
    if op == "between":
        low = parse_number(criteria.get("from"))
        high = parse_number(criteria.get("to"))
        if low is None or high is None:
            return False
        low, high = min(low, high), max(low, high)
        return low <= number <= high
    return True


def _match_select(typed: TypedValue, criteria: Any) -> bool:
    wanted = {str(c) for c in criteria} if isinstance(criteria, (list, tuple)) else {str(criteria)}
    value = bare_value(typed)
    stored = value if isinstance(value, tuple) else (value,)
    return any(str(v) in wanted for v in stored)


def _day(value: Any) -> str | None:
    iso = parse_iso_timestamp(value)
    return iso[:10] if iso else None


def _match_date(typed: TypedValue, criteria: Any) -> bool:
    if not isinstance(criteria, dict):
        return _contains(typed, criteria)
    day = _day(typed.value)
    start, end = criteria.get("from"), criteria.get("to")
    if start and (day is None or day < str(start)):
        return False
    if end and (day is None or day > str(end)):
        return False
    return True


def _stored_value(document: Document, field_name: str) -> TypedValue | None:
    data = document.data.get("data")
    if not isinstance(data, dict) or field_name not in data:
        return None
    payload = data[field_name]
    try:
        return TypedValue.from_payload(payload, field_name=field_name)
    except ValidationFailure:
        # Legacy rows whose value does not match the tag: search them as text.
        raw = payload.get("value") if isinstance(payload, dict) else payload
        return TypedValue("legacy", raw)


def _lookup(document: Document, field_name: str) -> TypedValue | None:
    typed = _stored_value(document, field_name)
    if typed is not None:
        return typed
    if field_name == "org":
        return TypedValue(FieldType.TEXT, ", ".join(org_list(document.data.get("org"))))
    raw = document.data.get(field_name)
    if raw is None:
        return None
    if field_name in ("createdAt", "updatedAt"):
        return TypedValue(FieldType.DATETIME, parse_iso_timestamp(raw) or str(raw))
    return TypedValue(FieldType.TEXT, str(raw))


def matches_filter(document: Document, field_filter: FieldFilter) -> bool:
    criteria = field_filter.value
    if _is_blank(criteria):
        return True
    typed = _lookup(document, field_filter.field)
    if typed is None or bare_value(typed) is None:
        return False
    field_type = typed.field_type
    if field_type in NUMERIC_TYPES:
        return _match_number(typed, criteria)
    if field_type in BOOLEAN_TYPES:
        return bool(typed.value) is parse_bool(criteria)
    if field_type is FieldType.SELECT:
        return _match_select(typed, criteria)
    if field_type in DATE_TYPES:
        return _match_date(typed, criteria)
    return _contains(typed, criteria)


def filter_documents(documents: Iterable[Document], filters: Sequence[FieldFilter]) -> list[Document]:
    return [d for d in documents if all(matches_filter(d, f) for f in filters)]


def sort_documents(documents: Sequence[Document], spec: SortSpec) -> list[Document]:
    """Sort by a field's sort key. Blank values stay last in both directions."""
    keyed = [(sort_key(_lookup(d, spec.field)), d) for d in documents]
    present = [item for item in keyed if item[0][0] != 2]
    blanks = [d for key, d in keyed if key[0] == 2]
    present.sort(key=lambda item: item[0], reverse=spec.descending)
    return [d for _, d in present] + blanks
