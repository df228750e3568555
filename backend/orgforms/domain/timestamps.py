"""Single normalization boundary for the timestamp encodings found in stored documents.

Observed encodings:

* native ``datetime`` values (what this service writes through the ORM);
* timestamp-like objects exposing ``to_datetime()`` / ``toDate()`` / ``timestamp()``;
* ``{"seconds": ..., "nanoseconds": ...}`` maps, also with ``_seconds`` / ``_nanoseconds``;
* ISO-8601 strings (``Z`` suffix accepted) and numeric epoch milliseconds.

Normalization never raises. What unparseable input becomes depends on the
caller: listings sort it last (``0``), the audit display shows "now".
"""

import math
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any


class Fallback(str, Enum):
    ZERO = "zero"
    NOW = "now"


SORT_FALLBACK = Fallback.ZERO
NOW_FALLBACK = Fallback.NOW


def _now_ms() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)


def _datetime_ms(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp() * 1000)


def _number_ms(value: float) -> int | None:
    if isinstance(value, bool) or not math.isfinite(value):
        return None
    return int(value)


def _mapping_ms(value: dict) -> int | None:
    seconds = value.get("seconds", value.get("_seconds"))
    if seconds is None:
        return None
    nanos = value.get("nanoseconds", value.get("_nanoseconds")) or 0
    try:
        return int(seconds) * 1000 + int(nanos) // 1_000_000
    except (TypeError, ValueError):
        return None


def _iso_string_ms(text: str) -> int | None:
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return _datetime_ms(datetime.fromisoformat(text))
    except ValueError:
        return None


def _string_ms(value: str) -> int | None:
    text = value.strip()
    if not text:
        return None
    try:
        return _number_ms(float(text))
    except ValueError:
        return _iso_string_ms(text)


def _parse(raw: Any) -> int | None:
    if raw is None:
        return None
    if isinstance(raw, datetime):
        return _datetime_ms(raw)
    if isinstance(raw, date):
        return _datetime_ms(datetime(raw.year, raw.month, raw.day, tzinfo=timezone.utc))
    if isinstance(raw, (int, float)):
        return _number_ms(raw)
    if isinstance(raw, str):
        return _string_ms(raw)
    if isinstance(raw, dict):
        return _mapping_ms(raw)

    for attr in ("to_datetime", "toDate"):
        converter = getattr(raw, attr, None)
        if callable(converter):
            converted = converter()
            if isinstance(converted, datetime):
                return _datetime_ms(converted)
    stamp = getattr(raw, "timestamp", None)
    if callable(stamp):
        return _number_ms(float(stamp()) * 1000)

    seconds = getattr(raw, "seconds", None)
    if seconds is not None:
        return _mapping_ms({"seconds": seconds, "nanoseconds": getattr(raw, "nanoseconds", 0)})
    return None


def normalize_timestamp(raw: Any, *, fallback: Fallback = SORT_FALLBACK) -> int:
    """Convert any supported encoding to epoch milliseconds."""
    try:
        parsed = _parse(raw)
    except Exception:
        parsed = None
    if parsed is not None:
        return parsed
    return _now_ms() if fallback is Fallback.NOW else 0


def to_iso_timestamp(raw: Any) -> str:
    """Render a stored timestamp as ISO-8601 UTC for display, defaulting to now."""
    if isinstance(raw, str) and raw.strip() and _iso_string_ms(raw.strip()) is not None:
        return raw
    millis = normalize_timestamp(raw, fallback=NOW_FALLBACK)
    try:
        return datetime.fromtimestamp(millis / 1000, tz=timezone.utc).isoformat()
    except (OverflowError, OSError, ValueError):
        return utc_now_iso()


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
