"""Field-type taxonomy for form fields and record values.

Every record value is stored as ``{"type": <tag>, "value": <variant>}``. The
tag decides the variant's shape; the two must always agree. Values carrying
a tag this module does not know are kept untouched and treated as opaque
text for search and sort.

Raw spreadsheet/UI input is turned into typed values by :func:`coerce`.
A cell that cannot be read as a number or a date yields ``None`` (the
field is left out of the write) instead of failing the whole import.
"""

import json
import math
import re
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any
from urllib.parse import unquote, urlparse

from orgforms.domain.exceptions import CoercionError, ValidationFailure


class FieldType(str, Enum):
    TEXT = "text"
    AREA = "area"
    NUMBER = "number"
    MONEY = "money"
    SELECT = "select"
    FORM_DATA_SELECT = "form-data-select"
    DATE = "date"
    DATETIME = "datetime"
    CHECK = "check"
    MAP = "map"
    FILE = "file"
    IMAGE = "image"
    HOTSPOT = "hotspot"
    ARRAY = "array"
    DONE = "done"

    @classmethod
    def parse(cls, raw: object) -> "FieldType | None":
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            return None
        raw = _TAG_ALIASES.get(raw, raw)
        for member in cls:
            if member.value == raw:
                return member
        return None


# Older form definitions used these names.
_TAG_ALIASES = {"textarea": "area", "checkbox": "check"}

TEXT_TYPES = frozenset({FieldType.TEXT, FieldType.AREA, FieldType.FORM_DATA_SELECT})
NUMERIC_TYPES = frozenset({FieldType.NUMBER, FieldType.MONEY})
DATE_TYPES = frozenset({FieldType.DATE, FieldType.DATETIME})
BOOLEAN_TYPES = frozenset({FieldType.CHECK, FieldType.DONE})
FILE_TYPES = frozenset({FieldType.FILE, FieldType.IMAGE})

TRUE_TOKENS = frozenset({"true", "1", "yes", "sim", "y", "s", "x"})

_HOTSPOT_SELECTION = re.compile(r"^hotspot(\d+):(.*)$", re.DOTALL)
_CURRENCY_PREFIX = re.compile(r"^(R\$|US\$|\$|€|£)\s*")


# ── Variants ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lng: float

    def to_payload(self) -> dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(frozen=True)
class FileRef:
    url: str
    name: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return {"url": self.url, "name": self.name}


@dataclass(frozen=True)
class HotspotMarker:
    x: float
    y: float
    options: tuple[str, ...] = ()

    def to_payload(self) -> dict[str, Any]:
        return {"x": self.x, "y": self.y, "options": list(self.options)}


@dataclass(frozen=True)
class HotspotImage:
    """An image with ordered markers; marker ``i`` (0-based) owns its own option list."""

    image_url: str
    hotspots: tuple[HotspotMarker, ...] = ()

    def options_for(self, index: int) -> tuple[str, ...]:
        if 0 <= index < len(self.hotspots):
            return self.hotspots[index].options
        return ()

    def resolve(self, text: str) -> str | None:
        """Encoded selection for ``text``, or None when no marker offers that option.

        Bare option text is attributed to the first marker offering it.
        """
        selection = decode_hotspot_selection(text)
        if selection.index is not None:
            if selection.option in self.options_for(selection.index):
                return encode_hotspot_selection(selection.index, selection.option)
            return None
        for index, marker in enumerate(self.hotspots):
            if selection.option in marker.options:
                return encode_hotspot_selection(index, selection.option)
        return None

    def to_payload(self) -> dict[str, Any]:
        return {
            "imageUrl": self.image_url,
            "hotspots": [h.to_payload() for h in self.hotspots],
        }


@dataclass(frozen=True)
class HotspotSelection:
    index: int | None
    option: str


def encode_hotspot_selection(index: int, option: str) -> str:
    return f"hotspot{index}:{option}"


def decode_hotspot_selection(text: str) -> HotspotSelection:
    """``"hotspot2:Door"`` → ``HotspotSelection(2, "Door")``; bare text passes through."""
    match = _HOTSPOT_SELECTION.match(text)
    if match:
        return HotspotSelection(int(match.group(1)), match.group(2).strip())
    return HotspotSelection(None, text.strip())


@dataclass(frozen=True)
class TypedValue:
    """A tagged record value. ``type`` is a FieldType, or the raw tag when unknown."""

    type: FieldType | str
    value: Any = None

    @property
    def field_type(self) -> FieldType | None:
        return self.type if isinstance(self.type, FieldType) else None

    @property
    def tag(self) -> str:
        return self.type.value if isinstance(self.type, FieldType) else str(self.type)

    def to_payload(self) -> dict[str, Any]:
        value = self.value
        if isinstance(value, (GeoPoint, FileRef, HotspotImage)):
            value = value.to_payload()
        elif isinstance(value, tuple):
            value = list(value)
        return {"type": self.tag, "value": value}

    @classmethod
    def from_payload(cls, payload: Any, *, field_name: str = "value") -> "TypedValue":
        """Validate a stored/submitted ``{type, value}`` map."""
        if not isinstance(payload, dict) or "type" not in payload:
            raise ValidationFailure(f"Field '{field_name}' must be an object with 'type' and 'value'")
        raw_tag = payload.get("type")
        value = payload.get("value")
        field_type = FieldType.parse(raw_tag)
        if field_type is None:
            return cls(str(raw_tag), value)
        if value is None or (value == "" and field_type not in TEXT_TYPES | {FieldType.SELECT}):
            return cls(field_type, None)
        try:
            return cls(field_type, _validate_variant(field_type, value))
        except (TypeError, ValueError, KeyError) as exc:
            raise ValidationFailure(
                f"Field '{field_name}' has a value that does not match type '{field_type.value}'"
            ) from exc


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _geo_from_mapping(value: dict) -> GeoPoint:
    return GeoPoint(lat=float(value["lat"]), lng=float(value["lng"]))


def _hotspot_image_from_mapping(value: Any) -> HotspotImage:
    if not isinstance(value, dict):
        raise TypeError("hotspot image must be an object")
    raw_markers = value.get("hotspots") or []
    if not isinstance(raw_markers, list):
        raise TypeError("hotspots must be a list")
    markers = []
    for raw in raw_markers:
        if not isinstance(raw, dict):
            raise TypeError("hotspot markers must be objects")
        options = raw.get("options") or []
        if not isinstance(options, list) or not all(isinstance(o, str) for o in options):
            raise TypeError("hotspot options must be a list of strings")
        markers.append(HotspotMarker(x=float(raw["x"]), y=float(raw["y"]), options=tuple(options)))
    image_url = value["imageUrl"]
    if not isinstance(image_url, str):
        raise TypeError("imageUrl must be a string")
    return HotspotImage(image_url=image_url, hotspots=tuple(markers))


def hotspot_image_of(field_definition: dict[str, Any]) -> HotspotImage | None:
    """The image a hotspot field definition carries in ``value`` or inline, if any."""
    source = field_definition.get("value")
    if not isinstance(source, dict):
        source = {"imageUrl": field_definition.get("imageUrl") or "", "hotspots": field_definition.get("hotspots")}
    if not source.get("hotspots"):
        return None
    try:
        return _hotspot_image_from_mapping(source)
    except (TypeError, ValueError, KeyError):
        return None


def _validate_variant(field_type: FieldType, value: Any) -> Any:
    if field_type in TEXT_TYPES:
        if not isinstance(value, str):
            raise TypeError("expected string")
        return value
    if field_type is FieldType.SELECT:
        if isinstance(value, str):
            return value
        if isinstance(value, list) and all(isinstance(v, str) for v in value):
            return tuple(value)
        raise TypeError("expected string or list of strings")
    if field_type in NUMERIC_TYPES:
        if not _is_number(value):
            raise TypeError("expected number")
        return value
    if field_type in DATE_TYPES:
        if not isinstance(value, str) or parse_iso_timestamp(value) is None:
            raise ValueError("expected ISO timestamp")
        return value
    if field_type in BOOLEAN_TYPES:
        if not isinstance(value, bool):
            raise TypeError("expected boolean")
        return value
    if field_type is FieldType.MAP:
        return _geo_from_mapping(value)
    if field_type is FieldType.FILE:
        return FileRef(url=str(value["url"]), name=value.get("name"))
    if field_type is FieldType.IMAGE:
        if isinstance(value, str) and value.startswith("data:"):
            return value
        return FileRef(url=str(value["url"]), name=value.get("name"))
    if field_type is FieldType.HOTSPOT:
        if isinstance(value, str):
            return value
        return _hotspot_image_from_mapping(value)
    if field_type is FieldType.ARRAY:
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise TypeError("expected list of strings")
        return tuple(value)
    raise ValueError(f"unhandled field type {field_type}")


# ── Raw input parsing ────────────────────────────────────────────────


def parse_number(raw: Any) -> float | None:
    """Read plain (``1234.56``) and comma-decimal (``1.234,56``) numbers."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        return float(raw) if math.isfinite(raw) else None
    if not isinstance(raw, str):
        return None
    text = _CURRENCY_PREFIX.sub("", raw.strip()).replace(" ", "")
    if not text:
        return None
    if "," in text and "." in text:
        if text.rfind(",") > text.rfind("."):
            text = text.replace(".", "").replace(",", ".")
        else:
            text = text.replace(",", "")
    elif text.count(",") > 1:
        text = text.replace(",", "")
    elif "," in text:
        text = text.replace(",", ".")
    elif text.count(".") > 1:
        text = text.replace(".", "")
    try:
        number = float(text)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def parse_bool(raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    if raw is None:
        return False
    if isinstance(raw, (int, float)):
        return raw == 1
    return str(raw).strip().lower() in TRUE_TOKENS


_DAY_FIRST_FORMATS = ("%d/%m/%Y", "%d/%m/%Y %H:%M", "%d/%m/%Y %H:%M:%S")


def _iso_z(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso_timestamp(raw: Any) -> str | None:
    """Parse dates/datetimes to an ISO-8601 UTC string, or None."""
    if isinstance(raw, datetime):
        return _iso_z(raw)
    if isinstance(raw, date):
        return _iso_z(datetime(raw.year, raw.month, raw.day))
    if _is_number(raw):
        try:
            return _iso_z(datetime.fromtimestamp(raw / 1000, tz=timezone.utc))
        except (OverflowError, OSError, ValueError):
            return None
    if not isinstance(raw, str):
        return None
    text = raw.strip()
    if not text:
        return None
    candidate = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
    try:
        return _iso_z(datetime.fromisoformat(candidate))
    except ValueError:
        pass
    for fmt in _DAY_FIRST_FORMATS:
        try:
            return _iso_z(datetime.strptime(text, fmt))
        except ValueError:
            continue
    return None


def _split_list(raw: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def _geo_from_text(raw: str) -> GeoPoint | None:
    parts = [p.strip() for p in raw.split(",")]
    if len(parts) != 2:
        return None
    try:
        lat, lng = float(parts[0]), float(parts[1])
    except ValueError:
        return None
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return None
    return GeoPoint(lat=lat, lng=lng)


def _file_from_url(url: str) -> FileRef:
    path = urlparse(url).path
    name = unquote(path.rsplit("/", 1)[-1]) if path else ""
    return FileRef(url=url, name=name or None)


def coerce(raw: Any, field_type: FieldType | str) -> TypedValue | None:
    """Turn raw input into a TypedValue for ``field_type``.

    Returns None when the value should be left out of the write (blank
    cells, unreadable numbers or dates). Raises CoercionError when the
    input cannot take the shape the type requires.
    """
    resolved = FieldType.parse(field_type)
    if resolved is None:
        return TypedValue(str(field_type), "" if raw is None else _as_text(raw))

    if resolved in BOOLEAN_TYPES:
        return TypedValue(resolved, parse_bool(raw))
    if raw is None:
        return None
    if isinstance(raw, str) and not raw.strip() and resolved not in TEXT_TYPES:
        return None

    if resolved in TEXT_TYPES:
        return TypedValue(resolved, _as_text(raw))
    if resolved is FieldType.SELECT:
        if isinstance(raw, list):
            return TypedValue(resolved, tuple(_as_text(v) for v in raw))
        return TypedValue(resolved, _as_text(raw).strip())
    if resolved in NUMERIC_TYPES:
        number = parse_number(raw)
        return None if number is None else TypedValue(resolved, number)
    if resolved in DATE_TYPES:
        iso = parse_iso_timestamp(raw)
        return None if iso is None else TypedValue(resolved, iso)
    if resolved is FieldType.ARRAY:
        if isinstance(raw, list):
            return TypedValue(resolved, tuple(_as_text(v) for v in raw))
        if isinstance(raw, str):
            return TypedValue(resolved, _split_list(raw))
        raise CoercionError(resolved.value, raw, "expected a list or comma-separated text")
    if resolved is FieldType.MAP:
        if isinstance(raw, dict) and "lat" in raw and "lng" in raw:
            try:
                return TypedValue(resolved, _geo_from_mapping(raw))
            except (TypeError, ValueError) as exc:
                raise CoercionError(resolved.value, raw, "lat/lng must be numbers") from exc
        if isinstance(raw, str):
            point = _geo_from_text(raw)
            if point is not None:
                return TypedValue(resolved, point)
        raise CoercionError(resolved.value, raw, "expected 'lat, lng'")
    if resolved in FILE_TYPES:
        if isinstance(raw, dict) and isinstance(raw.get("url"), str):
            return TypedValue(resolved, FileRef(url=raw["url"], name=raw.get("name")))
        if isinstance(raw, str):
            text = raw.strip()
            if text.startswith(("http://", "https://")):
                return TypedValue(resolved, _file_from_url(text))
            if resolved is FieldType.IMAGE and text.startswith("data:"):
                return TypedValue(resolved, text)
        raise CoercionError(resolved.value, raw, "expected a URL")
    if resolved is FieldType.HOTSPOT:
        if isinstance(raw, str):
            return TypedValue(resolved, decode_hotspot_selection(raw).option)
        if isinstance(raw, dict) and "imageUrl" in raw:
            try:
                return TypedValue(resolved, _hotspot_image_from_mapping(raw))
            except (TypeError, ValueError, KeyError) as exc:
                raise CoercionError(resolved.value, raw, "malformed hotspot image") from exc
        raise CoercionError(resolved.value, raw, "expected an option or hotspot image")
    raise CoercionError(resolved.value, raw)


def _as_text(raw: Any) -> str:
    if isinstance(raw, str):
        return raw
    if isinstance(raw, float) and raw.is_integer():
        return str(int(raw))
    return str(raw)


# ── Search & sort views ──────────────────────────────────────────────


def bare_value(typed: TypedValue) -> Any:
    """The comparable value: hotspot selections lose their ``hotspot<i>:`` prefix."""
    if typed.field_type is FieldType.HOTSPOT and isinstance(typed.value, str):
        return decode_hotspot_selection(typed.value).option
    return typed.value


def search_text(typed: TypedValue) -> str:
    """Plain-text rendering used for substring search."""
    value = bare_value(typed)
    if value is None:
        return ""
    if isinstance(value, GeoPoint):
        return f"{value.lat}, {value.lng}"
    if isinstance(value, FileRef):
        return value.name or value.url
    if isinstance(value, HotspotImage):
        return " ".join(o for h in value.hotspots for o in h.options)
    if isinstance(value, tuple):
        return ", ".join(str(v) for v in value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, sort_keys=True)
    return _as_text(value)


def numeric_value(typed: TypedValue) -> float | None:
    value = bare_value(typed)
    if isinstance(value, tuple):
        value = value[0] if value else None
    return parse_number(value)


def sort_key(typed: TypedValue | None) -> tuple[int, Any]:
    """Total ordering key: numbers/dates/booleans first by value, then text, then blanks."""
    if typed is None or bare_value(typed) is None:
        return (2, "")
    field_type = typed.field_type
    if field_type in NUMERIC_TYPES:
        number = numeric_value(typed)
        if number is not None:
            return (0, number)
    elif field_type in DATE_TYPES:
        iso = parse_iso_timestamp(typed.value)
        if iso is not None:
            return (0, datetime.fromisoformat(iso.replace("Z", "+00:00")).timestamp())
    elif field_type in BOOLEAN_TYPES:
        return (0, float(bool(typed.value)))
    return (1, search_text(typed).lower())


# ── Record data maps ─────────────────────────────────────────────────


@dataclass
class RecordData:
    """The ``data`` map of a record or subrecord, keyed by field name."""

    values: dict[str, TypedValue] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Any) -> "RecordData":
        if payload is None:
            return cls()
        if not isinstance(payload, dict):
            raise ValidationFailure("Record data must be an object keyed by field name")
        return cls({name: TypedValue.from_payload(v, field_name=name) for name, v in payload.items()})

    def to_payload(self) -> dict[str, dict[str, Any]]:
        return {name: typed.to_payload() for name, typed in self.values.items()}

    def get(self, name: str) -> TypedValue | None:
        return self.values.get(name)
