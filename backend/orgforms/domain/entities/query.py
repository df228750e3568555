"""Predicates a document store can evaluate over one collection."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class FieldEquals:
    """Top-level ``field`` equals ``value`` (matches scalar-stored values only)."""

    field: str
    value: Any


@dataclass(frozen=True)
class ArrayContainsAny:
    """Top-level list ``field`` contains at least one of ``values``."""

    field: str
    values: tuple[Any, ...]


Predicate = FieldEquals | ArrayContainsAny
