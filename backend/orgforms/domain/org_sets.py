"""Organization membership sets.

An OrgSet is stored either as a bare string or as a list of strings, for
historical reasons. Every read path goes through :func:`normalize_org_set`
so both encodings compare the same way.

Org identifiers are matched exactly: no case folding, no whitespace trimming.
"""

from collections.abc import Iterable
from typing import Any, TypeAlias

OrgSet: TypeAlias = str | Iterable[str] | None


def normalize_org_set(value: Any) -> frozenset[str]:
    """Convert a scalar/list/None org value into a frozenset.

    ``None`` and empty strings never count as memberships.
    """
    if value is None:
        return frozenset()
    if isinstance(value, str):
        return frozenset([value]) if value != "" else frozenset()
    if isinstance(value, (list, tuple, set, frozenset)):
        return frozenset(v for v in value if isinstance(v, str) and v != "")
    return frozenset()


def intersects(a: Any, b: Any) -> bool:
    """True iff the two org sets share at least one identifier."""
    return not normalize_org_set(a).isdisjoint(normalize_org_set(b))


def org_list(value: Any) -> list[str]:
    """Normalize an org value to the list form written on create.

    Keeps the caller's order and drops duplicates.
    """
    if isinstance(value, str):
        return [value] if value else []
    if isinstance(value, (list, tuple)):
        seen: list[str] = []
        for item in value:
            if isinstance(item, str) and item and item not in seen:
                seen.append(item)
        return seen
    return []
