"""Domain entity: a stored document belonging to one collection."""

from dataclasses import dataclass, field
from typing import Any
from uuid import uuid4

from orgforms.domain.org_sets import normalize_org_set
from orgforms.domain.timestamps import utc_now_iso

# Keys the service owns; client payloads never overwrite them on update.
PROTECTED_KEYS = frozenset({"id", "createdAt", "createdBy"})


@dataclass
class Document:
    """A form, subform, record, subrecord or user profile as kept in the store.

    ``data`` is the raw document body. It always carries ``org`` (scalar or
    list) and the ``createdAt`` / ``updatedAt`` stamps, in whatever encoding
    the document was written with.
    """

    collection: str
    data: dict[str, Any]
    id: str = field(default_factory=lambda: str(uuid4()))

    @property
    def orgs(self) -> frozenset[str]:
        return normalize_org_set(self.data.get("org"))

    @property
    def created_at(self) -> Any:
        return self.data.get("createdAt")

    def merge(self, changes: dict[str, Any]) -> None:
        """Apply a partial update and refresh ``updatedAt``."""
        for key, value in changes.items():
            if key in PROTECTED_KEYS:
                continue
            self.data[key] = value
        self.data["updatedAt"] = utc_now_iso()

    def to_payload(self) -> dict[str, Any]:
        return {**self.data, "id": self.id}
