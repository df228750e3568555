"""Domain entity for the audit trail: one row per authorized view or mutation."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from orgforms.domain.authorization import AuditAction


@dataclass(frozen=True)
class AuditActor:
    id: str | None = None
    email: str | None = None
    role: str | None = None
    orgs: tuple[str, ...] = ()


@dataclass
class AuditEntry:
    """Append-only record of who did what to which resource.

    Entries are inserted once and never updated or deleted by the service.
    """

    action: AuditAction
    resource_type: str  # "forms" | "subforms" | "records" | "subrecords" | "users"
    actor: AuditActor
    method: str
    path: str
    resource_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    # Stored value may be a legacy encoding; see domain.timestamps.
    timestamp: Any = field(default_factory=lambda: datetime.now(timezone.utc))
    id: str | None = None
