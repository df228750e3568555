"""Read side of the audit trail."""

import logging
from typing import Any

from orgforms.application.interfaces import AuditLogRepository
from orgforms.application.services.authorization_service import AuthorizationEngine
from orgforms.domain.authorization import Decision, Role
from orgforms.domain.entities import AuditEntry, Principal
from orgforms.domain.exceptions import AuthorizationDenied
from orgforms.domain.org_sets import intersects
from orgforms.domain.timestamps import to_iso_timestamp

logger = logging.getLogger(__name__)

LOG_READERS = frozenset({Role.ADMIN, Role.MANAGER})
MUTATING_METHODS = frozenset({"POST", "PUT", "DELETE"})


def entry_payload(entry: AuditEntry) -> dict[str, Any]:
    return {
        "id": entry.id,
        "action": entry.action.value,
        "resourceType": entry.resource_type,
        "resourceId": entry.resource_id,
        "actor": {
            "id": entry.actor.id,
            "email": entry.actor.email,
            "role": entry.actor.role,
            "org": list(entry.actor.orgs),
        },
        "method": entry.method,
        "path": entry.path,
        "metadata": entry.metadata,
        "timestamp": to_iso_timestamp(entry.timestamp),
    }


class AuditLogService:
    """Lists recent mutations. Admin sees every entry; Manager only entries by actors sharing an org."""

    def __init__(
        self,
        repository: AuditLogRepository,
        authorization: AuthorizationEngine,
        *,
        default_limit: int = 100,
        max_limit: int = 500,
    ):
        self._repo = repository
        self._authz = authorization
        self._default_limit = default_limit
        self._max_limit = max_limit

    def clamp_limit(self, limit: int | None) -> int:
        if limit is None:
            return self._default_limit
        return max(1, min(limit, self._max_limit))

    async def list_entries(self, principal: Principal, limit: int | None = None) -> list[dict[str, Any]]:
        decision = self._authz.authorize_roles(principal, LOG_READERS)
        if decision is not Decision.ALLOW:
            raise AuthorizationDenied(decision)

        # The limit applies to the fetch; filters below may return fewer.
        entries = await self._repo.get_recent(limit=self.clamp_limit(limit))
        if not principal.is_admin:
            entries = [e for e in entries if intersects(e.actor.orgs, principal.orgs)]
        entries = [e for e in entries if (e.method or "").upper() in MUTATING_METHODS]
        logger.debug("Returning %d audit entries to %s", len(entries), principal.id)
        return [entry_payload(e) for e in entries]
