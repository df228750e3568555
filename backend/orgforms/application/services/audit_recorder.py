"""Audit recorder: best-effort side channel for every authorized view and mutation.

A failed write is logged and dropped: it never reaches the caller and is
never retried.
"""

import logging
from typing import Any

from orgforms.application.interfaces import AuditLogRepository
from orgforms.domain.authorization import AuditAction
from orgforms.domain.entities import AuditActor, AuditEntry, Principal

logger = logging.getLogger(__name__)


class AuditRecorder:
    """Builds audit entries from the request principal and hands them to the sink.

    Usage:
        recorder = AuditRecorder(audit_repository)
        await recorder.record(
            principal,
            action=AuditAction.EDIT,
            resource_type="records",
            resource_id=record_id,
            method="PUT",
            path="/api/v1/records/abc",
        )
    """

    def __init__(self, repository: AuditLogRepository):
        self._repo = repository

    async def record(
        self,
        principal: Principal,
        *,
        action: AuditAction,
        resource_type: str,
        method: str,
        path: str,
        resource_id: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> AuditEntry | None:
        """Persist one entry. Returns None when the sink failed."""
        entry = AuditEntry(
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            actor=AuditActor(
                id=principal.id or None,
                email=principal.email,
                role=principal.role.value if principal.role else principal.raw_role,
                orgs=tuple(sorted(principal.orgs)),
            ),
            method=method,
            path=path,
            metadata=metadata or {},
        )
        try:
            saved = await self._repo.create(entry)
        except Exception:
            logger.exception(
                "Audit write failed for %s %s/%s",
                action.value,
                resource_type,
                resource_id or "-",
            )
            return None

        logger.info(
            "AUDIT [%s] %s %s actor=%s",
            action.value,
            resource_type,
            resource_id or "-",
            principal.email or principal.id,
        )
        return saved
