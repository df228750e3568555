"""Abstract repository interface for the audit-log sink."""

from abc import ABC, abstractmethod

from orgforms.domain.entities import AuditEntry


class AuditLogRepository(ABC):
    """Port: insert-only persistence for audit entries."""

    @abstractmethod
    async def create(self, entry: AuditEntry) -> AuditEntry:
        """Persist a new audit entry.

        Returns:
            The created entry with its assigned ID.
        """
        ...

    @abstractmethod
    async def get_recent(self, *, limit: int = 100) -> list[AuditEntry]:
        """Retrieve audit entries, most recent first."""
        ...
