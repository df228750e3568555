"""Concrete repository for the audit trail backed by SQLAlchemy."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from orgforms.application.interfaces import AuditLogRepository
from orgforms.domain.authorization import AuditAction
from orgforms.domain.entities import AuditActor, AuditEntry
from orgforms.infrastructure.database.models import AuditLogModel


class SQLAlchemyAuditLogRepository(AuditLogRepository):
    """Implements the AuditLogRepository port using SQLAlchemy.

    Writes run after the response has been sent, so the repository opens
    its own session instead of borrowing the request's.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    def _to_entity(self, model: AuditLogModel) -> AuditEntry:
        """Map ORM model → domain entity."""
        return AuditEntry(
            id=str(model.id),
            action=AuditAction(model.action),
            resource_type=model.resource_type,
            resource_id=model.resource_id,
            actor=AuditActor(
                id=model.actor_id,
                email=model.actor_email,
                role=model.actor_role,
                orgs=tuple(model.actor_orgs or ()),
            ),
            method=model.method,
            path=model.path,
            metadata=dict(model.details or {}),
            timestamp=model.timestamp,
        )

    def _to_model(self, entity: AuditEntry) -> AuditLogModel:
        """Map domain entity → ORM model."""
        return AuditLogModel(
            action=entity.action.value,
            resource_type=entity.resource_type,
            resource_id=entity.resource_id,
            actor_id=entity.actor.id,
            actor_email=entity.actor.email,
            actor_role=entity.actor.role,
            actor_orgs=list(entity.actor.orgs),
            method=entity.method,
            path=entity.path,
            details=dict(entity.metadata),
            timestamp=entity.timestamp,
        )

    async def create(self, entry: AuditEntry) -> AuditEntry:
        model = self._to_model(entry)
        async with self._session_factory() as session:
            session.add(model)
            await session.commit()
            return self._to_entity(model)

    async def get_recent(self, *, limit: int = 100) -> list[AuditEntry]:
        stmt = (
            select(AuditLogModel)
            .order_by(AuditLogModel.timestamp.desc(), AuditLogModel.id.desc())
            .limit(limit)
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return [self._to_entity(row) for row in result.scalars().all()]
