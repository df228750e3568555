from .audit_log_repository import SQLAlchemyAuditLogRepository
from .sqlalchemy_document_store import SQLAlchemyDocumentStore

__all__ = [
    "SQLAlchemyAuditLogRepository",
    "SQLAlchemyDocumentStore",
]
