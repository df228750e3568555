from .audit_log_repository import AuditLogRepository
from .document_store import DocumentStore
from .resource_org_resolver import ResourceOrgResolver
from .token_verifier import TokenVerifier

__all__ = [
    "AuditLogRepository",
    "DocumentStore",
    "ResourceOrgResolver",
    "TokenVerifier",
]
