from .audit_log import AuditLogModel
from .document import DocumentArrayValueModel, DocumentModel

__all__ = [
    "AuditLogModel",
    "DocumentArrayValueModel",
    "DocumentModel",
]
