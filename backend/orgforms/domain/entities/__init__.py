from .audit_entry import AuditActor, AuditEntry
from .document import Document
from .principal import Principal
from .query import ArrayContainsAny, FieldEquals, Predicate

__all__ = [
    "AuditActor",
    "AuditEntry",
    "Document",
    "Principal",
    "ArrayContainsAny",
    "FieldEquals",
    "Predicate",
]
