from .base import Base
from .session import async_session_factory, build_session_factory, engine
from .models import AuditLogModel, DocumentArrayValueModel, DocumentModel

__all__ = [
    "Base",
    "engine",
    "async_session_factory",
    "build_session_factory",
    "AuditLogModel",
    "DocumentArrayValueModel",
    "DocumentModel",
]
