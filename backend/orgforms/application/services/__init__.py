from .audit_log_service import AuditLogService
from .audit_recorder import AuditRecorder
from .authorization_service import AuthorizationEngine
from .form_service import FormService, SubformService
from .org_query_service import OrgQueryService
from .principal_resolver import PrincipalResolver
from .record_import_service import ImportOutcome, ImportProblem, RecordImportService
from .record_service import RecordService, SubrecordService
from .resource_org_resolvers import DocumentOrgResolver, PrincipalOrgResolver
from .resource_service import ResourceService
from .user_profile_service import UserProfileService

__all__ = [
    "AuditLogService",
    "AuditRecorder",
    "AuthorizationEngine",
    "FormService",
    "SubformService",
    "OrgQueryService",
    "PrincipalResolver",
    "ImportOutcome",
    "ImportProblem",
    "RecordImportService",
    "RecordService",
    "SubrecordService",
    "DocumentOrgResolver",
    "PrincipalOrgResolver",
    "ResourceService",
    "UserProfileService",
]
