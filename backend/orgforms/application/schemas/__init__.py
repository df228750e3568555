from .audit import AuditActorSchema, AuditEntryResponse, AuditLogResponse
from .common import PageResponse
from .forms import (
    FieldDefinition,
    FormCreate,
    FormLine,
    FormUpdate,
    SubformCreate,
    SubformUpdate,
)
from .records import (
    FieldFilterSchema,
    ImportIssue,
    RecordCreate,
    RecordImportRequest,
    RecordImportResult,
    RecordSearchRequest,
    RecordUpdate,
    SortSchema,
    SubrecordCountsResponse,
    SubrecordCreate,
    SubrecordUpdate,
)
from .users import PrincipalResponse, UserListResponse, UserRegister, UserRegisterResponse

__all__ = [
    "AuditActorSchema",
    "AuditEntryResponse",
    "AuditLogResponse",
    "PageResponse",
    "FieldDefinition",
    "FormCreate",
    "FormLine",
    "FormUpdate",
    "SubformCreate",
    "SubformUpdate",
    "FieldFilterSchema",
    "ImportIssue",
    "RecordCreate",
    "RecordImportRequest",
    "RecordImportResult",
    "RecordSearchRequest",
    "RecordUpdate",
    "SortSchema",
    "SubrecordCountsResponse",
    "SubrecordCreate",
    "SubrecordUpdate",
    "PrincipalResponse",
    "UserListResponse",
    "UserRegister",
    "UserRegisterResponse",
]
