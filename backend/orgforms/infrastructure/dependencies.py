"""FastAPI dependency injection: wires infrastructure to application layer."""

from collections.abc import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from orgforms.config import get_settings
from orgforms.application.interfaces import AuditLogRepository, DocumentStore, TokenVerifier
from orgforms.application.services import (
    AuditLogService,
    AuditRecorder,
    AuthorizationEngine,
    FormService,
    OrgQueryService,
    PrincipalResolver,
    RecordImportService,
    RecordService,
    SubformService,
    SubrecordService,
    UserProfileService,
)
from orgforms.infrastructure.auth.jwt_token_verifier import JwtTokenVerifier
from orgforms.infrastructure.database.session import async_session_factory
from orgforms.infrastructure.database.repositories import (
    SQLAlchemyAuditLogRepository,
    SQLAlchemyDocumentStore,
)


# ── Infrastructure ───────────────────────────────────────────────────


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """The process-wide session factory. Tests override this with a temporary database."""
    return async_session_factory


def get_document_store(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> DocumentStore:
    settings = get_settings()
    return SQLAlchemyDocumentStore(
        session_factory,
        array_contains_any_limit=settings.array_contains_any_limit,
    )


def get_audit_log_repository(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> AuditLogRepository:
    return SQLAlchemyAuditLogRepository(session_factory)


def get_token_verifier() -> TokenVerifier:
    settings = get_settings()
    return JwtTokenVerifier(
        settings.jwt_secret,
        settings.jwt_algorithms,
        audience=settings.jwt_audience,
        issuer=settings.jwt_issuer,
    )


# ── Application services ─────────────────────────────────────────────


def get_authorization_engine() -> AuthorizationEngine:
    return AuthorizationEngine()


async def get_principal_resolver(
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> AsyncGenerator[PrincipalResolver, None]:
    yield PrincipalResolver(verifier)


async def get_org_query_service(
    store: DocumentStore = Depends(get_document_store),
) -> AsyncGenerator[OrgQueryService, None]:
    """Provides the merge engine with the configured page size."""
    yield OrgQueryService(store, page_size=get_settings().page_size)


async def get_form_service(
    store: DocumentStore = Depends(get_document_store),
    authorization: AuthorizationEngine = Depends(get_authorization_engine),
    org_query: OrgQueryService = Depends(get_org_query_service),
) -> AsyncGenerator[FormService, None]:
    yield FormService(store, authorization, org_query)


async def get_subform_service(
    store: DocumentStore = Depends(get_document_store),
    authorization: AuthorizationEngine = Depends(get_authorization_engine),
    org_query: OrgQueryService = Depends(get_org_query_service),
) -> AsyncGenerator[SubformService, None]:
    yield SubformService(store, authorization, org_query)


async def get_record_service(
    store: DocumentStore = Depends(get_document_store),
    authorization: AuthorizationEngine = Depends(get_authorization_engine),
    org_query: OrgQueryService = Depends(get_org_query_service),
) -> AsyncGenerator[RecordService, None]:
    yield RecordService(store, authorization, org_query)


async def get_subrecord_service(
    store: DocumentStore = Depends(get_document_store),
    authorization: AuthorizationEngine = Depends(get_authorization_engine),
    org_query: OrgQueryService = Depends(get_org_query_service),
) -> AsyncGenerator[SubrecordService, None]:
    yield SubrecordService(store, authorization, org_query)


async def get_record_import_service(
    forms: FormService = Depends(get_form_service),
    records: RecordService = Depends(get_record_service),
) -> AsyncGenerator[RecordImportService, None]:
    yield RecordImportService(forms, records)


async def get_audit_recorder(
    repository: AuditLogRepository = Depends(get_audit_log_repository),
) -> AsyncGenerator[AuditRecorder, None]:
    yield AuditRecorder(repository)


async def get_audit_log_service(
    repository: AuditLogRepository = Depends(get_audit_log_repository),
    authorization: AuthorizationEngine = Depends(get_authorization_engine),
) -> AsyncGenerator[AuditLogService, None]:
    settings = get_settings()
    yield AuditLogService(
        repository,
        authorization,
        default_limit=settings.audit_log_default_limit,
        max_limit=settings.audit_log_max_limit,
    )


async def get_user_profile_service(
    store: DocumentStore = Depends(get_document_store),
    authorization: AuthorizationEngine = Depends(get_authorization_engine),
    org_query: OrgQueryService = Depends(get_org_query_service),
) -> AsyncGenerator[UserProfileService, None]:
    yield UserProfileService(store, authorization, org_query)
