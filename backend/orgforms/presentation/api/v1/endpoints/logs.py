"""Audit log endpoint (Admin, Manager)."""

from fastapi import APIRouter, Depends, Query

from orgforms.application.schemas import AuditEntryResponse, AuditLogResponse
from orgforms.application.services import AuditLogService
from orgforms.domain.entities import Principal
from orgforms.infrastructure.dependencies import get_audit_log_service
from orgforms.presentation.api.v1.authorization import DOMAIN_ERRORS, get_current_principal, to_http_error

router = APIRouter(prefix="/logs", tags=["Audit Logs"])


@router.get("", response_model=AuditLogResponse)
async def list_logs(
    limit: int | None = Query(None, ge=1),
    principal: Principal = Depends(get_current_principal),
    service: AuditLogService = Depends(get_audit_log_service),
) -> AuditLogResponse:
    """Most recent POST/PUT/DELETE entries. ``limit`` is capped at the configured maximum."""
    try:
        entries = await service.list_entries(principal, limit)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e)
    return AuditLogResponse(data=[AuditEntryResponse.model_validate(e) for e in entries])
