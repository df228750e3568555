"""Subform endpoints."""

from typing import Any

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request

from orgforms.application.schemas import SubformCreate, SubformUpdate
from orgforms.application.services import AuditRecorder, SubformService
from orgforms.domain.authorization import AuditAction
from orgforms.domain.entities import Principal
from orgforms.infrastructure.dependencies import get_audit_recorder, get_subform_service
from orgforms.presentation.api.v1.auditing import schedule_audit
from orgforms.presentation.api.v1.authorization import DOMAIN_ERRORS, get_current_principal, to_http_error
from orgforms.presentation.api.v1.endpoints.resource_routes import add_crud_routes

router = APIRouter(prefix="/subforms", tags=["Subforms"])


@router.get("", response_model=list[dict[str, Any]])
async def list_subforms(
    request: Request,
    background_tasks: BackgroundTasks,
    form_id: str | None = Query(None),
    principal: Principal = Depends(get_current_principal),
    service: SubformService = Depends(get_subform_service),
    recorder: AuditRecorder = Depends(get_audit_recorder),
) -> list[dict[str, Any]]:
    """Visible subforms, optionally only those attached to one form."""
    try:
        documents = await service.list_for_form(principal, form_id)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e)
    schedule_audit(
        background_tasks, recorder, principal, request,
        action=AuditAction.VIEW_LIST, resource_type="subforms",
        metadata={"formId": form_id, "count": len(documents)},
    )
    return [d.to_payload() for d in documents]


add_crud_routes(
    router,
    resource_type="subforms",
    get_service=get_subform_service,
    create_schema=SubformCreate,
    update_schema=SubformUpdate,
    include_list=False,
)
