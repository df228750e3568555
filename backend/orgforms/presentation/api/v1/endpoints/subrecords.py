"""Subrecord endpoints."""

from typing import Any

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request

from orgforms.application.schemas import SubrecordCreate, SubrecordUpdate
from orgforms.application.services import AuditRecorder, SubrecordService
from orgforms.domain.authorization import AuditAction
from orgforms.domain.entities import Principal
from orgforms.infrastructure.dependencies import get_audit_recorder, get_subrecord_service
from orgforms.presentation.api.v1.auditing import schedule_audit
from orgforms.presentation.api.v1.authorization import DOMAIN_ERRORS, get_current_principal, to_http_error
from orgforms.presentation.api.v1.endpoints.resource_routes import add_crud_routes

router = APIRouter(prefix="/subrecords", tags=["Subrecords"])


@router.get("", response_model=list[dict[str, Any]])
async def list_subrecords(
    request: Request,
    background_tasks: BackgroundTasks,
    record_id: str | None = Query(None),
    subform_id: str | None = Query(None),
    principal: Principal = Depends(get_current_principal),
    service: SubrecordService = Depends(get_subrecord_service),
    recorder: AuditRecorder = Depends(get_audit_recorder),
) -> list[dict[str, Any]]:
    try:
        documents = await service.list_filtered(principal, record_id=record_id, subform_id=subform_id)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e)
    schedule_audit(
        background_tasks, recorder, principal, request,
        action=AuditAction.VIEW_LIST, resource_type="subrecords",
        metadata={"recordId": record_id, "subformId": subform_id, "count": len(documents)},
    )
    return [d.to_payload() for d in documents]


add_crud_routes(
    router,
    resource_type="subrecords",
    get_service=get_subrecord_service,
    create_schema=SubrecordCreate,
    update_schema=SubrecordUpdate,
    include_list=False,
)
