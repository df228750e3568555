"""CRUD routes shared by forms, subforms, records and subrecords."""

from collections.abc import Callable
from typing import Any

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Path, Request, status
from pydantic import BaseModel

from orgforms.application.schemas import PageResponse
from orgforms.application.services import AuditRecorder, ResourceService
from orgforms.domain.authorization import AuditAction
from orgforms.domain.entities import Principal
from orgforms.infrastructure.dependencies import get_audit_recorder
from orgforms.presentation.api.v1.auditing import schedule_audit
from orgforms.presentation.api.v1.authorization import (
    DOMAIN_ERRORS,
    get_current_principal,
    to_http_error,
)


def add_crud_routes(
    router: APIRouter,
    *,
    resource_type: str,
    get_service: Callable[..., Any],
    create_schema: type[BaseModel],
    update_schema: type[BaseModel],
    include_list: bool = True,
) -> None:
    """Register page/get/create/update/delete (and optionally list) on ``router``.

    ``include_list=False`` leaves ``GET ""`` to the caller, for kinds whose
    listing takes extra filters.
    """

    if include_list:

        @router.get("", response_model=list[dict[str, Any]])
        async def list_resources(
            request: Request,
            background_tasks: BackgroundTasks,
            principal: Principal = Depends(get_current_principal),
            service: ResourceService = Depends(get_service),
            recorder: AuditRecorder = Depends(get_audit_recorder),
        ) -> list[dict[str, Any]]:
            try:
                documents = await service.list_visible(principal)
            except DOMAIN_ERRORS as e:
                raise to_http_error(e)
            schedule_audit(
                background_tasks, recorder, principal, request,
                action=AuditAction.VIEW_LIST, resource_type=resource_type,
                metadata={"count": len(documents)},
            )
            return [d.to_payload() for d in documents]

    @router.get("/page/{page}", response_model=PageResponse, response_model_by_alias=True)
    async def list_resource_page(
        request: Request,
        background_tasks: BackgroundTasks,
        page: int = Path(..., ge=1),
        principal: Principal = Depends(get_current_principal),
        service: ResourceService = Depends(get_service),
        recorder: AuditRecorder = Depends(get_audit_recorder),
    ) -> PageResponse:
        """One page of the caller's visible resources, newest first."""
        try:
            result = await service.list_page(principal, page)
        except DOMAIN_ERRORS as e:
            raise to_http_error(e)
        schedule_audit(
            background_tasks, recorder, principal, request,
            action=AuditAction.VIEW_LIST, resource_type=resource_type,
            metadata={"page": page},
        )
        return PageResponse.from_page(result)

    @router.get("/{resource_id}", response_model=dict[str, Any])
    async def get_resource(
        resource_id: str,
        request: Request,
        background_tasks: BackgroundTasks,
        principal: Principal = Depends(get_current_principal),
        service: ResourceService = Depends(get_service),
        recorder: AuditRecorder = Depends(get_audit_recorder),
    ) -> dict[str, Any]:
        try:
            document = await service.get(principal, resource_id)
        except DOMAIN_ERRORS as e:
            raise to_http_error(e)
        schedule_audit(
            background_tasks, recorder, principal, request,
            action=AuditAction.VIEW, resource_type=resource_type, resource_id=resource_id,
        )
        return document.to_payload()

    @router.post("", response_model=dict[str, Any], status_code=status.HTTP_201_CREATED)
    async def create_resource(
        data: create_schema,  # type: ignore[valid-type]
        request: Request,
        background_tasks: BackgroundTasks,
        principal: Principal = Depends(get_current_principal),
        service: ResourceService = Depends(get_service),
        recorder: AuditRecorder = Depends(get_audit_recorder),
    ) -> dict[str, Any]:
        try:
            document = await service.create(principal, data.model_dump(exclude_none=True))
        except DOMAIN_ERRORS as e:
            raise to_http_error(e)
        schedule_audit(
            background_tasks, recorder, principal, request,
            action=AuditAction.CREATE, resource_type=resource_type, resource_id=document.id,
        )
        return document.to_payload()

    @router.put("/{resource_id}", response_model=dict[str, Any])
    async def update_resource(
        resource_id: str,
        data: update_schema,  # type: ignore[valid-type]
        request: Request,
        background_tasks: BackgroundTasks,
        principal: Principal = Depends(get_current_principal),
        service: ResourceService = Depends(get_service),
        recorder: AuditRecorder = Depends(get_audit_recorder),
    ) -> dict[str, Any]:
        changes = data.model_dump(exclude_unset=True)
        if not changes:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No changes provided")
        try:
            document = await service.update(principal, resource_id, changes)
        except DOMAIN_ERRORS as e:
            raise to_http_error(e)
        schedule_audit(
            background_tasks, recorder, principal, request,
            action=AuditAction.EDIT, resource_type=resource_type, resource_id=resource_id,
            metadata={"fields": sorted(changes)},
        )
        return document.to_payload()

    @router.delete("/{resource_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_resource(
        resource_id: str,
        request: Request,
        background_tasks: BackgroundTasks,
        principal: Principal = Depends(get_current_principal),
        service: ResourceService = Depends(get_service),
        recorder: AuditRecorder = Depends(get_audit_recorder),
    ) -> None:
        try:
            await service.delete(principal, resource_id)
        except DOMAIN_ERRORS as e:
            raise to_http_error(e)
        schedule_audit(
            background_tasks, recorder, principal, request,
            action=AuditAction.DELETE, resource_type=resource_type, resource_id=resource_id,
        )
