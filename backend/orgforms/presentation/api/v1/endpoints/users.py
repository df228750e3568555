"""User endpoints."""

from fastapi import APIRouter, BackgroundTasks, Depends, Request, status

from orgforms.application.schemas import (
    PrincipalResponse,
    UserListResponse,
    UserRegister,
    UserRegisterResponse,
)
from orgforms.application.services import AuditRecorder, UserProfileService
from orgforms.domain.authorization import AuditAction
from orgforms.domain.entities import Principal
from orgforms.infrastructure.dependencies import get_audit_recorder, get_user_profile_service
from orgforms.presentation.api.v1.auditing import schedule_audit
from orgforms.presentation.api.v1.authorization import DOMAIN_ERRORS, get_current_principal, to_http_error

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me", response_model=PrincipalResponse)
async def get_me(
    principal: Principal = Depends(get_current_principal),
    service: UserProfileService = Depends(get_user_profile_service),
) -> PrincipalResponse:
    """The verified caller as the API sees it."""
    return PrincipalResponse(user=service.me(principal))


@router.get("", response_model=UserListResponse)
async def list_users(
    request: Request,
    background_tasks: BackgroundTasks,
    principal: Principal = Depends(get_current_principal),
    service: UserProfileService = Depends(get_user_profile_service),
    recorder: AuditRecorder = Depends(get_audit_recorder),
) -> UserListResponse:
    try:
        profiles = await service.list_profiles(principal)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e)
    schedule_audit(
        background_tasks, recorder, principal, request,
        action=AuditAction.VIEW_LIST, resource_type="users",
        metadata={"count": len(profiles)},
    )
    return UserListResponse(data=profiles)


@router.post("/register", response_model=UserRegisterResponse, status_code=status.HTTP_201_CREATED)
async def register_user(
    body: UserRegister,
    request: Request,
    background_tasks: BackgroundTasks,
    principal: Principal = Depends(get_current_principal),
    service: UserProfileService = Depends(get_user_profile_service),
    recorder: AuditRecorder = Depends(get_audit_recorder),
) -> UserRegisterResponse:
    """Store the profile of an identity; claims themselves are issued by the identity provider."""
    try:
        profile = await service.register(principal, body.model_dump(exclude_none=True))
    except DOMAIN_ERRORS as e:
        raise to_http_error(e)
    schedule_audit(
        background_tasks, recorder, principal, request,
        action=AuditAction.CREATE, resource_type="users", resource_id=profile.id,
        metadata={"role": profile.data.get("role")},
    )
    return UserRegisterResponse(uid=profile.id, user=profile.to_payload())


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: str,
    request: Request,
    background_tasks: BackgroundTasks,
    principal: Principal = Depends(get_current_principal),
    service: UserProfileService = Depends(get_user_profile_service),
    recorder: AuditRecorder = Depends(get_audit_recorder),
) -> None:
    """Admin only."""
    try:
        await service.delete_profile(principal, user_id)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e)
    schedule_audit(
        background_tasks, recorder, principal, request,
        action=AuditAction.DELETE, resource_type="users", resource_id=user_id,
        metadata={"initiator": principal.email},
    )
