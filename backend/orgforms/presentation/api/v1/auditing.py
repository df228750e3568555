"""Schedules audit entries to be written after the response is sent."""

from typing import Any

from fastapi import BackgroundTasks, Request

from orgforms.application.services import AuditRecorder
from orgforms.domain.authorization import AuditAction
from orgforms.domain.entities import Principal


def schedule_audit(
    background_tasks: BackgroundTasks,
    recorder: AuditRecorder,
    principal: Principal,
    request: Request,
    *,
    action: AuditAction,
    resource_type: str,
    resource_id: str | None = None,
    metadata: dict[str, Any] | None = None,
) -> None:
    details = dict(metadata or {})
    if request.client is not None:
        details.setdefault("ip", request.client.host)
    background_tasks.add_task(
        recorder.record,
        principal,
        action=action,
        resource_type=resource_type,
        resource_id=resource_id,
        method=request.method,
        path=request.url.path,
        metadata=details,
    )
