"""Pydantic schemas for the audit log API."""

from typing import Any

from pydantic import BaseModel


class AuditActorSchema(BaseModel):
    id: str | None = None
    email: str | None = None
    role: str | None = None
    org: list[str] = []


class AuditEntryResponse(BaseModel):
    id: str | None = None
    action: str
    resourceType: str
    resourceId: str | None = None
    actor: AuditActorSchema
    method: str
    path: str
    metadata: dict[str, Any] = {}
    timestamp: str


class AuditLogResponse(BaseModel):
    data: list[AuditEntryResponse]
