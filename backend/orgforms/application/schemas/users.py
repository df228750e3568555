"""Pydantic schemas for the users API."""

from typing import Any

from pydantic import AliasChoices, BaseModel, Field


class PrincipalResponse(BaseModel):
    user: dict[str, Any]


class UserListResponse(BaseModel):
    data: list[dict[str, Any]]


class UserRegister(BaseModel):
    """Profile of an identity the provider already knows; ``uid`` is its subject id."""

    id: str | None = Field(None, min_length=1, validation_alias=AliasChoices("uid", "id"))
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    role: str
    org: str | list[str]


class UserRegisterResponse(BaseModel):
    uid: str
    user: dict[str, Any]
