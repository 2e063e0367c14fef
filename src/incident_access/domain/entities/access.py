from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, Field, field_validator

from incident_access.auth.roles import Permission


class Envelope(BaseModel):
    request_id: str | None = None


class PermissionCheckRequest(Envelope):
    permissions: List[Permission] = Field(default_factory=list)
    require_all: bool = False


class GuardRequest(Envelope):
    # A single token, a list of tokens, or nothing (unrestricted).
    permission: Optional[Union[Permission, List[Permission]]] = None
    require_all: bool = False
    hide_on_no_permission: bool = False


class RouteAccessRequest(Envelope):
    require_manager_or_above: bool = False


class MatrixUser(BaseModel):
    id: str
    username: str
    email: str | None = None
    role_names: list[str] = Field(default_factory=list)
    group_ids: list[str] = Field(default_factory=list)

    @field_validator("role_names", mode="before")
    @classmethod
    def normalize_roles(cls, v):
        if v is None:
            return []
        return [str(r).upper() for r in v]


class MatrixGroup(BaseModel):
    id: str
    name: str
    role_names: list[str] = Field(default_factory=list)
    user_ids: list[str] = Field(default_factory=list)

    @field_validator("role_names", mode="before")
    @classmethod
    def normalize_roles(cls, v):
        if v is None:
            return []
        return [str(r).upper() for r in v]


class MatrixRequest(Envelope):
    users: list[MatrixUser] = Field(default_factory=list)
    groups: list[MatrixGroup] = Field(default_factory=list)


class RoleEntry(BaseModel):
    role_name: str
    role_type: str = "SYSTEM"
    capabilities: list[str]
    user_count: int = 0
    group_count: int = 0


class UserEntry(BaseModel):
    user_id: str
    username: str
    email: str | None = None
    direct_roles: list[str]
    group_roles: list[str]
    effective_roles: list[str]
    effective_capabilities: list[str]
    group_names: list[str]


class GroupEntry(BaseModel):
    group_id: str
    group_name: str
    roles: list[str]
    member_count: int
    effective_capabilities: list[str]


class PermissionMatrix(BaseModel):
    roles: list[RoleEntry]
    users: list[UserEntry]
    groups: list[GroupEntry]
    capabilities_by_role: dict[str, list[str]]
