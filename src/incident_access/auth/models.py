from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Iterable

from incident_access.auth.roles import Permission, SystemRole


@dataclass(frozen=True)
class TenancyScope:
    """Account/org/project identifiers. Carried through, never evaluated."""

    account_identifier: str | None = None
    org_identifier: str | None = None
    project_identifier: str | None = None


@dataclass(frozen=True)
class Principal:
    id: str
    user_id: str
    display_name: str
    email: str
    system_role: SystemRole = SystemRole.OBSERVER
    permissions: frozenset[Permission] = field(default_factory=frozenset)
    tenancy_scope: TenancyScope = field(default_factory=TenancyScope)
    role_names: frozenset[str] = field(default_factory=frozenset)

    def with_role(self, role: SystemRole) -> Principal:
        return replace(self, system_role=role)

    def with_permissions(self, permissions: Iterable[Permission]) -> Principal:
        return replace(self, permissions=frozenset(permissions))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "name": self.display_name,
            "email": self.email,
            "systemRole": self.system_role.value,
            "permissions": sorted(p.value for p in self.permissions),
            "roleNames": sorted(self.role_names),
            "accountIdentifier": self.tenancy_scope.account_identifier,
            "orgIdentifier": self.tenancy_scope.org_identifier,
            "projectIdentifier": self.tenancy_scope.project_identifier,
        }
