from __future__ import annotations

from typing import Iterable

from incident_access.auth.models import Principal
from incident_access.auth.roles import Permission, SystemRole


def _is_admin(principal: Principal) -> bool:
    return principal.system_role is SystemRole.ADMIN


def has_permission(principal: Principal | None, permission: Permission) -> bool:
    if principal is None:
        return False
    # Administrators bypass explicit permission checks.
    if _is_admin(principal):
        return True
    return permission in principal.permissions


def has_any_permission(principal: Principal | None, permissions: Iterable[Permission]) -> bool:
    """
    True when at least one of `permissions` is held.

    An empty list is no restriction, so any authenticated principal passes.
    """
    if principal is None:
        return False
    if _is_admin(principal):
        return True
    wanted = list(permissions)
    if not wanted:
        return True
    return any(p in principal.permissions for p in wanted)


def has_all_permissions(principal: Principal | None, permissions: Iterable[Permission]) -> bool:
    if principal is None:
        return False
    if _is_admin(principal):
        return True
    return all(p in principal.permissions for p in permissions)


class PermissionChecker:
    """Permission predicates bound to one principal, as views consume them."""

    def __init__(self, principal: Principal | None):
        self._principal = principal

    @property
    def principal(self) -> Principal | None:
        return self._principal

    def has_permission(self, permission: Permission) -> bool:
        return has_permission(self._principal, permission)

    def has_any_permission(self, *permissions: Permission) -> bool:
        return has_any_permission(self._principal, permissions)

    def has_all_permissions(self, *permissions: Permission) -> bool:
        return has_all_permissions(self._principal, permissions)

    def _role_is(self, role: SystemRole) -> bool:
        return self._principal is not None and self._principal.system_role is role

    @property
    def is_admin(self) -> bool:
        return self._role_is(SystemRole.ADMIN)

    @property
    def is_incident_commander(self) -> bool:
        return self._role_is(SystemRole.INCIDENT_COMMANDER)

    @property
    def is_responder(self) -> bool:
        return self._role_is(SystemRole.RESPONDER)

    @property
    def is_observer(self) -> bool:
        return self._role_is(SystemRole.OBSERVER)

    @property
    def is_reporter(self) -> bool:
        return self._role_is(SystemRole.REPORTER)
