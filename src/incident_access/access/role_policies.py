from __future__ import annotations

from typing import Iterable

from incident_access.auth.roles import RoleName

ADMIN_ROLES = frozenset({RoleName.ADMIN.value, RoleName.SYSTEM_ADMIN.value})
MANAGER_OR_ABOVE_ROLES = frozenset(
    {RoleName.MANAGER.value, RoleName.ADMIN.value, RoleName.SYSTEM_ADMIN.value}
)
INCIDENT_WRITER_ROLES = frozenset(
    {
        RoleName.RESPONDER.value,
        RoleName.MANAGER.value,
        RoleName.ADMIN.value,
        RoleName.SYSTEM_ADMIN.value,
    }
)


def _names(roles: Iterable[RoleName | str]) -> set[str]:
    return {r.value if isinstance(r, RoleName) else str(r) for r in roles}


def has_any_role(user_roles: Iterable[str] | None, allowed: Iterable[RoleName | str]) -> bool:
    if not user_roles:
        return False
    return not _names(user_roles).isdisjoint(_names(allowed))


def has_role(user_roles: Iterable[str] | None, role: RoleName | str) -> bool:
    return has_any_role(user_roles, [role])


def is_admin_role(user_roles: Iterable[str] | None) -> bool:
    """ADMIN or SYSTEM_ADMIN."""
    return has_any_role(user_roles, ADMIN_ROLES)


def is_manager_or_above(user_roles: Iterable[str] | None) -> bool:
    return has_any_role(user_roles, MANAGER_OR_ABOVE_ROLES)


def _any_role(user_roles: Iterable[str] | None) -> bool:
    return bool(user_roles)


class UserPolicy:
    # View: any authenticated role. Create/update: manager or above. Delete: admins.
    @staticmethod
    def can_view(user_roles: Iterable[str] | None) -> bool:
        return _any_role(user_roles)

    @staticmethod
    def can_create(user_roles: Iterable[str] | None) -> bool:
        return is_manager_or_above(user_roles)

    @staticmethod
    def can_update(user_roles: Iterable[str] | None) -> bool:
        return is_manager_or_above(user_roles)

    @staticmethod
    def can_delete(user_roles: Iterable[str] | None) -> bool:
        return is_admin_role(user_roles)


class GroupPolicy(UserPolicy):
    @staticmethod
    def can_manage_members(user_roles: Iterable[str] | None) -> bool:
        return is_manager_or_above(user_roles)


class IncidentPolicy:
    @staticmethod
    def can_view(user_roles: Iterable[str] | None) -> bool:
        return _any_role(user_roles)

    @staticmethod
    def can_create(user_roles: Iterable[str] | None) -> bool:
        return has_any_role(user_roles, INCIDENT_WRITER_ROLES)

    @staticmethod
    def can_update(user_roles: Iterable[str] | None) -> bool:
        return has_any_role(user_roles, INCIDENT_WRITER_ROLES)

    @staticmethod
    def can_delete(user_roles: Iterable[str] | None) -> bool:
        return is_admin_role(user_roles)
