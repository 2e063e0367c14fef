from __future__ import annotations

import pytest

from incident_access.access.evaluation import (
    PermissionChecker,
    has_all_permissions,
    has_any_permission,
    has_permission,
)
from incident_access.auth.models import Principal
from incident_access.auth.roles import Permission, SystemRole


def _principal(role: SystemRole, *permissions: Permission) -> Principal:
    return Principal(
        id="u-1",
        user_id="jdoe",
        display_name="Jane",
        email="jane@example.com",
        system_role=role,
        permissions=frozenset(permissions),
    )


@pytest.mark.parametrize("permission", list(Permission))
def test_admin_holds_every_permission_with_empty_set(permission) -> None:
    admin = _principal(SystemRole.ADMIN)
    assert has_permission(admin, permission)
    assert has_any_permission(admin, [permission])
    assert has_all_permissions(admin, [permission, Permission.DELETE_USER])


@pytest.mark.parametrize("permission", list(Permission))
def test_logged_out_holds_nothing(permission) -> None:
    assert has_permission(None, permission) is False
    assert has_any_permission(None, [permission]) is False
    assert has_all_permissions(None, [permission]) is False


@pytest.mark.parametrize(
    "role",
    [r for r in SystemRole if r is not SystemRole.ADMIN],
)
def test_non_admin_is_plain_membership(role) -> None:
    principal = _principal(role, Permission.READ_INCIDENT, Permission.VIEW_ANALYTICS)
    for permission in Permission:
        assert has_permission(principal, permission) == (permission in principal.permissions)


def test_observer_cannot_create_incident() -> None:
    observer = _principal(SystemRole.OBSERVER, Permission.READ_INCIDENT)
    assert has_permission(observer, Permission.CREATE_INCIDENT) is False


def test_responder_any_vs_all() -> None:
    responder = _principal(
        SystemRole.RESPONDER, Permission.CREATE_INCIDENT, Permission.UPDATE_INCIDENT
    )
    wanted = [Permission.CREATE_INCIDENT, Permission.DELETE_INCIDENT]

    assert has_any_permission(responder, wanted) is True
    assert has_all_permissions(responder, wanted) is False
    assert has_all_permissions(responder, wanted[:1]) is True


def test_admin_bypass_for_delete_user() -> None:
    assert has_permission(_principal(SystemRole.ADMIN), Permission.DELETE_USER) is True


def test_empty_token_list_is_no_restriction() -> None:
    reporter = _principal(SystemRole.REPORTER)
    assert has_any_permission(reporter, []) is True
    assert has_all_permissions(reporter, []) is True
    assert has_any_permission(None, []) is False
    assert has_all_permissions(None, []) is False


def test_checker_role_flags() -> None:
    checker = PermissionChecker(_principal(SystemRole.INCIDENT_COMMANDER, Permission.ASSIGN_ROLE))

    assert checker.is_incident_commander
    assert not checker.is_admin
    assert not checker.is_responder
    assert not checker.is_observer
    assert not checker.is_reporter
    assert checker.has_permission(Permission.ASSIGN_ROLE)
    assert checker.has_any_permission(Permission.DELETE_TEAM, Permission.ASSIGN_ROLE)
    assert not checker.has_all_permissions(Permission.DELETE_TEAM, Permission.ASSIGN_ROLE)


def test_checker_without_principal() -> None:
    checker = PermissionChecker(None)
    assert checker.principal is None
    assert not checker.is_admin
    assert not checker.is_observer
    assert not checker.has_permission(Permission.READ_INCIDENT)
