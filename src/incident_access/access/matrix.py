from __future__ import annotations

from collections import Counter
from typing import Iterable

from incident_access.auth.roles import RoleName
from incident_access.configs.logging_config import get_logger
from incident_access.domain.entities.access import (
    GroupEntry,
    MatrixGroup,
    MatrixUser,
    PermissionMatrix,
    RoleEntry,
    UserEntry,
)

log = get_logger(__name__)

_VIEWER = frozenset(
    {"INCIDENT_VIEW", "EVIDENCE_VIEW", "USER_VIEW", "GROUP_VIEW", "ROLE_VIEW"}
)

_RESPONDER = _VIEWER | {
    "INCIDENT_CREATE",
    "INCIDENT_UPDATE",
    "INCIDENT_ASSIGN",
    "EVIDENCE_UPLOAD",
    "EVIDENCE_DOWNLOAD",
}

_MANAGER = _RESPONDER | {
    "INCIDENT_DELETE",
    "INCIDENT_EXPORT",
    "EVIDENCE_DELETE",
    "USER_CREATE",
    "USER_UPDATE",
    "USER_MANAGE_ROLES",
    "GROUP_CREATE",
    "GROUP_UPDATE",
    "GROUP_MANAGE_MEMBERS",
    "EXPORT_CSV",
    "EXPORT_PDF",
    "EXPORT_COMBINED",
}

_ADMIN = _MANAGER | {
    "USER_DELETE",
    "USER_RESET_PASSWORD",
    "GROUP_DELETE",
    "GROUP_MANAGE_ROLES",
    "ROLE_CREATE",
    "ROLE_UPDATE",
    "ROLE_DELETE",
    "SYSTEM_CONFIG",
    "SYSTEM_AUDIT",
}

# Backend capabilities granted by each account role.
ROLE_CAPABILITIES: dict[RoleName, frozenset[str]] = {
    RoleName.VIEWER: _VIEWER,
    RoleName.RESPONDER: frozenset(_RESPONDER),
    RoleName.MANAGER: frozenset(_MANAGER),
    RoleName.ADMIN: frozenset(_ADMIN),
    RoleName.SYSTEM_ADMIN: frozenset(_ADMIN | {"SYSTEM_ADMIN"}),
}

_BY_NAME = {role.value: caps for role, caps in ROLE_CAPABILITIES.items()}


def effective_capabilities(role_names: Iterable[str]) -> frozenset[str]:
    """Union of the capabilities of every known role; unknown roles add nothing."""
    out: set[str] = set()
    for name in role_names:
        out |= _BY_NAME.get(name, frozenset())
    return frozenset(out)


def capabilities_by_role() -> dict[str, list[str]]:
    return {name: sorted(caps) for name, caps in _BY_NAME.items()}


def build_role_matrix(users: list[MatrixUser], groups: list[MatrixGroup]) -> PermissionMatrix:
    log.info("matrix.build start users=%s groups=%s", len(users), len(groups))

    user_counts: Counter[str] = Counter()
    for u in users:
        user_counts.update(set(u.role_names))
    group_counts: Counter[str] = Counter()
    for g in groups:
        group_counts.update(set(g.role_names))

    role_entries = [
        RoleEntry(
            role_name=name,
            capabilities=sorted(caps),
            user_count=user_counts.get(name, 0),
            group_count=group_counts.get(name, 0),
        )
        for name, caps in _BY_NAME.items()
    ]

    groups_by_id = {g.id: g for g in groups}
    user_entries: list[UserEntry] = []
    for u in users:
        direct = set(u.role_names)
        group_roles: set[str] = set()
        group_names: list[str] = []
        for gid in u.group_ids:
            group = groups_by_id.get(gid)
            if group is None:
                # Membership pointing at a group we were not given.
                log.debug("matrix.unknown_group user_id=%s group_id=%s", u.id, gid)
                continue
            group_roles.update(group.role_names)
            group_names.append(group.name)
        effective = direct | group_roles
        user_entries.append(
            UserEntry(
                user_id=u.id,
                username=u.username,
                email=u.email,
                direct_roles=sorted(direct),
                group_roles=sorted(group_roles),
                effective_roles=sorted(effective),
                effective_capabilities=sorted(effective_capabilities(effective)),
                group_names=group_names,
            )
        )

    group_entries = [
        GroupEntry(
            group_id=g.id,
            group_name=g.name,
            roles=sorted(set(g.role_names)),
            member_count=len(g.user_ids),
            effective_capabilities=sorted(effective_capabilities(g.role_names)),
        )
        for g in groups
    ]

    log.info(
        "matrix.build done roles=%s users=%s groups=%s",
        len(role_entries),
        len(user_entries),
        len(group_entries),
    )
    return PermissionMatrix(
        roles=role_entries,
        users=user_entries,
        groups=group_entries,
        capabilities_by_role=capabilities_by_role(),
    )
