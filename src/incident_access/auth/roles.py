from __future__ import annotations

from enum import Enum
from typing import Any

from incident_access.configs.logging_config import get_logger

log = get_logger(__name__)


class SystemRole(str, Enum):
    """Coarse-grained role carried on every principal. ADMIN implies all permissions."""

    ADMIN = "ADMIN"
    INCIDENT_COMMANDER = "INCIDENT_COMMANDER"
    RESPONDER = "RESPONDER"
    OBSERVER = "OBSERVER"
    REPORTER = "REPORTER"

    @classmethod
    def parse(cls, value: Any) -> "SystemRole":
        # Least privilege when the claim is missing or malformed.
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return cls.OBSERVER
        try:
            return cls(value)
        except ValueError:
            log.info("roles.unknown_system_role value=%s", value)
            return cls.OBSERVER


class Permission(str, Enum):
    # Incident
    READ_INCIDENT = "READ_INCIDENT"
    CREATE_INCIDENT = "CREATE_INCIDENT"
    UPDATE_INCIDENT = "UPDATE_INCIDENT"
    DELETE_INCIDENT = "DELETE_INCIDENT"
    EXPORT_INCIDENT = "EXPORT_INCIDENT"
    ACKNOWLEDGE_INCIDENT = "ACKNOWLEDGE_INCIDENT"
    RESOLVE_INCIDENT = "RESOLVE_INCIDENT"

    # User management
    READ_USER = "READ_USER"
    CREATE_USER = "CREATE_USER"
    UPDATE_USER = "UPDATE_USER"
    DELETE_USER = "DELETE_USER"
    ASSIGN_ROLE = "ASSIGN_ROLE"

    # Team management
    READ_TEAM = "READ_TEAM"
    CREATE_TEAM = "CREATE_TEAM"
    UPDATE_TEAM = "UPDATE_TEAM"
    DELETE_TEAM = "DELETE_TEAM"
    MANAGE_TEAM_MEMBERS = "MANAGE_TEAM_MEMBERS"

    # Organization management
    READ_ORGANIZATION = "READ_ORGANIZATION"
    UPDATE_ORGANIZATION = "UPDATE_ORGANIZATION"
    MANAGE_ORGANIZATION_SETTINGS = "MANAGE_ORGANIZATION_SETTINGS"

    # Advanced features
    MANAGE_CUSTOM_FIELDS = "MANAGE_CUSTOM_FIELDS"
    MANAGE_TEMPLATES = "MANAGE_TEMPLATES"
    VIEW_ANALYTICS = "VIEW_ANALYTICS"
    BULK_OPERATIONS = "BULK_OPERATIONS"
    MANAGE_SLA = "MANAGE_SLA"

    # System administration
    SYSTEM_ADMIN = "SYSTEM_ADMIN"

    @classmethod
    def parse_many(cls, values: Any) -> frozenset["Permission"]:
        """
        Build a permission set from a decoded claim.

        Anything that is not a list/tuple yields the empty set; unknown
        tokens are dropped so they never reach the evaluator.
        """
        if not isinstance(values, (list, tuple, set, frozenset)):
            if values is not None:
                log.info("roles.invalid_permissions_claim type=%s", type(values).__name__)
            return frozenset()
        out: set[Permission] = set()
        for v in values:
            if isinstance(v, cls):
                out.add(v)
                continue
            try:
                out.add(cls(str(v)))
            except ValueError:
                log.info("roles.unknown_permission value=%s", v)
        return frozenset(out)


class RoleName(str, Enum):
    """Account role names issued by the backend in the `roleNames` claim."""

    VIEWER = "VIEWER"
    RESPONDER = "RESPONDER"
    MANAGER = "MANAGER"
    ADMIN = "ADMIN"
    SYSTEM_ADMIN = "SYSTEM_ADMIN"


ROLE_LABELS: dict[SystemRole, str] = {
    SystemRole.ADMIN: "Administrator",
    SystemRole.INCIDENT_COMMANDER: "Incident Commander",
    SystemRole.RESPONDER: "Responder",
    SystemRole.OBSERVER: "Observer",
    SystemRole.REPORTER: "Reporter",
}

ROLE_DESCRIPTIONS: dict[SystemRole, str] = {
    SystemRole.ADMIN: "Full system access with all permissions",
    SystemRole.INCIDENT_COMMANDER: "Manage incidents and assign roles, but cannot manage users",
    SystemRole.RESPONDER: "Create and update incidents, participate in response",
    SystemRole.OBSERVER: "Read-only access to view incidents and analytics",
    SystemRole.REPORTER: "Can create incidents but limited update access",
}

PERMISSION_LABELS: dict[Permission, str] = {
    Permission.READ_INCIDENT: "Read Incidents",
    Permission.CREATE_INCIDENT: "Create Incidents",
    Permission.UPDATE_INCIDENT: "Update Incidents",
    Permission.DELETE_INCIDENT: "Delete Incidents",
    Permission.EXPORT_INCIDENT: "Export Incidents",
    Permission.ACKNOWLEDGE_INCIDENT: "Acknowledge Incidents",
    Permission.RESOLVE_INCIDENT: "Resolve Incidents",
    Permission.READ_USER: "Read Users",
    Permission.CREATE_USER: "Create Users",
    Permission.UPDATE_USER: "Update Users",
    Permission.DELETE_USER: "Delete Users",
    Permission.ASSIGN_ROLE: "Assign Roles",
    Permission.READ_TEAM: "Read Teams",
    Permission.CREATE_TEAM: "Create Teams",
    Permission.UPDATE_TEAM: "Update Teams",
    Permission.DELETE_TEAM: "Delete Teams",
    Permission.MANAGE_TEAM_MEMBERS: "Manage Team Members",
    Permission.READ_ORGANIZATION: "Read Organization",
    Permission.UPDATE_ORGANIZATION: "Update Organization",
    Permission.MANAGE_ORGANIZATION_SETTINGS: "Manage Organization Settings",
    Permission.MANAGE_CUSTOM_FIELDS: "Manage Custom Fields",
    Permission.MANAGE_TEMPLATES: "Manage Templates",
    Permission.VIEW_ANALYTICS: "View Analytics",
    Permission.BULK_OPERATIONS: "Bulk Operations",
    Permission.MANAGE_SLA: "Manage SLA",
    Permission.SYSTEM_ADMIN: "System Administration",
}
