from fastapi import APIRouter, Depends

from incident_access.access.evaluation import (
    has_all_permissions,
    has_any_permission,
)
from incident_access.access.guard import RouteDecision, evaluate_guard, evaluate_route_access
from incident_access.access.matrix import build_role_matrix, capabilities_by_role
from incident_access.auth.dependencies import (
    get_optional_principal,
    get_principal,
    require_manager_or_above,
    require_permission,
)
from incident_access.auth.models import Principal
from incident_access.auth.roles import (
    PERMISSION_LABELS,
    ROLE_DESCRIPTIONS,
    ROLE_LABELS,
    Permission,
    SystemRole,
)
from incident_access.configs.logging_config import get_logger
from incident_access.configs.settings import Settings, get_settings
from incident_access.domain.entities.access import (
    GuardRequest,
    MatrixRequest,
    PermissionCheckRequest,
    RouteAccessRequest,
)
from incident_access.errors import NotFoundError
from incident_access.utils.response import success

log = get_logger(__name__)

router = APIRouter(prefix="/ext/access", tags=["access"])


def _principal_id(principal: Principal | None) -> str:
    return principal.id if principal is not None else "anonymous"


def _role_payload(role: SystemRole) -> dict:
    return {
        "role": role.value,
        "label": ROLE_LABELS[role],
        "description": ROLE_DESCRIPTIONS[role],
    }


@router.get("/me")
async def me(principal: Principal = Depends(get_principal)) -> dict:
    return success(principal.to_dict())


@router.post("/check")
async def check_permissions(
    body: PermissionCheckRequest,
    principal: Principal | None = Depends(get_optional_principal),
) -> dict:
    check = has_all_permissions if body.require_all else has_any_permission
    allowed = check(principal, body.permissions)
    log.info(
        "access.check request_id=%s principal=%s permissions=%s require_all=%s allowed=%s",
        body.request_id,
        _principal_id(principal),
        [p.value for p in body.permissions],
        body.require_all,
        allowed,
    )
    return success({"allowed": allowed})


@router.post("/guard")
async def guard(
    body: GuardRequest,
    principal: Principal | None = Depends(get_optional_principal),
) -> dict:
    decision = evaluate_guard(
        principal,
        body.permission,
        require_all=body.require_all,
        hide_on_no_permission=body.hide_on_no_permission,
    )
    log.info(
        "access.guard request_id=%s principal=%s decision=%s",
        body.request_id,
        _principal_id(principal),
        decision.value,
    )
    return success({"decision": decision.value})


@router.post("/route")
async def route_access(
    body: RouteAccessRequest,
    principal: Principal | None = Depends(get_optional_principal),
    settings: Settings = Depends(get_settings),
) -> dict:
    decision = evaluate_route_access(principal, body.require_manager_or_above)
    redirect_to = {
        RouteDecision.REDIRECT_LOGIN: settings.login_path,
        RouteDecision.REDIRECT_HOME: settings.home_path,
    }.get(decision)
    log.info(
        "access.route request_id=%s principal=%s decision=%s",
        body.request_id,
        _principal_id(principal),
        decision.value,
    )
    return success({"decision": decision.value, "redirect_to": redirect_to})


@router.get("/roles")
async def list_roles() -> dict:
    return success(
        {
            "roles": [_role_payload(r) for r in SystemRole],
            "permissions": [
                {"permission": p.value, "label": label} for p, label in PERMISSION_LABELS.items()
            ],
        }
    )


@router.get("/roles/{name}")
async def get_role(
    name: str,
    _: Principal = Depends(
        require_permission(Permission.READ_USER, Permission.ASSIGN_ROLE, Permission.SYSTEM_ADMIN)
    ),
) -> dict:
    try:
        role = SystemRole(name.upper())
    except ValueError:
        raise NotFoundError(f"role not found: {name}") from None
    return success(_role_payload(role))


@router.get("/matrix/roles")
async def matrix_roles(_: Principal = Depends(require_manager_or_above)) -> dict:
    return success(capabilities_by_role())


@router.post("/matrix")
async def matrix(
    body: MatrixRequest,
    principal: Principal = Depends(require_manager_or_above),
) -> dict:
    log.info(
        "access.matrix.start request_id=%s principal=%s users=%s groups=%s",
        body.request_id,
        principal.id,
        len(body.users),
        len(body.groups),
    )
    result = build_role_matrix(body.users, body.groups)
    return success(result.model_dump())
