from __future__ import annotations

from typing import Callable

from fastapi import Depends, Header

from incident_access.access.evaluation import has_all_permissions, has_any_permission
from incident_access.access.role_policies import is_manager_or_above
from incident_access.auth.identity import HeaderCredentialProvider, extract_principal
from incident_access.auth.models import Principal
from incident_access.auth.roles import Permission
from incident_access.configs.logging_config import get_logger
from incident_access.configs.settings import Settings, get_settings
from incident_access.errors import AuthError, ForbiddenError

log = get_logger(__name__)


def _bearer_token(authorization: str | None) -> str:
    if not authorization:
        raise AuthError("missing authorization header")
    provider = HeaderCredentialProvider(authorization)
    token = provider.get_credential(provider.key)
    if token is None:
        raise AuthError("invalid authorization header")
    return token


def get_optional_principal(
    authorization: str | None = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> Principal | None:
    """Principal for the request, or None when logged out or undecodable."""
    provider = HeaderCredentialProvider(authorization, key=settings.credential_key)
    return extract_principal(provider, settings, key=settings.credential_key)


def get_principal(
    authorization: str | None = Header(default=None),
    principal: Principal | None = Depends(get_optional_principal),
) -> Principal:
    if principal is None:
        # Distinguish a missing header from a bad token for the caller.
        _bearer_token(authorization)
        raise AuthError("invalid token")
    log.info(
        "auth.principal id=%s user_id=%s system_role=%s",
        principal.id,
        principal.user_id,
        principal.system_role.value,
    )
    return principal


def require_permission(
    *permissions: Permission, require_all: bool = False
) -> Callable[[Principal], Principal]:
    def dependency(principal: Principal = Depends(get_principal)) -> Principal:
        check = has_all_permissions if require_all else has_any_permission
        if not check(principal, permissions):
            log.info(
                "auth.forbidden id=%s required=%s require_all=%s",
                principal.id,
                [p.value for p in permissions],
                require_all,
            )
            raise ForbiddenError(
                "insufficient permissions", required=tuple(p.value for p in permissions)
            )
        return principal

    return dependency


def require_manager_or_above(principal: Principal = Depends(get_principal)) -> Principal:
    if not is_manager_or_above(principal.role_names):
        log.info("auth.forbidden id=%s roles=%s", principal.id, sorted(principal.role_names))
        raise ForbiddenError("manager role or above required")
    return principal
