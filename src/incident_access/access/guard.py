"""
Render and navigation decisions derived from permission evaluation.

Both decisions are pure: they look only at the principal handed in and the
requirement, so any number of guards can be evaluated in the same pass.
"""
from __future__ import annotations

import functools
from enum import Enum
from typing import Any, Callable, Sequence, TypeVar, Union

from incident_access.access.evaluation import (
    has_all_permissions,
    has_any_permission,
    has_permission,
)
from incident_access.access.role_policies import is_manager_or_above
from incident_access.auth.models import Principal
from incident_access.auth.roles import Permission
from incident_access.configs.logging_config import get_logger

log = get_logger(__name__)

T = TypeVar("T")

# A bare string is one token, the same as a Permission member.
PermissionRequirement = Union[Permission, str, Sequence[Permission], None]


class GuardDecision(str, Enum):
    RENDER_ALLOWED = "RENDER_ALLOWED"
    RENDER_FALLBACK = "RENDER_FALLBACK"
    RENDER_NOTHING = "RENDER_NOTHING"


class RouteDecision(str, Enum):
    REDIRECT_LOGIN = "REDIRECT_LOGIN"
    SHOW_LOADING = "SHOW_LOADING"
    REDIRECT_HOME = "REDIRECT_HOME"
    RENDER_ROUTE = "RENDER_ROUTE"


def _is_unrestricted(requirement: PermissionRequirement) -> bool:
    if requirement is None:
        return True
    if isinstance(requirement, str):
        return False
    return len(requirement) == 0


def _denied(hide_on_no_permission: bool) -> GuardDecision:
    return GuardDecision.RENDER_NOTHING if hide_on_no_permission else GuardDecision.RENDER_FALLBACK


def evaluate_guard(
    principal: Principal | None,
    requirement: PermissionRequirement,
    require_all: bool = False,
    hide_on_no_permission: bool = False,
) -> GuardDecision:
    """
    Decide which branch a permission guard renders.

    Order:
    1. no requirement -> allowed, even when logged out
    2. no principal -> nothing / fallback
    3. single token -> has_permission; list -> any/all by `require_all`
    4. allowed -> allowed content; denied -> nothing / fallback
    """
    if _is_unrestricted(requirement):
        return GuardDecision.RENDER_ALLOWED

    if principal is None:
        return _denied(hide_on_no_permission)

    if isinstance(requirement, str):
        allowed = has_permission(principal, requirement)
    elif require_all:
        allowed = has_all_permissions(principal, requirement)
    else:
        allowed = has_any_permission(principal, requirement)

    if allowed:
        return GuardDecision.RENDER_ALLOWED
    return _denied(hide_on_no_permission)


def render_guard(
    principal: Principal | None,
    requirement: PermissionRequirement,
    allowed: T,
    fallback: T | None = None,
    *,
    require_all: bool = False,
    hide_on_no_permission: bool = False,
) -> T | None:
    """Return `allowed`, `fallback` or None; a missing fallback renders nothing."""
    decision = evaluate_guard(principal, requirement, require_all, hide_on_no_permission)
    if decision is GuardDecision.RENDER_ALLOWED:
        return allowed
    if decision is GuardDecision.RENDER_FALLBACK:
        return fallback
    return None


def with_permission(
    requirement: PermissionRequirement,
    require_all: bool = False,
) -> Callable[[Callable[..., T]], Callable[..., T | None]]:
    """
    Wrap a render callable whose first argument is the principal.

    Denied calls return None without invoking the wrapped callable.
    """

    def decorator(render: Callable[..., T]) -> Callable[..., T | None]:
        @functools.wraps(render)
        def wrapper(principal: Principal | None, *args: Any, **kwargs: Any) -> T | None:
            decision = evaluate_guard(
                principal, requirement, require_all, hide_on_no_permission=True
            )
            if decision is not GuardDecision.RENDER_ALLOWED:
                return None
            return render(principal, *args, **kwargs)

        return wrapper

    return decorator


def evaluate_route_access(
    principal: Principal | None,
    require_manager_or_above: bool = False,
) -> RouteDecision:
    if principal is None:
        return RouteDecision.REDIRECT_LOGIN

    if require_manager_or_above:
        # Role data arrives after the token; wait rather than bounce the user.
        if not principal.email or not principal.role_names:
            return RouteDecision.SHOW_LOADING
        if not is_manager_or_above(principal.role_names):
            log.info(
                "route.insufficient_role id=%s roles=%s",
                principal.id,
                sorted(principal.role_names),
            )
            return RouteDecision.REDIRECT_HOME

    return RouteDecision.RENDER_ROUTE
