from __future__ import annotations

from typing import Any, Mapping, Protocol

from incident_access.auth.jwt import decode_token
from incident_access.auth.models import Principal, TenancyScope
from incident_access.auth.roles import Permission, SystemRole
from incident_access.configs.logging_config import get_logger
from incident_access.configs.settings import Settings
from incident_access.errors import CredentialDecodeError

log = get_logger(__name__)

ACCESS_TOKEN_KEY = "accessToken"


class CredentialProvider(Protocol):
    def get_credential(self, key: str) -> str | None: ...


class InMemoryCredentialStore:
    """Dict-backed credential storage, keyed like the portal's local storage."""

    def __init__(self, initial: Mapping[str, str] | None = None):
        self._items: dict[str, str] = dict(initial or {})

    def get_credential(self, key: str) -> str | None:
        return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove(self, key: str) -> None:
        self._items.pop(key, None)


class HeaderCredentialProvider:
    """
    Serves the bearer token of one request's Authorization header.

    A request carries at most one credential; it is served under `key` only.
    """

    def __init__(self, authorization: str | None, key: str = ACCESS_TOKEN_KEY):
        self._authorization = authorization
        self.key = key

    def get_credential(self, key: str) -> str | None:
        if key != self.key:
            return None
        value = (self._authorization or "").strip()
        scheme, _, token = value.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            return None
        return token.strip()


def _opt_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def _role_names(value: Any) -> frozenset[str]:
    if not isinstance(value, (list, tuple)):
        return frozenset()
    return frozenset(str(v) for v in value if isinstance(v, str) and v)


def principal_from_claims(claims: Mapping[str, Any]) -> Principal:
    username = _opt_str(claims.get("username")) or ""
    uid = _opt_str(claims.get("uid")) or _opt_str(claims.get("sub")) or username
    role_claim = claims.get("systemRole") or claims.get("role")
    return Principal(
        id=uid,
        user_id=username,
        display_name=_opt_str(claims.get("name")) or username,
        email=_opt_str(claims.get("email")) or "",
        system_role=SystemRole.parse(role_claim),
        permissions=Permission.parse_many(claims.get("permissions")),
        tenancy_scope=TenancyScope(
            account_identifier=_opt_str(claims.get("accountIdentifier")),
            org_identifier=_opt_str(claims.get("orgIdentifier")),
            project_identifier=_opt_str(claims.get("projectIdentifier")),
        ),
        role_names=_role_names(claims.get("roleNames")),
    )


def extract_principal(
    provider: CredentialProvider,
    settings: Settings,
    key: str = ACCESS_TOKEN_KEY,
) -> Principal | None:
    """
    Rebuild the principal from the stored credential.

    Returns None when nothing is stored or the credential cannot be decoded;
    both mean "logged out" to callers.
    """
    token = provider.get_credential(key)
    if not token:
        log.info("identity.no_credential key=%s", key)
        return None
    try:
        claims = decode_token(token, settings)
    except CredentialDecodeError as exc:
        log.info("identity.decode_failed key=%s reason=%s", key, exc.reason)
        return None

    principal = principal_from_claims(claims)
    log.info(
        "identity.principal id=%s system_role=%s permissions=%s",
        principal.id,
        principal.system_role.value,
        len(principal.permissions),
    )
    return principal
