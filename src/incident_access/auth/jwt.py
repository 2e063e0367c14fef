from __future__ import annotations

from typing import Any

from jose import JWTError, jwt

from incident_access.configs.settings import Settings
from incident_access.errors import CredentialDecodeError
from incident_access.configs.logging_config import get_logger
log = get_logger(__name__)


def decode_token(token: str, settings: Settings) -> dict[str, Any]:
    """
    Decode a bearer credential into its claims.

    Notes:
    - HS256 via shared secret when `jwt_verify_signature` is on.
    - With verification off the claims are read as-is, the same way the
      portal reads its stored token client-side.
    """
    try:
        if not settings.jwt_verify_signature:
            claims = jwt.get_unverified_claims(token)
            log.info("jwt.decode ok verified=false uid=%s", claims.get("uid"))
            return claims
        log.info("jwt.decode start alg=%s iss=%s aud=%s", settings.jwt_alg, settings.jwt_issuer, settings.jwt_audience)
        options = {"verify_aud": settings.jwt_audience is not None}
        claims = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_alg],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
            options=options,
        )
        log.info("jwt.decode ok uid=%s role=%s", claims.get("uid"), claims.get("systemRole") or claims.get("role"))
        return claims
    except JWTError as e:
        log.info("JWT decode failed: %s", str(e))
        raise CredentialDecodeError(str(e)) from e
