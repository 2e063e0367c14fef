from __future__ import annotations

import time
from typing import Any, Callable

import pytest
from jose import jwt

from incident_access.configs.settings import Settings

SECRET = "test-secret"


@pytest.fixture()
def settings() -> Settings:
    return Settings(jwt_secret=SECRET, jwt_alg="HS256", jwt_verify_signature=True)


@pytest.fixture()
def make_token() -> Callable[..., str]:
    def _make(secret: str = SECRET, **claims: Any) -> str:
        now = int(time.time())
        payload: dict[str, Any] = {
            "uid": "u-1",
            "username": "jdoe",
            "name": "Jane Doe",
            "email": "jane@example.com",
            "iat": now,
            "exp": now + 3600,
        }
        payload.update(claims)
        return jwt.encode(payload, secret, algorithm="HS256")

    return _make
