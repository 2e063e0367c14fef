from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from incident_access.configs.settings import get_settings
from incident_access.main import create_app


@pytest.fixture()
def client(settings):
    app = create_app()
    app.dependency_overrides[get_settings] = lambda: settings
    return TestClient(app)


def _auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def test_health(client) -> None:
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["data"]["ok"] is True


def test_me_requires_credential(client) -> None:
    resp = client.get("/ext/access/me")
    assert resp.status_code == 401
    assert resp.json()["message"] == "missing authorization header"

    resp = client.get("/ext/access/me", headers=_auth("garbage"))
    assert resp.status_code == 401
    assert resp.json()["message"] == "invalid token"


def test_me_returns_principal(client, make_token) -> None:
    token = make_token(systemRole="RESPONDER", permissions=["READ_INCIDENT"], orgIdentifier="org-1")
    resp = client.get("/ext/access/me", headers=_auth(token))

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["systemRole"] == "RESPONDER"
    assert data["permissions"] == ["READ_INCIDENT"]
    assert data["orgIdentifier"] == "org-1"


def test_check_any_and_all(client, make_token) -> None:
    token = make_token(systemRole="RESPONDER", permissions=["CREATE_INCIDENT", "UPDATE_INCIDENT"])
    body = {"permissions": ["CREATE_INCIDENT", "DELETE_INCIDENT"]}

    resp = client.post("/ext/access/check", json=body, headers=_auth(token))
    assert resp.json()["data"]["allowed"] is True

    resp = client.post("/ext/access/check", json={**body, "require_all": True}, headers=_auth(token))
    assert resp.json()["data"]["allowed"] is False


def test_check_logged_out_is_denied(client) -> None:
    resp = client.post("/ext/access/check", json={"permissions": ["READ_INCIDENT"]})
    assert resp.status_code == 200
    assert resp.json()["data"]["allowed"] is False


def test_check_rejects_unknown_permission(client) -> None:
    resp = client.post("/ext/access/check", json={"permissions": ["FLY"]})
    assert resp.status_code == 422


def test_guard_decisions(client, make_token) -> None:
    observer = make_token(systemRole="OBSERVER", permissions=["READ_INCIDENT"])

    resp = client.post("/ext/access/guard", json={"permission": "CREATE_INCIDENT"}, headers=_auth(observer))
    assert resp.json()["data"]["decision"] == "RENDER_FALLBACK"

    resp = client.post(
        "/ext/access/guard",
        json={"permission": "CREATE_INCIDENT", "hide_on_no_permission": True},
        headers=_auth(observer),
    )
    assert resp.json()["data"]["decision"] == "RENDER_NOTHING"

    resp = client.post("/ext/access/guard", json={})
    assert resp.json()["data"]["decision"] == "RENDER_ALLOWED"


def test_route_decisions(client, make_token) -> None:
    resp = client.post("/ext/access/route", json={"require_manager_or_above": True})
    assert resp.json()["data"] == {"decision": "REDIRECT_LOGIN", "redirect_to": "/login"}

    hydrating = make_token()
    resp = client.post("/ext/access/route", json={"require_manager_or_above": True}, headers=_auth(hydrating))
    assert resp.json()["data"]["decision"] == "SHOW_LOADING"

    viewer = make_token(roleNames=["VIEWER"])
    resp = client.post("/ext/access/route", json={"require_manager_or_above": True}, headers=_auth(viewer))
    assert resp.json()["data"] == {"decision": "REDIRECT_HOME", "redirect_to": "/dashboard"}

    manager = make_token(roleNames=["MANAGER"])
    resp = client.post("/ext/access/route", json={"require_manager_or_above": True}, headers=_auth(manager))
    assert resp.json()["data"] == {"decision": "RENDER_ROUTE", "redirect_to": None}


def test_roles_catalogue(client) -> None:
    resp = client.get("/ext/access/roles")
    roles = {r["role"] for r in resp.json()["data"]["roles"]}
    assert roles == {"ADMIN", "INCIDENT_COMMANDER", "RESPONDER", "OBSERVER", "REPORTER"}


def test_role_lookup_requires_user_permissions(client, make_token) -> None:
    reader = _auth(make_token(permissions=["READ_USER"]))
    assert client.get("/ext/access/roles/admin", headers=reader).json()["data"]["label"] == (
        "Administrator"
    )
    assert client.get("/ext/access/roles/wizard", headers=reader).status_code == 404

    observer = _auth(make_token(permissions=["READ_INCIDENT"]))
    resp = client.get("/ext/access/roles/admin", headers=observer)
    assert resp.status_code == 403
    assert resp.json()["required"] == ["READ_USER", "ASSIGN_ROLE", "SYSTEM_ADMIN"]

    admin = _auth(make_token(systemRole="ADMIN"))
    assert client.get("/ext/access/roles/responder", headers=admin).status_code == 200


def test_matrix_requires_manager_or_above(client, make_token) -> None:
    viewer = make_token(roleNames=["VIEWER"])
    resp = client.get("/ext/access/matrix/roles", headers=_auth(viewer))
    assert resp.status_code == 403

    admin = make_token(roleNames=["ADMIN"])
    resp = client.get("/ext/access/matrix/roles", headers=_auth(admin))
    assert resp.status_code == 200
    assert "SYSTEM_AUDIT" in resp.json()["data"]["ADMIN"]


def test_matrix_build(client, make_token) -> None:
    manager = make_token(roleNames=["MANAGER"])
    body = {
        "users": [{"id": "1", "username": "ann", "role_names": ["RESPONDER"]}],
        "groups": [{"id": "g1", "name": "Ops", "role_names": ["VIEWER"], "user_ids": ["1"]}],
    }
    resp = client.post("/ext/access/matrix", json=body, headers=_auth(manager))

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["users"][0]["effective_roles"] == ["RESPONDER"]
    assert data["groups"][0]["member_count"] == 1


def test_custom_credential_key_still_reads_bearer_header(client, settings, make_token) -> None:
    settings.credential_key = "sessionToken"
    resp = client.get("/ext/access/me", headers=_auth(make_token(systemRole="REPORTER")))

    assert resp.status_code == 200
    assert resp.json()["data"]["systemRole"] == "REPORTER"
