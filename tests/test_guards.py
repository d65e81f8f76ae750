"""Tests for authentication, permission and identifier checks ahead of the handlers."""

from __future__ import annotations

import time
import uuid

import jwt
import pytest

from profile_service.config import get_settings
from profile_service.errors import InvalidIdentifier
from profile_service.security.guards import Principal
from profile_service.security.identifiers import validate_identifier


def test_missing_token_is_rejected(api_client, repository):
    user = repository.add()

    resp = api_client.get(f"/user/profil/{user.user_id}")

    assert resp.status_code == 401
    assert resp.json() == {"statusCode": 401, "error": "Unauthorized", "message": ["Token not supplied"]}
    assert repository.calls == []


def test_tampered_token_is_rejected(api_client, repository, admin_headers):
    user = repository.add()
    headers = {"Authorization": admin_headers["Authorization"] + "x"}

    resp = api_client.delete(f"/user/profil/{user.user_id}", headers=headers)

    assert resp.status_code == 401
    assert resp.json()["message"] == ["Invalid token"]
    assert repository.users[user.user_id].is_deleted is False


def test_expired_token_is_rejected(api_client, repository):
    settings = get_settings()
    now = int(time.time())
    token = jwt.encode(
        {"iss": settings.jwt_issuer, "sub": "admin-1", "permissions": ["user:admin"], "iat": now - 120, "exp": now - 60},
        settings.jwt_secret,
        algorithm="HS256",
    )
    user = repository.add()

    resp = api_client.get(f"/user/profil/{user.user_id}", headers={"Authorization": f"Bearer {token}"})

    assert resp.status_code == 401


def test_missing_permission_is_forbidden(api_client, repository, auth_headers):
    user = repository.add()

    resp = api_client.delete(f"/user/profil/{user.user_id}", headers=auth_headers("user:read"))

    assert resp.status_code == 403
    assert resp.json()["error"] == "Forbidden"
    assert repository.users[user.user_id].is_deleted is False


@pytest.mark.parametrize(
    "method, path_suffix, permission, body",
    [
        ("GET", "{id}", "user:read", None),
        ("DELETE", "{id}", "user:delete", None),
        ("PUT", "{id}", "user:update", {"country": "NL"}),
    ],
)
def test_route_accepts_its_declared_permission(api_client, repository, auth_headers, method, path_suffix, permission, body):
    user = repository.add()
    path = "/user/profil/" + path_suffix.format(id=user.user_id)

    resp = api_client.request(method, path, json=body, headers=auth_headers(permission))

    assert resp.status_code == 200


def test_status_route_requires_update_status_permission(api_client, repository, auth_headers):
    user = repository.add()
    payload = {"userId": user.user_id, "status": True}

    denied = api_client.put("/user/profil/status", json=payload, headers=auth_headers("user:update"))
    allowed = api_client.put("/user/profil/status", json=payload, headers=auth_headers("user:update-status"))

    assert denied.status_code == 403
    assert allowed.status_code == 200


def test_invalid_path_identifier_is_rejected(api_client, repository, admin_headers):
    resp = api_client.get("/user/profil/u9", headers=admin_headers)

    assert resp.status_code == 400
    assert resp.json() == {"statusCode": 400, "error": "BadRequest", "message": ["Invalid identifier"]}
    assert repository.calls == []


def test_authentication_runs_before_identifier_validation(api_client):
    resp = api_client.get("/user/profil/not-an-id")

    assert resp.status_code == 401


def test_validate_identifier_normalises_case():
    raw = str(uuid.uuid4()).upper()
    assert validate_identifier(raw) == raw.lower()


@pytest.mark.parametrize("raw", ["", "u1", "0" * 32, "{" + str(uuid.uuid4()) + "}", str(uuid.uuid4())[:-1] + "g"])
def test_validate_identifier_rejects_malformed(raw):
    with pytest.raises(InvalidIdentifier):
        validate_identifier(raw)


def test_admin_permission_satisfies_any_requirement():
    principal = Principal(subject="root", permissions=frozenset({"user:admin"}))
    assert principal.has_permissions(("user:delete", "user:update"))
    assert not Principal(subject="reader", permissions=frozenset({"user:read"})).has_permissions(("user:delete",))
