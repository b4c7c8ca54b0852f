# Authentication and role-gate behavior of the HTTP surface.
# Missing credentials answer 401; a bad, expired or orphaned token, an
# inactive account, or the wrong role answer 403.

from __future__ import annotations

import uuid

from app.core.constants import UserStatus
from app.core.security import create_access_token
from tests.api.support import DEFAULT_PASSWORD, bearer, set_user_status


async def test_login_returns_token_and_user(client, editor_user) -> None:
    response = await client.post(
        "/api/auth/login", json={"email": "EDITOR@boost.test", "password": DEFAULT_PASSWORD}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"]["token_type"] == "bearer"
    assert body["data"]["user"]["email"] == "editor@boost.test"
    assert "password_hash" not in body["data"]["user"]

    me = await client.get("/api/auth/me", headers=bearer(body["data"]["token"]))
    assert me.status_code == 200
    assert me.json()["data"]["role"] == "editor"
    assert me.json()["data"]["last_login"] is not None


async def test_login_with_wrong_password_is_401(client, editor_user) -> None:
    response = await client.post(
        "/api/auth/login", json={"email": "editor@boost.test", "password": "nope-nope"}
    )

    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Invalid credentials"}


async def test_login_with_unknown_email_is_401(client) -> None:
    response = await client.post(
        "/api/auth/login", json={"email": "ghost@boost.test", "password": DEFAULT_PASSWORD}
    )

    assert response.status_code == 401


async def test_login_of_inactive_user_is_refused(client, session_factory, editor_user) -> None:
    await set_user_status(session_factory, editor_user, UserStatus.INACTIVE)

    response = await client.post(
        "/api/auth/login", json={"email": "editor@boost.test", "password": DEFAULT_PASSWORD}
    )

    assert response.status_code == 403


async def test_missing_token_is_401(client) -> None:
    response = await client.get("/api/auth/me")

    assert response.status_code == 401
    assert response.json()["success"] is False


async def test_garbage_token_is_403(client) -> None:
    response = await client.get("/api/auth/me", headers=bearer("not-a-jwt"))

    assert response.status_code == 403


async def test_expired_token_is_403(client, editor_user) -> None:
    token = create_access_token({"sub": str(editor_user.id)}, expires_minutes=-5)

    response = await client.get("/api/auth/me", headers=bearer(token))

    assert response.status_code == 403


async def test_token_for_unknown_user_is_403(client) -> None:
    token = create_access_token({"sub": str(uuid.uuid4())})

    response = await client.get("/api/auth/me", headers=bearer(token))

    assert response.status_code == 403


async def test_deactivated_user_loses_access_on_next_request(
    client, session_factory, editor_user, editor_headers
) -> None:
    assert (await client.get("/api/auth/me", headers=editor_headers)).status_code == 200

    await set_user_status(session_factory, editor_user, UserStatus.SUSPENDED)

    response = await client.get("/api/auth/me", headers=editor_headers)
    assert response.status_code == 403


async def test_wrong_role_is_403(client, user_headers) -> None:
    response = await client.post(
        "/api/servicios",
        json={"service_id": "seo", "title": "SEO", "description": "Posicionamiento"},
        headers=user_headers,
    )

    assert response.status_code == 403
    assert response.json()["error"] == "You do not have permission to perform this action"


async def test_register_requires_admin(client, editor_headers, admin_headers) -> None:
    payload = {
        "email": "nuevo@boost.test",
        "password": "una-clave-larga",
        "full_name": "Nuevo Editor",
        "role": "editor",
    }

    denied = await client.post("/api/auth/register", json=payload, headers=editor_headers)
    assert denied.status_code == 403

    created = await client.post("/api/auth/register", json=payload, headers=admin_headers)
    assert created.status_code == 201
    assert created.json()["data"]["role"] == "editor"

    duplicate = await client.post("/api/auth/register", json=payload, headers=admin_headers)
    assert duplicate.status_code == 409

    login = await client.post(
        "/api/auth/login", json={"email": payload["email"], "password": payload["password"]}
    )
    assert login.status_code == 200


async def test_register_rejects_short_password(client, admin_headers) -> None:
    response = await client.post(
        "/api/auth/register",
        json={"email": "x@boost.test", "password": "short", "full_name": "X"},
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json()["details"][0]["field"] == "password"


async def test_change_password_checks_current_password(client, editor_headers) -> None:
    wrong = await client.put(
        "/api/auth/change-password",
        json={"current_password": "incorrecta", "new_password": "otra-clave-larga"},
        headers=editor_headers,
    )
    assert wrong.status_code == 401

    changed = await client.put(
        "/api/auth/change-password",
        json={"current_password": DEFAULT_PASSWORD, "new_password": "otra-clave-larga"},
        headers=editor_headers,
    )
    assert changed.status_code == 200

    old_login = await client.post(
        "/api/auth/login", json={"email": "editor@boost.test", "password": DEFAULT_PASSWORD}
    )
    new_login = await client.post(
        "/api/auth/login", json={"email": "editor@boost.test", "password": "otra-clave-larga"}
    )
    assert old_login.status_code == 401
    assert new_login.status_code == 200


async def test_refresh_issues_new_token(client, editor_headers) -> None:
    response = await client.post("/api/auth/refresh", headers=editor_headers)

    assert response.status_code == 200
    token = response.json()["data"]["token"]
    assert (await client.get("/api/auth/me", headers=bearer(token))).status_code == 200
