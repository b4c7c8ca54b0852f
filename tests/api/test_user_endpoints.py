# Admin-only user administration.

from __future__ import annotations

from tests.api.support import DEFAULT_PASSWORD


async def test_users_listing_is_admin_only(client, admin_headers, editor_headers, editor_user) -> None:
    assert (await client.get("/api/users", headers=editor_headers)).status_code == 403

    listed = await client.get("/api/users", params={"role": "editor"}, headers=admin_headers)
    assert listed.status_code == 200
    assert [user["email"] for user in listed.json()["data"]] == ["editor@boost.test"]


async def test_soft_delete_blocks_login_and_existing_tokens(
    client, admin_headers, editor_user, editor_headers
) -> None:
    deleted = await client.delete(f"/api/users/{editor_user.id}", headers=admin_headers)
    assert deleted.status_code == 200
    assert deleted.json()["data"]["status"] == "inactive"

    assert (await client.get("/api/auth/me", headers=editor_headers)).status_code == 403
    login = await client.post(
        "/api/auth/login", json={"email": "editor@boost.test", "password": DEFAULT_PASSWORD}
    )
    assert login.status_code == 403

    reactivated = await client.patch(
        f"/api/users/{editor_user.id}/status", json={"status": "active"}, headers=admin_headers
    )
    assert reactivated.status_code == 200
    assert (await client.get("/api/auth/me", headers=editor_headers)).status_code == 200


async def test_admin_cannot_deactivate_self(client, admin_user, admin_headers) -> None:
    response = await client.delete(f"/api/users/{admin_user.id}", headers=admin_headers)

    assert response.status_code == 400


async def test_update_user_role(client, admin_headers, editor_user) -> None:
    response = await client.put(
        f"/api/users/{editor_user.id}", json={"role": "admin"}, headers=admin_headers
    )

    assert response.status_code == 200
    assert response.json()["data"]["role"] == "admin"


async def test_health_endpoint(client) -> None:
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
