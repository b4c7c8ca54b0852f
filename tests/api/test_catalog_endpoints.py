# Shared catalog surface exercised through services, plans, products
# and podcast episodes: visibility, soft/hard delete, featured rules,
# reorder and pagination metadata.

from __future__ import annotations

SEO = {
    "service_id": "seo",
    "title": "Posicionamiento SEO",
    "description": "Aparece primero en Google",
    "features": ["Auditoría", "Keywords"],
}


async def test_service_crud_and_soft_delete(client, editor_headers, admin_headers) -> None:
    created = await client.post("/api/servicios", json=SEO, headers=editor_headers)
    assert created.status_code == 201
    assert created.json()["data"]["status"] == "active"
    assert created.json()["data"]["features"] == ["Auditoría", "Keywords"]

    duplicate = await client.post("/api/servicios", json=SEO, headers=editor_headers)
    assert duplicate.status_code == 409
    assert "already exists" in duplicate.json()["error"]
    assert "details" not in duplicate.json()

    updated = await client.put(
        "/api/servicios/seo", json={"title": "SEO Pro", "service_id": "hack"}, headers=editor_headers
    )
    assert updated.status_code == 200
    assert updated.json()["data"]["title"] == "SEO Pro"
    assert updated.json()["data"]["service_id"] == "seo"

    deleted = await client.delete("/api/servicios/seo", headers=editor_headers)
    assert deleted.json()["data"]["status"] == "inactive"

    assert (await client.get("/api/servicios/seo")).status_code == 404
    assert (await client.get("/api/servicios")).json()["data"] == []
    hidden = await client.get(
        "/api/servicios/seo", params={"includeInactive": "true"}, headers=editor_headers
    )
    assert hidden.status_code == 200

    restored = await client.patch(
        "/api/servicios/seo/status", json={"status": "active"}, headers=editor_headers
    )
    assert restored.status_code == 200
    assert (await client.get("/api/servicios/seo")).status_code == 200

    not_admin = await client.delete("/api/servicios/seo/permanent", headers=editor_headers)
    assert not_admin.status_code == 403
    purged = await client.delete("/api/servicios/seo/permanent", headers=admin_headers)
    assert purged.status_code == 200
    after = await client.get(
        "/api/servicios/seo", params={"includeInactive": "true"}, headers=editor_headers
    )
    assert after.status_code == 404


async def test_empty_update_and_bad_status(client, editor_headers) -> None:
    await client.post("/api/servicios", json=SEO, headers=editor_headers)

    empty = await client.put("/api/servicios/seo", json={}, headers=editor_headers)
    assert empty.status_code == 400
    assert empty.json()["error"] == "No valid fields to update"

    bad = await client.patch(
        "/api/servicios/seo/status", json={"status": "borrado"}, headers=editor_headers
    )
    assert bad.status_code == 400

    missing = await client.put("/api/servicios/nada", json={"title": "x"}, headers=editor_headers)
    assert missing.status_code == 404


async def test_business_key_format_is_validated(client, editor_headers) -> None:
    response = await client.post(
        "/api/servicios", json={**SEO, "service_id": "Mi Servicio"}, headers=editor_headers
    )

    assert response.status_code == 400
    assert response.json()["details"][0]["field"] == "service_id"


async def test_list_pagination_metadata(client, editor_headers) -> None:
    for index in range(5):
        await client.post(
            "/api/servicios",
            json={**SEO, "service_id": f"svc-{index}", "display_order": index},
            headers=editor_headers,
        )

    page = await client.get("/api/servicios", params={"page": 3, "limit": 2})
    body = page.json()
    assert body["pagination"] == {"page": 3, "limit": 2, "total": 5, "pages": 3}
    assert [item["service_id"] for item in body["data"]] == ["svc-4"]

    beyond = await client.get("/api/servicios", params={"page": 9, "limit": 2})
    assert beyond.json()["data"] == []
    assert beyond.json()["pagination"]["total"] == 5

    coerced = await client.get("/api/servicios", params={"page": 0, "limit": 1000})
    assert coerced.json()["pagination"]["page"] == 1
    assert coerced.json()["pagination"]["limit"] == 100


async def test_reorder_is_all_or_nothing(client, editor_headers) -> None:
    for key in ("a", "b"):
        await client.post("/api/servicios", json={**SEO, "service_id": key}, headers=editor_headers)

    failed = await client.post(
        "/api/servicios/reorder",
        json={"order": [{"service_id": "a", "order": 7}, {"service_id": "missing", "order": 1}]},
        headers=editor_headers,
    )
    assert failed.status_code == 404
    assert (await client.get("/api/servicios/a")).json()["data"]["display_order"] == 0

    applied = await client.post(
        "/api/servicios/reorder",
        json={"order": [{"service_id": "a", "order": 2}, {"service_id": "b", "order": 1}]},
        headers=editor_headers,
    )
    assert applied.json()["data"] == {"updated": 2}
    listed = await client.get("/api/servicios")
    assert [item["service_id"] for item in listed.json()["data"]] == ["b", "a"]


async def test_only_one_featured_plan(client, editor_headers) -> None:
    basic = {"plan_id": "basico", "name": "Básico", "price": 199, "is_featured": True}
    pro = {"plan_id": "pro", "name": "Pro", "price": 499}
    await client.post("/api/planes", json=basic, headers=editor_headers)
    await client.post("/api/planes", json=pro, headers=editor_headers)

    featured = await client.get("/api/planes/featured")
    assert featured.json()["data"]["plan_id"] == "basico"

    toggled = await client.patch(
        "/api/planes/pro/featured", json={"featured": True}, headers=editor_headers
    )
    assert toggled.status_code == 200

    assert (await client.get("/api/planes/featured")).json()["data"]["plan_id"] == "pro"
    assert (await client.get("/api/planes/basico")).json()["data"]["is_featured"] is False

    via_update = await client.put(
        "/api/planes/basico", json={"is_featured": True}, headers=editor_headers
    )
    assert via_update.status_code == 200
    flags = {
        plan["plan_id"]: plan["is_featured"]
        for plan in (await client.get("/api/planes")).json()["data"]
    }
    assert flags == {"basico": True, "pro": False}


async def test_no_featured_plan_is_404(client) -> None:
    assert (await client.get("/api/planes/featured")).status_code == 404


async def test_products_by_category_and_search(client, editor_headers) -> None:
    category = await client.post(
        "/api/tienda/categorias",
        json={"slug": "cursos", "name": "Cursos"},
        headers=editor_headers,
    )
    category_id = category.json()["data"]["id"]

    await client.post(
        "/api/tienda/productos",
        json={
            "product_id": "curso-ads",
            "name": "Curso de Facebook Ads",
            "price": 89.9,
            "discount_price": 59.9,
            "category_id": category_id,
            "is_featured": True,
        },
        headers=editor_headers,
    )
    await client.post(
        "/api/tienda/productos",
        json={"product_id": "plantillas", "name": "Plantillas Canva", "price": 19, "is_featured": True},
        headers=editor_headers,
    )

    in_category = await client.get("/api/tienda/categorias/cursos/productos")
    assert [p["product_id"] for p in in_category.json()["data"]] == ["curso-ads"]
    assert in_category.json()["data"][0]["discount_price"] == 59.9

    assert (await client.get("/api/tienda/categorias/nada/productos")).status_code == 404

    found = await client.get("/api/tienda/productos/search", params={"q": "canva"})
    assert [p["product_id"] for p in found.json()["data"]] == ["plantillas"]

    featured = await client.get("/api/tienda/productos/featured")
    assert {p["product_id"] for p in featured.json()["data"]} == {"curso-ads", "plantillas"}


async def test_episode_visibility_and_views(client, editor_headers) -> None:
    created = await client.post(
        "/api/blog/episodios",
        json={
            "episode_id": "ep-1",
            "episode_number": 1,
            "title": "Marca personal",
            "publish_date": "2024-05-01",
            "topics": ["Branding", "Redes"],
        },
        headers=editor_headers,
    )
    assert created.json()["data"]["status"] == "draft"

    assert (await client.get("/api/blog/episodios")).json()["data"] == []
    assert (await client.post("/api/blog/episodios/ep-1/view")).status_code == 404

    await client.patch(
        "/api/blog/episodios/ep-1/status", json={"status": "published"}, headers=editor_headers
    )

    first = await client.post("/api/blog/episodios/ep-1/view")
    second = await client.post("/api/blog/episodios/ep-1/view")
    assert first.json()["data"]["views_count"] == 1
    assert second.json()["data"]["views_count"] == 2

    by_topic = await client.get("/api/blog/episodios", params={"topic": "branding"})
    assert [e["episode_id"] for e in by_topic.json()["data"]] == ["ep-1"]
    other_topic = await client.get("/api/blog/episodios", params={"topic": "seo"})
    assert other_topic.json()["data"] == []
    wildcard_topic = await client.get("/api/blog/episodios", params={"topic": "%"})
    assert wildcard_topic.json()["data"] == []

    stats = await client.get("/api/blog/episodios/estadisticas", headers=editor_headers)
    assert stats.json()["data"]["published"] == 1
    assert stats.json()["data"]["total_views"] == 2

    archived = await client.delete("/api/blog/episodios/ep-1", headers=editor_headers)
    assert archived.json()["data"]["status"] == "archived"
    assert (await client.get("/api/blog/episodios/recent")).json()["data"] == []
