"""CatalogRepository invariants checked directly against the store."""

from __future__ import annotations

import uuid

import pytest
from sqlalchemy import select
from sqlalchemy.dialects import postgresql

from app.core.errors import ConflictError, DuplicateKeyError, NotFoundError, ValidationError
from app.db.models import Plan, Service
from app.repositories import plans, services
from app.repositories.base import escape_like, featured_lock

service_repository = services.repository
plan_repository = plans.repository


def service(key: str, **overrides):
    return {
        "service_id": key,
        "title": f"Servicio {key}",
        "description": "Descripción",
        **overrides,
    }


async def test_create_then_get_round_trip(db) -> None:
    await service_repository.create(db, service("seo", features=["a", "b"]))

    found = await service_repository.get_by_key(db, "seo")

    assert found is not None
    assert found.title == "Servicio seo"
    assert found.features == ["a", "b"]
    assert found.status == "active"


async def test_missing_required_fields(db) -> None:
    with pytest.raises(ValidationError) as excinfo:
        await service_repository.create(db, {"service_id": "seo"})

    assert excinfo.value.details == {"missing": ["description", "title"]}


async def test_duplicate_key_raises_conflict_and_keeps_session_usable(db) -> None:
    await service_repository.create(db, service("seo"))

    with pytest.raises(DuplicateKeyError) as excinfo:
        await service_repository.create(db, service("seo"))

    assert excinfo.value.status_code == 409
    assert "already exists" in excinfo.value.message

    await service_repository.create(db, service("ads"))
    assert (await service_repository.list(db)).total == 2


async def test_other_unique_violation_is_not_reported_as_duplicate_key(db, monkeypatch) -> None:
    await plan_repository.create(db, {"plan_id": "pro", "name": "Pro", "price": 499, "is_featured": True})

    async def keep_current_featured(db, except_key):
        return None

    monkeypatch.setattr(plan_repository, "_clear_featured", keep_current_featured)

    with pytest.raises(ConflictError) as excinfo:
        await plan_repository.create(
            db, {"plan_id": "elite", "name": "Elite", "price": 999, "is_featured": True}
        )

    assert not isinstance(excinfo.value, DuplicateKeyError)
    assert "already exists" not in excinfo.value.message
    assert await plan_repository.get_by_key(db, "elite", include_hidden=True) is None


async def test_get_by_id_hides_inactive_rows_unless_asked(db) -> None:
    created = await service_repository.create(db, service("seo"))
    record_id = created.id

    found = await service_repository.get_by_id(db, record_id)
    assert found is not None
    assert found.service_id == "seo"

    await service_repository.soft_delete(db, "seo")

    assert await service_repository.get_by_id(db, record_id) is None
    hidden = await service_repository.get_by_id(db, record_id, include_hidden=True)
    assert hidden is not None
    assert hidden.status == "inactive"
    assert await service_repository.get_by_id(db, uuid.uuid4(), include_hidden=True) is None


async def test_update_ignores_unknown_and_key_fields(db) -> None:
    await service_repository.create(db, service("seo"))

    with pytest.raises(ValidationError):
        await service_repository.update(db, "seo", {"service_id": "otro", "bogus": 1})

    updated = await service_repository.update(db, "seo", {"title": "Nuevo", "bogus": 1})
    assert updated.title == "Nuevo"
    assert updated.service_id == "seo"


async def test_invalid_status_is_rejected(db) -> None:
    await service_repository.create(db, service("seo"))

    with pytest.raises(ValidationError):
        await service_repository.change_status(db, "seo", "deleted")
    with pytest.raises(ValidationError):
        await service_repository.update(db, "seo", {"status": "deleted"})


async def test_soft_delete_then_reactivate(db) -> None:
    await service_repository.create(db, service("seo"))

    await service_repository.soft_delete(db, "seo")
    assert await service_repository.get_by_key(db, "seo") is None
    assert await service_repository.get_by_key(db, "seo", include_hidden=True) is not None

    await service_repository.change_status(db, "seo", "active")
    assert await service_repository.get_by_key(db, "seo") is not None


async def test_hard_delete_removes_row(db) -> None:
    await service_repository.create(db, service("seo"))

    await service_repository.hard_delete(db, "seo")

    assert await service_repository.get_by_key(db, "seo", include_hidden=True) is None
    with pytest.raises(NotFoundError):
        await service_repository.hard_delete(db, "seo")


async def test_pagination_over_45_rows(db) -> None:
    for index in range(45):
        await service_repository.create(db, service(f"svc-{index:02d}", display_order=index))

    last_page = await service_repository.list(db, offset=40, limit=10)
    beyond = await service_repository.list(db, offset=50, limit=10)

    assert last_page.total == 45
    assert [item.service_id for item in last_page.items] == [f"svc-{i}" for i in range(40, 45)]
    assert beyond.items == []
    assert beyond.total == 45


async def test_reorder_with_unknown_key_applies_nothing(db) -> None:
    for index, key in enumerate(("a", "b", "c")):
        await service_repository.create(db, service(key, display_order=index))

    with pytest.raises(NotFoundError):
        await service_repository.reorder(db, [("a", 10), ("b", 11), ("missing", 12)])

    rows = (
        await db.execute(
            select(Service.service_id, Service.display_order).order_by(Service.service_id)
        )
    ).all()
    assert [tuple(row) for row in rows] == [("a", 0), ("b", 1), ("c", 2)]


async def test_reorder_empty_list_is_rejected(db) -> None:
    with pytest.raises(ValidationError):
        await service_repository.reorder(db, [])


async def test_at_most_one_featured_plan(db) -> None:
    await plan_repository.create(db, {"plan_id": "basico", "name": "Básico", "price": 199, "is_featured": True})
    await plan_repository.create(db, {"plan_id": "pro", "name": "Pro", "price": 499, "is_featured": True})
    await plan_repository.create(db, {"plan_id": "elite", "name": "Elite", "price": 999})

    await plan_repository.set_featured(db, "elite", True)

    featured = (
        await db.execute(select(Plan.plan_id).where(Plan.is_featured.is_(True)))
    ).scalars().all()
    assert featured == ["elite"]
    assert (await plans.get_featured(db)).plan_id == "elite"


async def test_unfeature_leaves_no_featured_plan(db) -> None:
    await plan_repository.create(db, {"plan_id": "pro", "name": "Pro", "price": 499, "is_featured": True})

    await plan_repository.set_featured(db, "pro", False)

    assert await plans.get_featured(db) is None


async def test_import_falls_back_to_update_on_duplicate(db) -> None:
    await service_repository.create(db, service("seo", title="Viejo"))

    imported = await service_repository.import_records(
        db, [service("seo", title="Actualizado"), service("ads")]
    )

    assert len(imported) == 2
    titles = dict(
        (await db.execute(select(Service.service_id, Service.title))).all()
    )
    assert titles == {"seo": "Actualizado", "ads": "Servicio ads"}


def test_featured_lock_is_a_postgresql_advisory_lock() -> None:
    lock = featured_lock("postgresql", "plans")

    compiled = lock.compile(dialect=postgresql.dialect())
    assert "pg_advisory_xact_lock(hashtext(" in str(compiled)
    assert "plans.featured" in compiled.params.values()
    assert featured_lock("sqlite", "plans") is None


@pytest.mark.parametrize(
    ("term", "escaped"),
    [
        ("seo", "seo"),
        ("50%", "50\\%"),
        ("mi_logo", "mi\\_logo"),
        ("a\\b", "a\\\\b"),
    ],
)
def test_escape_like(term: str, escaped: str) -> None:
    assert escape_like(term) == escaped
