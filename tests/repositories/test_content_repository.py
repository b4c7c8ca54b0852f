"""Content sections: upsert, nested path updates and visibility."""

from __future__ import annotations

import pytest

from app.core.errors import NotFoundError, ValidationError
from app.repositories import content


async def test_upsert_inserts_then_replaces(db) -> None:
    first = await content.upsert(db, section_key="inicio", content_data={"a": 1})
    second = await content.upsert(db, section_key="inicio", content_data={"b": 2}, status="draft")

    assert second.id == first.id
    assert second.content_data == {"b": 2}
    assert second.status == "draft"
    assert second.section_name == "Página de Inicio"


async def test_unknown_section_name_falls_back_to_key(db) -> None:
    section = await content.upsert(db, section_key="promo-verano", content_data={})

    assert section.section_name == "promo-verano"


async def test_update_partial_sets_nested_value_only(db) -> None:
    await content.upsert(
        db,
        section_key="inicio",
        content_data={"hero": {"titulo": "A", "subtitulo": "B"}, "cta": "Contáctanos"},
    )

    updated = await content.update_partial(db, "inicio", "hero.titulo", "Nuevo")

    assert updated.content_data == {
        "hero": {"titulo": "Nuevo", "subtitulo": "B"},
        "cta": "Contáctanos",
    }


async def test_update_partial_replaces_scalar_intermediate(db) -> None:
    await content.upsert(db, section_key="footer", content_data={"redes": "ninguna"})

    updated = await content.update_partial(db, "footer", "redes.facebook", {"url": "fb.com/boost"})

    assert updated.content_data == {"redes": {"facebook": {"url": "fb.com/boost"}}}


async def test_update_partial_on_missing_section(db) -> None:
    with pytest.raises(NotFoundError):
        await content.update_partial(db, "fantasma", "a.b", 1)


@pytest.mark.parametrize("path", ["", ".", "hero.", ".hero", "hero..titulo"])
def test_parse_path_rejects_empty_segments(path: str) -> None:
    with pytest.raises(ValidationError):
        content.parse_path(path)


def test_parse_path_splits_on_dots() -> None:
    assert content.parse_path("hero.botones.primario") == ["hero", "botones", "primario"]


async def test_unpublished_sections_are_hidden_by_default(db) -> None:
    await content.upsert(db, section_key="nosotros", content_data={}, status="draft")

    assert await content.get_by_section_key(db, "nosotros") is None
    assert await content.get_by_section_key(db, "nosotros", include_unpublished=True) is not None


async def test_replace_keeps_unspecified_fields(db) -> None:
    await content.upsert(db, section_key="contacto", content_data={"email": "a@b.co"})

    replaced = await content.replace(db, "contacto", section_name="Contáctanos")

    assert replaced.section_name == "Contáctanos"
    assert replaced.content_data == {"email": "a@b.co"}

    with pytest.raises(NotFoundError):
        await content.replace(db, "fantasma", content_data={})


async def test_invalid_status_is_rejected(db) -> None:
    with pytest.raises(ValidationError):
        await content.upsert(db, section_key="inicio", content_data={}, status="hidden")
