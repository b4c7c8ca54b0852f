# Pagination helpers coerce page/limit instead of rejecting them.

from __future__ import annotations

import pytest

from app.api.pagination import (
    PaginationSpec,
    compute_total_pages,
    normalize_pagination,
    ok,
    pagination_meta,
)


@pytest.mark.parametrize(
    ("page", "limit", "expected"),
    [
        (None, None, PaginationSpec(page=1, limit=20)),
        (0, 0, PaginationSpec(page=1, limit=20)),
        (-3, -1, PaginationSpec(page=1, limit=20)),
        (4, 10, PaginationSpec(page=4, limit=10)),
        (2, 500, PaginationSpec(page=2, limit=100)),
    ],
)
def test_normalize_pagination(page, limit, expected) -> None:
    assert normalize_pagination(page, limit) == expected


def test_offset_is_derived_from_page() -> None:
    assert PaginationSpec(page=1, limit=10).offset == 0
    assert PaginationSpec(page=5, limit=10).offset == 40


@pytest.mark.parametrize(
    ("total", "limit", "pages"),
    [(0, 10, 0), (1, 10, 1), (10, 10, 1), (11, 10, 2), (45, 10, 5)],
)
def test_compute_total_pages(total: int, limit: int, pages: int) -> None:
    assert compute_total_pages(total=total, limit=limit) == pages


def test_pagination_meta_shape() -> None:
    assert pagination_meta(PaginationSpec(page=6, limit=10), 45) == {
        "page": 6,
        "limit": 10,
        "total": 45,
        "pages": 5,
    }


def test_ok_envelope_omits_empty_parts() -> None:
    assert ok() == {"success": True}
    assert ok([], message="Listo") == {"success": True, "message": "Listo", "data": []}
