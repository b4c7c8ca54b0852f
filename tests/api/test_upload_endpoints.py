# Upload endpoints write under a temporary UPLOAD_DIR and keep metadata rows.

from __future__ import annotations

from pathlib import Path

import pytest

from app.core.config import settings

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture(autouse=True)
def upload_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path))
    return tmp_path


async def test_upload_store_list_and_delete(client, upload_dir, editor_headers, admin_headers) -> None:
    created = await client.post(
        "/api/upload",
        files={"file": ("Logo Boost.png", PNG_BYTES, "image/png")},
        data={"alt_text": "Logo"},
        headers=editor_headers,
    )

    assert created.status_code == 201
    upload = created.json()["data"]
    assert upload["folder"] == "imagenes"
    assert upload["original_filename"] == "Logo Boost.png"
    assert upload["filename"].endswith("-logo-boost.png")
    assert upload["file_url"] == f"/uploads/imagenes/{upload['filename']}"
    stored = upload_dir / "imagenes" / upload["filename"]
    assert stored.read_bytes() == PNG_BYTES

    listed = await client.get("/api/upload/list", headers=editor_headers)
    assert listed.json()["pagination"]["total"] == 1

    stats = await client.get("/api/upload/stats", headers=editor_headers)
    assert stats.json()["data"]["total"] == 1
    assert stats.json()["data"]["por_extension"] == {"png": 1}

    denied = await client.delete(f"/api/upload/{upload['id']}", headers=editor_headers)
    assert denied.status_code == 403

    deleted = await client.delete(f"/api/upload/{upload['id']}", headers=admin_headers)
    assert deleted.status_code == 200
    assert not stored.exists()
    assert (await client.get(f"/api/upload/{upload['id']}", headers=editor_headers)).status_code == 404


async def test_upload_rejects_disallowed_type(client, upload_dir, editor_headers) -> None:
    response = await client.post(
        "/api/upload",
        files={"file": ("setup.exe", b"MZ\x90\x00", "application/octet-stream")},
        headers=editor_headers,
    )

    assert response.status_code == 400
    assert list(upload_dir.iterdir()) == []


async def test_upload_rejects_oversized_file(
    client, upload_dir, editor_headers, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(settings, "UPLOAD_MAX_BYTES", 16)

    response = await client.post(
        "/api/upload",
        files={"file": ("big.png", PNG_BYTES, "image/png")},
        headers=editor_headers,
    )

    assert response.status_code == 400
    assert response.json()["details"] == {"max_bytes": 16}


async def test_multiple_upload_and_metadata_update(client, editor_headers) -> None:
    created = await client.post(
        "/api/upload/multiple",
        files=[
            ("files", ("a.png", PNG_BYTES, "image/png")),
            ("files", ("brief.pdf", b"%PDF-1.4 test", "application/pdf")),
        ],
        headers=editor_headers,
    )

    assert created.status_code == 201
    uploads = created.json()["data"]
    assert [item["folder"] for item in uploads] == ["imagenes", "documentos"]

    updated = await client.put(
        f"/api/upload/{uploads[1]['id']}",
        json={"caption": "Brief del cliente"},
        headers=editor_headers,
    )
    assert updated.json()["data"]["caption"] == "Brief del cliente"

    found = await client.get("/api/upload/list", params={"search": "brief"}, headers=editor_headers)
    assert [item["original_filename"] for item in found.json()["data"]] == ["brief.pdf"]


async def test_upload_requires_editor(client, user_headers) -> None:
    response = await client.post(
        "/api/upload",
        files={"file": ("a.png", PNG_BYTES, "image/png")},
        headers=user_headers,
    )

    assert response.status_code == 403
