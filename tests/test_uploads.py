import io
import uuid
from pathlib import Path

import pytest
from fastapi import HTTPException

from relive.config import settings
from relive.services.storage_service import media_type_for, resolve_media_path


def test_upload_without_memory_returns_url(client, auth_headers, test_user):
    response = client.post(
        "/api/v1/upload",
        files={"file": ("beach.JPG", io.BytesIO(b"fake-jpeg-bytes"), "image/jpeg")},
        headers=auth_headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["media"] is None
    assert data["path"].startswith(f"{test_user.id}/temp/")
    assert data["path"].endswith(".jpg")
    assert data["url"] == f"{settings.MEDIA_BASE_URL}/{data['path']}"

    served = client.get(f"/api/v1/media/{data['path']}")
    assert served.status_code == 200
    assert served.content == b"fake-jpeg-bytes"
    assert served.headers["content-type"].startswith("image/jpeg")


def test_upload_attaches_media_to_memory(client, auth_headers, create_memory):
    memory = create_memory()

    response = client.post(
        "/api/v1/upload",
        files={"file": ("voice.webm", io.BytesIO(b"audio"), "audio/webm")},
        data={"memory_id": str(memory["id"])},
        headers=auth_headers,
    )

    assert response.status_code == 200
    media = response.json()["media"]
    assert media["type"] == "audio"
    assert media["memory_id"] == memory["id"]

    fetched = client.get(f"/api/v1/memories/{memory['id']}", headers=auth_headers).json()["memory"]
    assert [m["id"] for m in fetched["media"]] == [media["id"]]


def test_upload_video_type(client, auth_headers, create_memory):
    memory = create_memory()
    response = client.post(
        "/api/v1/upload",
        files={"file": ("clip.mp4", io.BytesIO(b"video"), "video/mp4")},
        data={"memory_id": str(memory["id"])},
        headers=auth_headers,
    )
    assert response.json()["media"]["type"] == "video"


def test_upload_rejects_other_content_types(client, auth_headers):
    response = client.post(
        "/api/v1/upload",
        files={"file": ("notes.pdf", io.BytesIO(b"%PDF"), "application/pdf")},
        headers=auth_headers,
    )
    assert response.status_code == 400


def test_upload_rejects_large_files(client, auth_headers, monkeypatch):
    monkeypatch.setattr(settings, "MAX_UPLOAD_SIZE", 10)
    response = client.post(
        "/api/v1/upload",
        files={"file": ("big.png", io.BytesIO(b"x" * 11), "image/png")},
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "File is too large"


def test_upload_to_someone_elses_memory(client, create_memory, other_auth_headers):
    memory = create_memory()
    response = client.post(
        "/api/v1/upload",
        files={"file": ("a.png", io.BytesIO(b"png"), "image/png")},
        data={"memory_id": str(memory["id"])},
        headers=other_auth_headers,
    )
    assert response.status_code == 404


def test_upload_requires_auth(client):
    response = client.post(
        "/api/v1/upload",
        files={"file": ("a.png", io.BytesIO(b"png"), "image/png")},
    )
    assert response.status_code == 401


def test_media_route_blocks_traversal(client):
    assert client.get("/api/v1/media/..%2F..%2Fetc%2Fpasswd").status_code == 403


def test_resolve_media_path_refuses_existing_file_outside_upload_dir():
    outside = Path(settings.UPLOAD_DIR).resolve().parent / f"outside-{uuid.uuid4().hex}.txt"
    outside.write_text("secret")
    try:
        with pytest.raises(HTTPException) as exc_info:
            resolve_media_path(f"../{outside.name}")
        assert exc_info.value.status_code == 403
    finally:
        outside.unlink()


def test_media_route_missing_file(client):
    assert client.get("/api/v1/media/1/temp/missing.jpg").status_code == 404


def test_upload_rejects_extension_outside_declared_type(client, auth_headers):
    response = client.post(
        "/api/v1/upload",
        files={"file": ("evil.html", io.BytesIO(b"<script>alert(1)</script>"), "image/png")},
        headers=auth_headers,
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "File extension is not allowed for image uploads"


def test_upload_rejects_audio_extension_declared_as_video(client, auth_headers):
    response = client.post(
        "/api/v1/upload",
        files={"file": ("song.mp3", io.BytesIO(b"mp3"), "video/mp4")},
        headers=auth_headers,
    )
    assert response.status_code == 400


def test_upload_without_extension_uses_declared_type(client, auth_headers):
    response = client.post(
        "/api/v1/upload",
        files={"file": ("snapshot", io.BytesIO(b"png"), "image/png")},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json()["path"].endswith(".png")


def test_served_media_disables_content_sniffing(client, auth_headers):
    path = client.post(
        "/api/v1/upload",
        files={"file": ("a.png", io.BytesIO(b"png"), "image/png")},
        headers=auth_headers,
    ).json()["path"]

    served = client.get(f"/api/v1/media/{path}")
    assert served.headers["x-content-type-options"] == "nosniff"
    assert served.headers["content-type"] == "image/png"


def test_media_type_for_known_families_only():
    assert media_type_for("image/jpeg") == "image"
    assert media_type_for("video/quicktime") == "video"
    assert media_type_for("audio/mpeg") == "audio"
    assert media_type_for("application/pdf") is None
    assert media_type_for(None) is None
