import pytest

import config
from services import storage
from tests.conftest import API

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "UPLOAD_DIR", str(tmp_path))
    return tmp_path


def _upload(client, headers, name="beach.png", content=PNG_BYTES, content_type="image/png", trip_id=None):
    data = {"trip_id": str(trip_id)} if trip_id is not None else {}
    return client.post(f"{API}/media/upload", files={"file": (name, content, content_type)}, data=data,
                       headers=headers)


def test_upload_confirm_and_list_photos(client, auth_headers, make_trip, upload_dir):
    trip = make_trip()
    resp = _upload(client, auth_headers, trip_id=trip["id"])
    assert resp.status_code == 201
    uploaded = resp.json()
    assert uploaded["media_type"] == "image"
    assert uploaded["url"] == f"/api/v1/media/files/{uploaded['filename']}"
    assert (upload_dir / "media" / uploaded["filename"]).read_bytes() == PNG_BYTES

    # unconfirmed uploads are not listed
    assert client.get(f"{API}/trips/{trip['id']}/photos/", headers=auth_headers).json() == []

    resp = client.post(f"{API}/media/confirm",
                       json={"media_id": uploaded["media_id"], "caption": "Sunset", "width": 800, "height": 600},
                       headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["confirmed"] is True
    assert resp.json()["caption"] == "Sunset"

    photos = client.get(f"{API}/trips/{trip['id']}/photos/", headers=auth_headers).json()
    assert [p["id"] for p in photos] == [uploaded["media_id"]]
    assert client.get(f"{API}/stats/", headers=auth_headers).json()["photo_count"] == 1


def test_confirm_can_attach_to_trip(client, auth_headers, make_trip):
    trip = make_trip()
    uploaded = _upload(client, auth_headers).json()

    resp = client.post(f"{API}/media/confirm", json={"media_id": uploaded["media_id"], "trip_id": trip["id"]},
                       headers=auth_headers)
    assert resp.json()["trip_id"] == trip["id"]
    assert len(client.get(f"{API}/trips/{trip['id']}/photos/", headers=auth_headers).json()) == 1


def test_video_is_not_listed_as_photo(client, auth_headers, make_trip):
    trip = make_trip()
    uploaded = _upload(client, auth_headers, name="clip.mp4", content=b"\x00" * 32, content_type="video/mp4",
                       trip_id=trip["id"]).json()
    assert uploaded["media_type"] == "video"
    client.post(f"{API}/media/confirm", json={"media_id": uploaded["media_id"]}, headers=auth_headers)

    assert client.get(f"{API}/trips/{trip['id']}/photos/", headers=auth_headers).json() == []


def test_download_stored_file(client, auth_headers):
    uploaded = _upload(client, auth_headers).json()
    resp = client.get(uploaded["url"])
    assert resp.status_code == 200
    assert resp.content == PNG_BYTES
    assert resp.headers["content-type"] == "image/png"

    assert client.get(f"{API}/media/files/missing.png").status_code == 404


def test_octet_stream_falls_back_to_extension(client, auth_headers):
    resp = _upload(client, auth_headers, name="photo.JPG", content_type="application/octet-stream")
    assert resp.status_code == 201
    assert resp.json()["content_type"] == "image/jpeg"


def test_unsupported_type_is_rejected(client, auth_headers):
    resp = _upload(client, auth_headers, name="notes.txt", content=b"hello", content_type="text/plain")
    assert resp.status_code == 400


def test_too_large_upload_is_rejected(client, auth_headers, monkeypatch):
    monkeypatch.setattr(config, "MAX_UPLOAD_MB", 0.001)
    resp = _upload(client, auth_headers, content=b"\x00" * 2048)
    assert resp.status_code == 413


def test_upload_to_foreign_trip(client, other_headers, make_trip):
    trip = make_trip()
    assert _upload(client, other_headers, trip_id=trip["id"]).status_code == 404


def test_delete_media_removes_file(client, auth_headers, other_headers, upload_dir):
    uploaded = _upload(client, auth_headers).json()
    stored = upload_dir / "media" / uploaded["filename"]

    assert client.delete(f"{API}/media/{uploaded['media_id']}", headers=other_headers).status_code == 404
    assert client.delete(f"{API}/media/{uploaded['media_id']}", headers=auth_headers).status_code == 204
    assert not stored.exists()


def test_file_path_rejects_traversal(upload_dir):
    (upload_dir / "secret.txt").write_text("nope")
    assert storage.file_path("../secret.txt") is None
