"""Unit tests for app catalog, upload and download routes."""

import re

import pytest
from fastapi.testclient import TestClient

from app import state
from app.main import app
from app.services.blob_store import BlobStore
from app.services.catalog_service import CatalogService
from app.services.record_store import RecordStore
from app.services.session_authority import SessionAuthority


@pytest.fixture(autouse=True)
def _clean_state(tmp_path):
    """Reset shared state and use a temp directory for storage before each test."""
    original_blobs = state.blobs
    original_records = state.records
    original_catalog = state.catalog
    original_sessions = state.sessions

    state.blobs = BlobStore(tmp_path / "data" / "uploads")
    state.records = RecordStore(tmp_path / "data" / "db.json")
    state.catalog = CatalogService(state.records, state.blobs)
    state.sessions = SessionAuthority("admin", "123456")

    yield

    state.blobs = original_blobs
    state.records = original_records
    state.catalog = original_catalog
    state.sessions = original_sessions


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def auth_headers(client) -> dict:
    resp = client.post("/api/login", json={"username": "admin", "password": "123456"})
    return {"Authorization": f"Bearer {resp.json()['data']['token']}"}


def _upload(client, headers, filename: str = "test.apk", content: bytes = b"apk-bytes"):
    return client.post(
        "/api/upload",
        files={"file": (filename, content, "application/vnd.android.package-archive")},
        headers=headers,
    )


class TestListApps:
    """GET /api/apps"""

    def test_empty_list(self, client):
        resp = client.get("/api/apps")
        assert resp.status_code == 200
        assert resp.json() == {"code": 0, "data": []}

    def test_corrupt_store_returns_500(self, client):
        state.records.db_file.parent.mkdir(parents=True)
        state.records.db_file.write_text("not json", encoding="utf-8")

        resp = client.get("/api/apps")
        assert resp.status_code == 500
        assert resp.json()["code"] == 500


class TestAppLifecycle:
    """POST / PUT / DELETE /api/apps"""

    def test_create_update_delete_scenario(self, client, auth_headers):
        resp = client.post("/api/apps", json={"name": "Foo", "version": "1.0"}, headers=auth_headers)
        assert resp.status_code == 200
        body = resp.json()
        assert body["code"] == 0
        app_id = body["data"]["id"]
        assert re.fullmatch(r"\d+", app_id)
        assert body["data"]["name"] == "Foo"

        resp = client.put(f"/api/apps/{app_id}", json={"version": "1.1"}, headers=auth_headers)
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["version"] == "1.1"
        assert data["name"] == "Foo"
        assert data["id"] == app_id

        resp = client.delete(f"/api/apps/{app_id}", headers=auth_headers)
        assert resp.status_code == 200
        assert resp.json() == {"code": 0, "message": "Deleted"}

        ids = [a["id"] for a in client.get("/api/apps").json()["data"]]
        assert app_id not in ids

    def test_created_app_listed_first(self, client, auth_headers):
        client.post("/api/apps", json={"name": "Old"}, headers=auth_headers)
        client.post("/api/apps", json={"name": "New"}, headers=auth_headers)

        names = [a["name"] for a in client.get("/api/apps").json()["data"]]
        assert names == ["New", "Old"]

    def test_create_with_empty_body(self, client, auth_headers):
        resp = client.post("/api/apps", headers=auth_headers)
        assert resp.status_code == 200
        assert set(resp.json()["data"]) == {"id", "updateTime"}

    def test_create_with_non_object_body(self, client, auth_headers):
        resp = client.post("/api/apps", json=["not", "an", "object"], headers=auth_headers)
        assert resp.status_code == 400
        assert resp.json()["code"] == 400

    def test_update_cannot_change_id(self, client, auth_headers):
        app_id = client.post("/api/apps", json={"name": "Foo"}, headers=auth_headers).json()["data"]["id"]

        resp = client.put(f"/api/apps/{app_id}", json={"id": "hijack"}, headers=auth_headers)
        assert resp.json()["data"]["id"] == app_id

    def test_update_unknown_returns_404(self, client, auth_headers):
        resp = client.put("/api/apps/missing", json={"name": "x"}, headers=auth_headers)
        assert resp.status_code == 404
        assert resp.json() == {"code": 404, "message": "App not found"}

    def test_delete_twice_succeeds(self, client, auth_headers):
        app_id = client.post("/api/apps", json={"name": "Foo"}, headers=auth_headers).json()["data"]["id"]

        assert client.delete(f"/api/apps/{app_id}", headers=auth_headers).json()["code"] == 0
        assert client.delete(f"/api/apps/{app_id}", headers=auth_headers).json()["code"] == 0


class TestUpload:
    """POST /api/upload"""

    def test_successful_upload(self, client, auth_headers):
        resp = _upload(client, auth_headers, content=b"0123456789")

        assert resp.status_code == 200
        body = resp.json()
        assert body["code"] == 0
        assert re.fullmatch(r"/uploads/\d+-test\.apk", body["data"]["url"])
        assert body["data"]["size"] == 10
        assert body["data"]["originalName"] == "test.apk"

        # Upload alone does not register a catalog entry
        assert client.get("/api/apps").json()["data"] == []

    def test_non_ascii_filename(self, client, auth_headers):
        resp = _upload(client, auth_headers, filename="应用.apk")

        data = resp.json()["data"]
        assert data["originalName"] == "应用.apk"
        assert data["url"].endswith("-应用.apk")

    def test_long_non_ascii_filename(self, client, auth_headers):
        name = "应" * 90 + ".apk"
        resp = _upload(client, auth_headers, filename=name)

        assert resp.status_code == 200
        assert resp.json()["data"]["originalName"] == name

    def test_missing_file_returns_400(self, client, auth_headers):
        resp = client.post("/api/upload", data={"other": "x"}, headers=auth_headers)

        assert resp.status_code == 400
        assert resp.json() == {"code": 400, "message": "No file uploaded"}

    def test_upload_requires_token(self, client):
        resp = _upload(client, {})

        assert resp.status_code == 401
        assert resp.json()["message"] == "No token provided"
        assert not state.blobs.uploads_dir.exists()


class TestDownload:
    """GET /uploads/{filename}"""

    def test_download_uploaded_file(self, client, auth_headers):
        url = _upload(client, auth_headers, content=b"payload").json()["data"]["url"]

        resp = client.get(url)
        assert resp.status_code == 200
        assert resp.content == b"payload"
        assert resp.headers["content-type"] == "application/vnd.android.package-archive"
        assert "attachment" not in resp.headers.get("content-disposition", "")

    def test_download_type_follows_extension(self, client, auth_headers):
        url = _upload(client, auth_headers, filename="notes.txt", content=b"hi").json()["data"]["url"]

        resp = client.get(url)
        assert resp.headers["content-type"].startswith("text/plain")

    def test_download_missing_returns_404(self, client):
        resp = client.get("/uploads/nothing.apk")
        assert resp.status_code == 404
        assert resp.json()["code"] == 404

    def test_upload_register_delete_removes_file(self, client, auth_headers):
        url = _upload(client, auth_headers).json()["data"]["url"]
        app_id = client.post(
            "/api/apps", json={"name": "Foo", "downloadUrl": url}, headers=auth_headers
        ).json()["data"]["id"]

        client.delete(f"/api/apps/{app_id}", headers=auth_headers)

        assert client.get(url).status_code == 404
        assert not state.blobs.path_for(url).exists()
