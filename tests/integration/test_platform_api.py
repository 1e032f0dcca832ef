"""
Integration tests for health, audit log and image upload endpoints.
"""

import pytest
from sqlalchemy.exc import OperationalError

from app.core.database import get_db
from app.services.storage_service import LocalImageStore

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture
def image_store(tmp_path, monkeypatch):
    """Route uploads into a temporary directory."""
    from app.api.v1.endpoints import upload

    store = LocalImageStore(root=str(tmp_path / "uploads"))
    monkeypatch.setattr(upload, "storage_service", store)
    return store


class TestHealth:

    async def test_health(self, client, college):
        response = await client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"]["status"] == "connected"
        assert body["stats"]["colleges"] == 1

    async def test_detailed_health(self, client, college):
        response = await client.get("/health/detailed")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert "system" in body

    @pytest.mark.parametrize("path", ["/health", "/health/detailed"])
    async def test_unreachable_database_hides_driver_error(self, app, client, path):
        class UnreachableSession:
            async def execute(self, *args, **kwargs):
                raise OperationalError(
                    "SELECT 1", {}, Exception("could not connect to db.internal:5432 as cms_admin")
                )

        async def _unreachable_db():
            yield UnreachableSession()

        app.dependency_overrides[get_db] = _unreachable_db

        response = await client.get(path)
        assert response.status_code == 503
        body = response.json()
        assert body["status"] == "unhealthy"
        assert body["database"] == {"status": "disconnected", "error": "Database unreachable"}
        assert "db.internal" not in response.text
        assert "cms_admin" not in response.text

    async def test_root(self, client):
        response = await client.get("/")
        assert response.status_code == 200


class TestAuditLogs:

    async def test_logs_require_admin(self, client, guest_headers):
        response = await client.get("/api/v1/logs", headers=guest_headers)
        assert response.status_code == 403

    async def test_filtering_and_current_user(self, client, admin_headers, admin_user, college):
        await client.put(
            f"/api/v1/collage/{college.id}/theme",
            json={"theme": {"primaryColor": "#000"}},
            headers=admin_headers,
        )
        await client.post(
            f"/api/v1/collage/{college.id}/faq/items",
            json={"question": "Q?", "answer": "A"},
            headers=admin_headers,
        )

        filtered = (await client.get(
            "/api/v1/logs", params={"action": "UPDATE_THEME"}, headers=admin_headers
        )).json()
        assert [log["action"] for log in filtered["logs"]] == ["UPDATE_THEME"]
        assert filtered["logs"][0]["entityId"] == str(college.id)
        assert filtered["logs"][0]["userId"] == str(admin_user.id)

        mine = (await client.get("/api/v1/logs/current", headers=admin_headers)).json()
        assert mine["pagination"]["total"] == 2

    async def test_failed_request_is_not_audited(self, client, admin_headers, college):
        await client.post(
            f"/api/v1/collage/{college.id}/faq/items", json={"question": "Q?"}, headers=admin_headers
        )
        logs = (await client.get("/api/v1/logs", headers=admin_headers)).json()
        assert logs["logs"] == []


class TestUploads:

    async def test_upload_image(self, client, admin_headers, image_store, tmp_path):
        response = await client.post(
            "/api/v1/upload",
            files={"file": ("logo.png", PNG, "image/png")},
            data={"folder": "colleges/eng"},
            headers=admin_headers,
        )
        assert response.status_code == 201
        body = response.json()
        assert body["path"].startswith("colleges/eng/")
        assert body["url"] == f"/uploads/{body['path']}"
        assert (tmp_path / "uploads" / body["path"]).exists()

    async def test_rejects_non_image(self, client, admin_headers, image_store):
        response = await client.post(
            "/api/v1/upload",
            files={"file": ("notes.pdf", b"%PDF-1.4", "application/pdf")},
            headers=admin_headers,
        )
        assert response.status_code == 400

    async def test_gallery_upload(self, client, admin_headers, image_store):
        response = await client.post(
            "/api/v1/upload/gallery",
            files=[
                ("files", ("a.png", PNG, "image/png")),
                ("files", ("b.png", PNG, "image/png")),
            ],
            data={"folder": "gallery"},
            headers=admin_headers,
        )
        assert response.status_code == 201
        assert len(response.json()["files"]) == 2

    async def test_delete_rejects_traversal(self, client, admin_headers, image_store):
        response = await client.delete(
            "/api/v1/upload", params={"path": "../secrets.png"}, headers=admin_headers
        )
        assert response.status_code == 400

    async def test_delete(self, client, admin_headers, image_store, tmp_path):
        path = (await client.post(
            "/api/v1/upload",
            files={"file": ("logo.png", PNG, "image/png")},
            headers=admin_headers,
        )).json()["path"]

        response = await client.delete("/api/v1/upload", params={"path": path}, headers=admin_headers)
        assert response.json() == {"message": "File deleted successfully"}
        assert not (tmp_path / "uploads" / path).exists()

    async def test_upload_requires_admin(self, client, guest_headers, image_store):
        response = await client.post(
            "/api/v1/upload",
            files={"file": ("logo.png", PNG, "image/png")},
            headers=guest_headers,
        )
        assert response.status_code == 403
