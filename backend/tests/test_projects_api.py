"""
Gallery API — Endpoint Tests
==============================

What:  Exercises the three /api routes end to end over ASGI.
How:   MongoDB and Cloudinary are replaced by the in-memory doubles from
       conftest.py; everything else (routing, form parsing, ProjectService,
       exception handlers, middleware) is the real application.

What we test:
    ✅ Listing (empty, newest-first ordering, round trip of created records)
    ✅ Upload (201 body, 400 without file, 400 bad format, 500 on schema failure)
    ✅ Delete (404 unknown id, remote destroy before metadata delete, failures)
    ✅ Cross-cutting: CORS header, X-Request-ID, error body shape, static files
"""

from datetime import datetime

import pytest
from httpx import ASGITransport, AsyncClient

from app.config import Settings
from app.main import create_app


def _parse_ts(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


async def _upload(client, image_bytes, title="Sunset", category="Landscape", filename="valid.jpg"):
    return await client.post(
        "/api/upload",
        files={"image": (filename, image_bytes, "image/jpeg")},
        data={"title": title, "category": category},
    )


class TestListProjects:
    """GET /api/projects"""

    @pytest.mark.asyncio
    async def test_empty_store_returns_empty_array(self, test_client):
        response = await test_client.get("/api/projects")
        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_projects_are_returned_newest_first(self, test_client, sample_image_bytes):
        created_ids = []
        for title in ("First", "Second", "Third"):
            response = await _upload(test_client, sample_image_bytes, title=title)
            assert response.status_code == 201
            created_ids.append(response.json()["id"])

        response = await test_client.get("/api/projects")
        body = response.json()

        assert [p["id"] for p in body] == list(reversed(created_ids))
        timestamps = [_parse_ts(p["createdAt"]) for p in body]
        assert timestamps == sorted(timestamps, reverse=True)

    @pytest.mark.asyncio
    async def test_created_record_round_trips_through_list(self, test_client, sample_image_bytes):
        created = (await _upload(test_client, sample_image_bytes)).json()

        listed = (await test_client.get("/api/projects")).json()

        assert listed == [created]

    @pytest.mark.asyncio
    async def test_store_failure_returns_500_with_message(self, test_client, project_store):
        from app.exceptions import DatabaseError

        async def broken():
            raise DatabaseError(message="connection closed")

        project_store.find_all_sorted_by_created_at_desc = broken

        response = await test_client.get("/api/projects")
        assert response.status_code == 500
        assert response.json() == {"error": "connection closed"}


class TestUploadProject:
    """POST /api/upload"""

    @pytest.mark.asyncio
    async def test_upload_creates_project(self, test_client, asset_service, sample_image_bytes):
        response = await _upload(test_client, sample_image_bytes)

        assert response.status_code == 201
        body = response.json()
        assert body["title"] == "Sunset"
        assert body["category"] == "Landscape"
        assert body["imageUrl"]
        assert body["publicId"]
        assert len(body["id"]) == 24
        assert set(body) == {"id", "title", "category", "imageUrl", "publicId", "createdAt"}

    @pytest.mark.asyncio
    async def test_image_url_is_the_asset_store_url(self, test_client, asset_service, sample_image_bytes):
        body = (await _upload(test_client, sample_image_bytes)).json()

        assert len(asset_service.uploads) == 1
        upload = asset_service.uploads[0]
        assert upload["content"] == sample_image_bytes
        assert body["publicId"] == upload["public_id"]
        assert body["imageUrl"] == (
            f"https://res.cloudinary.com/test-cloud/image/upload/v1/{upload['public_id']}.jpg"
        )

    @pytest.mark.asyncio
    async def test_created_at_is_non_decreasing(self, test_client, sample_image_bytes):
        first = (await _upload(test_client, sample_image_bytes)).json()
        second = (await _upload(test_client, sample_image_bytes)).json()

        assert _parse_ts(second["createdAt"]) >= _parse_ts(first["createdAt"])

    @pytest.mark.asyncio
    async def test_missing_file_returns_400_without_side_effects(
        self, test_client, project_store, asset_service
    ):
        response = await test_client.post(
            "/api/upload",
            data={"title": "Sunset", "category": "Landscape"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "No image file uploaded"}
        assert asset_service.uploads == []
        assert project_store.records == {}

    @pytest.mark.asyncio
    async def test_unsupported_format_returns_400(
        self, test_client, project_store, asset_service, sample_image_bytes
    ):
        response = await _upload(test_client, sample_image_bytes, filename="animation.gif")

        assert response.status_code == 400
        assert "not supported" in response.json()["error"]
        assert asset_service.uploads == []
        assert project_store.records == {}

    @pytest.mark.asyncio
    async def test_missing_title_is_a_save_failure(
        self, test_client, project_store, asset_service, sample_image_bytes
    ):
        response = await test_client.post(
            "/api/upload",
            files={"image": ("valid.jpg", sample_image_bytes, "image/jpeg")},
            data={"category": "Landscape"},
        )

        assert response.status_code == 500
        assert response.json() == {
            "error": "Project validation failed: title: Path `title` is required."
        }
        assert project_store.records == {}

    @pytest.mark.asyncio
    async def test_failed_save_discards_uploaded_image(
        self, test_client, asset_service, sample_image_bytes
    ):
        await test_client.post(
            "/api/upload",
            files={"image": ("valid.jpg", sample_image_bytes, "image/jpeg")},
            data={"title": "", "category": ""},
        )

        assert len(asset_service.uploads) == 1
        assert asset_service.deleted == [asset_service.uploads[0]["public_id"]]


class TestDeleteProject:
    """DELETE /api/projects/{id}"""

    @pytest.mark.asyncio
    async def test_unknown_id_returns_404(self, test_client, project_store, sample_image_bytes):
        await _upload(test_client, sample_image_bytes)
        before = dict(project_store.records)

        response = await test_client.delete("/api/projects/000000000000000000000000")

        assert response.status_code == 404
        assert response.json() == {"error": "Project not found"}
        assert project_store.records == before

    @pytest.mark.asyncio
    async def test_delete_removes_image_then_record(
        self, test_client, asset_service, sample_image_bytes
    ):
        created = (await _upload(test_client, sample_image_bytes)).json()

        response = await test_client.delete(f"/api/projects/{created['id']}")

        assert response.status_code == 200
        assert response.json() == {"message": "Project deleted successfully"}
        assert asset_service.deleted == [created["publicId"]]
        assert (await test_client.get("/api/projects")).json() == []

    @pytest.mark.asyncio
    async def test_remote_failure_keeps_record(
        self, test_client, asset_service, project_store, sample_image_bytes
    ):
        created = (await _upload(test_client, sample_image_bytes)).json()
        asset_service.fail_delete = True

        response = await test_client.delete(f"/api/projects/{created['id']}")

        assert response.status_code == 500
        assert response.json() == {"error": "Error: connect ECONNREFUSED api.cloudinary.com"}
        assert len(project_store.records) == 1

    @pytest.mark.asyncio
    async def test_record_without_public_id_skips_remote_delete(
        self, test_client, asset_service, project_store
    ):
        project = await project_store.create(
            title="Legacy",
            category="Archive",
            image_url="https://example.test/legacy.jpg",
            public_id=None,
        )

        response = await test_client.delete(f"/api/projects/{project.id}")

        assert response.status_code == 200
        assert asset_service.deleted == []
        assert project_store.records == {}

    @pytest.mark.asyncio
    async def test_malformed_id_returns_500(self, test_client, asset_service):
        response = await test_client.delete("/api/projects/not-an-object-id")

        assert response.status_code == 500
        assert "not-an-object-id" in response.json()["error"]
        assert asset_service.deleted == []


class TestCrossCutting:
    """Middleware, error shape, and static files."""

    @pytest.mark.asyncio
    async def test_cors_allows_any_origin(self, test_client):
        response = await test_client.get(
            "/api/projects", headers={"Origin": "https://somewhere.example"}
        )
        assert response.headers["access-control-allow-origin"] == "*"

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, test_client):
        response = await test_client.get("/api/projects", headers={"X-Request-ID": "abc12345"})
        assert response.headers["X-Request-ID"] == "abc12345"

    @pytest.mark.asyncio
    async def test_request_id_is_generated(self, test_client):
        response = await test_client.get("/api/projects")
        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_unknown_api_route_uses_error_shape(self, test_client):
        response = await test_client.get("/api/nothing-here")
        assert response.status_code == 404
        assert response.json() == {"error": "Not Found"}

    @pytest.mark.asyncio
    async def test_docs_are_not_exposed(self, test_client):
        response = await test_client.get("/docs")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_static_files_served_from_root(self, tmp_path):
        (tmp_path / "index.html").write_text("<h1>Gallery</h1>")
        (tmp_path / "app.js").write_text("console.log('gallery');")
        app = create_app(Settings(mongodb_uri="mongodb://localhost/x", static_dir=str(tmp_path)))

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            index = await client.get("/")
            script = await client.get("/app.js")

        assert index.status_code == 200
        assert "Gallery" in index.text
        assert script.status_code == 200
