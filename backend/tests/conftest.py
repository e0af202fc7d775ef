"""
Gallery API — Test Configuration (conftest.py)
================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Tests never reach MongoDB or Cloudinary; the fixtures provide in-memory
       doubles with the same interface as ProjectStore and AssetService.
How:   Environment is set before any `app` import; endpoint tests inject the
       doubles through app.dependency_overrides.

Fixture Hierarchy:
    ├── project_store:       InMemoryProjectStore (same validation as the real one)
    ├── asset_service:       RecordingAssetService (no network, records calls)
    ├── mock_collection:     MagicMock shaped like an AsyncIOMotorCollection
    ├── sample_image_bytes:  Minimal JPEG bytes for upload tests
    └── test_client:         HTTPX AsyncClient wired to the app with both doubles
"""

import os
import tempfile

# Override settings for testing BEFORE any app imports
os.environ["MONGODB_URI"] = "mongodb://localhost:27017/gallery_test"
os.environ["CLOUDINARY_CLOUD_NAME"] = "test-cloud"
os.environ["CLOUDINARY_API_KEY"] = "test-key-not-real"
os.environ["CLOUDINARY_API_SECRET"] = "test-secret-not-real"
os.environ["STATIC_DIR"] = tempfile.mkdtemp(prefix="gallery_static_")
os.environ["LOG_LEVEL"] = "WARNING"

from typing import BinaryIO, Dict, List, Optional  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from bson import ObjectId  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from app.dependencies import get_asset_service, get_project_store  # noqa: E402
from app.exceptions import AssetStorageError  # noqa: E402
from app.models.project import Project  # noqa: E402
from app.services.asset_service import AssetService, UploadedAsset  # noqa: E402
from app.services.project_store import ProjectStore  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Test Doubles
# ══════════════════════════════════════════════════════════════════════════

class InMemoryProjectStore(ProjectStore):
    """
    ProjectStore backed by a dict instead of a motor collection.

    Validation (Project.new) and id casting (_object_id) are the real ones;
    only the storage calls are replaced.
    """

    def __init__(self):
        super().__init__(collection=None)
        self.records: Dict[ObjectId, Project] = {}

    async def find_all_sorted_by_created_at_desc(self) -> List[Project]:
        return sorted(
            self.records.values(),
            key=lambda p: (p.created_at, p.id),
            reverse=True,
        )

    async def create(self, title, category, image_url, public_id=None) -> Project:
        project = Project.new(
            title=title, category=category, image_url=image_url, public_id=public_id
        ).with_id(ObjectId())
        self.records[project.id] = project
        return project

    async def find_by_id(self, project_id: str) -> Optional[Project]:
        return self.records.get(self._object_id(project_id))

    async def delete_by_id(self, project_id: str) -> bool:
        return self.records.pop(self._object_id(project_id), None) is not None


class RecordingAssetService(AssetService):
    """
    AssetService that never calls Cloudinary.

    The local extension check is the real one. Uploads and destroys are
    recorded; set `fail_delete` to make destroys raise AssetStorageError.
    """

    def __init__(self):
        super().__init__(credentials={})
        self.uploads: List[Dict[str, object]] = []
        self.deleted: List[str] = []
        self.fail_delete = False

    async def upload_image(self, file: BinaryIO, filename: Optional[str]) -> UploadedAsset:
        self.validate_extension(filename)
        number = len(self.uploads) + 1
        public_id = f"lented-gallery/test-image-{number}"
        self.uploads.append({"filename": filename, "content": file.read(), "public_id": public_id})
        return UploadedAsset(
            url=f"https://res.cloudinary.com/test-cloud/image/upload/v1/{public_id}.jpg",
            public_id=public_id,
        )

    async def delete_image(self, public_id: str) -> None:
        if self.fail_delete:
            raise AssetStorageError(message="Error: connect ECONNREFUSED api.cloudinary.com")
        self.deleted.append(public_id)


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures (created fresh for each test)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def project_store():
    return InMemoryProjectStore()


@pytest.fixture
def asset_service():
    return RecordingAssetService()


@pytest.fixture
def mock_collection():
    """
    A MagicMock shaped like AsyncIOMotorCollection.

    find() and sort() are synchronous cursor builders in motor; to_list(),
    insert_one(), find_one() and delete_one() are awaited.

    Usage:
        mock_collection.find.return_value.sort.return_value.to_list.return_value = [doc]
    """
    collection = MagicMock()
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.to_list = AsyncMock(return_value=[])
    collection.find.return_value = cursor
    collection.insert_one = AsyncMock()
    collection.find_one = AsyncMock(return_value=None)
    collection.delete_one = AsyncMock()
    return collection


@pytest.fixture
def sample_image_bytes():
    """Minimal JPEG: SOI marker + JFIF header + EOI marker."""
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )


@pytest_asyncio.fixture
async def test_client(project_store, asset_service):
    """
    HTTPX AsyncClient talking to the app over ASGI, with both external
    clients replaced. The lifespan does not run, so no MongoDB client is built.
    """
    from app.main import app

    app.dependency_overrides[get_project_store] = lambda: project_store
    app.dependency_overrides[get_asset_service] = lambda: asset_service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
