"""
Gallery API — Project Service (Business Logic Orchestrator)
=============================================================

What:  Composes the asset store and the record store into the three API operations.
Why:   Keeps the two-step sequences explicit and independent of HTTP concerns.
How:   Receives both clients at construction (no module-level singletons).
Who:   Built per request by dependencies.get_project_service; called by routes.

Orchestration Flow (POST /api/upload):
    ┌──────────┐    ┌──────────────┐    ┌──────────────┐
    │  Upload  │───▶│  Cloudinary  │───▶│  MongoDB     │
    │  (Route) │    │ upload_image │    │  create      │
    └──────────┘    └──────────────┘    └──────────────┘
    The remote upload always finishes before the record is built. If the save
    fails, the uploaded image is discarded (best effort) and the save error
    propagates.

Orchestration Flow (DELETE /api/projects/{id}):
    find_by_id → (publicId?) destroy image → delete_by_id
    A failed destroy aborts the request; the record stays in place.
"""

import logging
from typing import BinaryIO, List, Optional

from app.exceptions import NotFoundError, ValidationError
from app.schemas.project import MessageResponse, ProjectResponse
from app.services.asset_service import AssetService
from app.services.project_store import ProjectStore

logger = logging.getLogger(__name__)


class ProjectService:
    """
    Business logic layer for project operations.

    Responsibilities:
        - list_projects(): every record, newest first
        - create_project(): upload image, then save metadata
        - delete_project(): destroy image, then delete metadata
    """

    def __init__(self, store: ProjectStore, assets: AssetService):
        self.store = store
        self.assets = assets

    async def list_projects(self) -> List[ProjectResponse]:
        projects = await self.store.find_all_sorted_by_created_at_desc()
        return [ProjectResponse.from_project(project) for project in projects]

    async def create_project(
        self,
        title: Optional[str],
        category: Optional[str],
        file: Optional[BinaryIO],
        filename: Optional[str] = None,
    ) -> ProjectResponse:
        """
        Complete workflow: upload image → save record.

        Args:
            title, category: Form fields as received (presence is checked by the store)
            file:            Uploaded image stream, None if the request had no file
            filename:        Client filename, used for the format check

        Raises:
            ValidationError:   No file, or unsupported format (nothing contacted)
            AssetStorageError: Upload failed (nothing saved)
            DatabaseError:     Save failed (uploaded image discarded)
        """
        if file is None:
            raise ValidationError(message="No image file uploaded", field="image")

        # ── Step 1: Upload to the remote asset store ──────────────────────
        asset = await self.assets.upload_image(file, filename)

        # ── Step 2: Persist the record ────────────────────────────────────
        try:
            project = await self.store.create(
                title=title,
                category=category,
                image_url=asset.url,
                public_id=asset.public_id,
            )
        except Exception:
            logger.warning("Save failed after upload; discarding image %s", asset.public_id)
            await self.assets.discard_image(asset.public_id)
            raise

        logger.info("Project %s created (%s / %s)", project.id, project.title, project.category)
        return ProjectResponse.from_project(project)

    async def delete_project(self, project_id: str) -> MessageResponse:
        """
        Remove a project and its remote image.

        Raises:
            NotFoundError:     No record with this id (store unchanged)
            AssetStorageError: Remote destroy failed (record kept)
            DatabaseError:     Lookup or delete failed
        """
        project = await self.store.find_by_id(project_id)
        if project is None:
            raise NotFoundError(resource="Project", resource_id=project_id)

        if project.public_id:
            await self.assets.delete_image(project.public_id)
        else:
            logger.info("Project %s has no publicId; remote image left in place", project_id)

        await self.store.delete_by_id(project_id)
        logger.info("Project %s deleted", project_id)
        return MessageResponse(message="Project deleted successfully")
