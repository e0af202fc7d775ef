"""
Gallery API — Project Route Handlers
======================================

What:  Handles GET /api/projects (list) and DELETE /api/projects/{id}.
Why:   The gallery front end lists every project and lets an editor remove one.
How:   Delegates to ProjectService; errors are turned into {"error": ...}
       bodies by the global handlers in main.py.
Who:   Called by the static front end served from the same origin (or any
       other origin, CORS is open).
"""

import logging
from typing import List

from fastapi import APIRouter, Depends

from app.dependencies import get_project_service
from app.schemas.project import ErrorResponse, MessageResponse, ProjectResponse
from app.services.project_service import ProjectService

logger = logging.getLogger(__name__)

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(prefix="/api", tags=["Projects"])


@router.get(
    "/projects",
    response_model=List[ProjectResponse],
    responses={
        200: {"description": "Every project, newest first"},
        500: {"description": "Database failure", "model": ErrorResponse},
    },
    summary="List all projects",
)
async def list_projects(
    service: ProjectService = Depends(get_project_service),
) -> List[ProjectResponse]:
    """
    Return every project record ordered by createdAt, newest first.

    No pagination: the gallery is small and the front end renders it whole.
    An empty store yields an empty array.
    """
    return await service.list_projects()


@router.delete(
    "/projects/{project_id}",
    response_model=MessageResponse,
    responses={
        200: {"description": "Project and its image deleted", "model": MessageResponse},
        404: {"description": "Project not found", "model": ErrorResponse},
        500: {"description": "Database or asset store failure", "model": ErrorResponse},
    },
    summary="Delete a project and its image",
)
async def delete_project(
    project_id: str,
    service: ProjectService = Depends(get_project_service),
) -> MessageResponse:
    """
    Delete a project.

    Order of operations:
        1. Look up the record (404 if absent)
        2. Destroy the remote image if the record has a publicId
        3. Delete the record

    If step 2 fails the request fails with 500 and the record is kept.

    Args:
        project_id: 24-character hex ObjectId. A malformed id is reported as
                    a database failure (500), not a 404.
    """
    return await service.delete_project(project_id)
