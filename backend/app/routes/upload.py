"""
Gallery API — Upload Route Handler
====================================

What:  Handles POST /api/upload for creating a project with its image.
Why:   The only way records come into existence.
How:   Receives a multipart form, hands the file stream and text fields to
       ProjectService, returns the saved record.

Request Flow:
    1. Client sends multipart/form-data: `image` (file), `title`, `category`
    2. No file → 400 immediately; neither Cloudinary nor MongoDB is contacted
    3. ProjectService uploads the image, then saves the record
    4. Return 201 Created with the project

Fields are declared optional on purpose: a missing title or category is not
rejected here but by the record store's schema check, which reports it as a
save failure (500), after the image upload has already happened.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from app.dependencies import get_project_service
from app.schemas.project import ErrorResponse, ProjectResponse
from app.services.project_service import ProjectService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Upload"])


@router.post(
    "/upload",
    status_code=201,
    response_model=ProjectResponse,
    responses={
        201: {"description": "Project created", "model": ProjectResponse},
        400: {"description": "No image file, or unsupported format", "model": ErrorResponse},
        500: {"description": "Upload or save failed", "model": ErrorResponse},
    },
    summary="Create a project from an uploaded image",
)
async def upload_project(
    image: Optional[UploadFile] = File(
        default=None,
        description="Project image (jpg, jpeg, png or webp)",
    ),
    title: Optional[str] = Form(default=None),
    category: Optional[str] = Form(default=None),
    service: ProjectService = Depends(get_project_service),
) -> ProjectResponse:
    # Browsers send an empty part with filename="" when no file was chosen
    has_file = image is not None and bool(image.filename)

    logger.info(
        "Received upload request: filename=%s, size=%s, title=%r, category=%r",
        image.filename if has_file else None,
        image.size if has_file else None,
        title,
        category,
    )

    try:
        return await service.create_project(
            title=title,
            category=category,
            file=image.file if has_file else None,
            filename=image.filename if has_file else None,
        )
    finally:
        if image is not None:
            await image.close()
