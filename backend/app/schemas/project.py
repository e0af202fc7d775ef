"""
Gallery API — Pydantic Response Schemas
=========================================

What:  Pydantic models defining the JSON contract returned to clients.
Why:   Automatic serialization and a single place where the wire names
       (camelCase: imageUrl, publicId, createdAt) are decided.
How:   Python-side fields are snake_case with camelCase aliases; FastAPI
       serializes response models by alias.

Design Decision:
    Schemas are separate from models.project.Project because the stored
    document uses an ObjectId `_id` while clients receive a plain string `id`.
    The conversion lives in ProjectResponse.from_project().
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.models.project import Project


# ══════════════════════════════════════════════════════════════════════════
# Response Models: what the API returns to clients
# ══════════════════════════════════════════════════════════════════════════


class ProjectResponse(BaseModel):
    """
    What:  Full representation of a project record.
    Who:   Returned by GET /api/projects (as array items) and POST /api/upload.

    Example:
        {
            "id": "665f1c2e9b1e8a3d4c5f6a7b",
            "title": "Sunset",
            "category": "Landscape",
            "imageUrl": "https://res.cloudinary.com/demo/image/upload/v1/lented-gallery/abc.jpg",
            "publicId": "lented-gallery/abc",
            "createdAt": "2024-06-04T12:00:00Z"
        }
    """
    id: str = Field(description="Unique project identifier (24-char hex ObjectId)")
    title: str = Field(description="Project title")
    category: str = Field(description="Project category")
    image_url: str = Field(alias="imageUrl", description="Public URL of the uploaded image")
    public_id: Optional[str] = Field(
        default=None,
        alias="publicId",
        description="Remote asset identifier; null when the image cannot be deleted remotely",
    )
    created_at: datetime = Field(alias="createdAt", description="Creation timestamp (UTC ISO 8601)")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_project(cls, project: Project) -> "ProjectResponse":
        return cls(
            id=str(project.id),
            title=project.title,
            category=project.category,
            image_url=project.image_url,
            public_id=project.public_id,
            created_at=project.created_at,
        )


class MessageResponse(BaseModel):
    """Confirmation body for successful deletes."""
    message: str = Field(description="Human-readable confirmation")


# ══════════════════════════════════════════════════════════════════════════
# Error Response Model: one error shape across all endpoints
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    What:  The single error shape every failing request returns.
    Why:   Clients only ever read one string field, `error`.

    Example:
        {"error": "Project not found"}
    """
    error: str = Field(description="Error description")
