"""
Gallery API — Project Document Model
======================================

What:  In-process representation of a document in the `projects` collection.
Why:   Keeps the BSON layout (camelCase keys, ObjectId `_id`) in one place so
       the store and the API schemas never touch raw dicts.
How:   A frozen dataclass with to_document()/from_document() converters and a
       `new()` constructor that enforces the required-field schema.
Who:   Built by ProjectStore; serialized by schemas.project.ProjectResponse.

Document Layout (as stored):
    {
        "_id":       ObjectId("665f1c..."),
        "title":     "Sunset",
        "category":  "Landscape",
        "imageUrl":  "https://res.cloudinary.com/.../lented-gallery/abc.jpg",
        "publicId":  "lented-gallery/abc",          # may be absent
        "createdAt": ISODate("2024-06-04T12:00:00Z")
    }

Schema Rules:
    title, category and imageUrl are required and must be non-empty strings.
    publicId is optional. createdAt is stamped at construction and never changes.
    Records are immutable after creation; there is no update path.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId

from app.exceptions import DatabaseError

# Document keys that must hold a non-empty string, in schema order
REQUIRED_FIELDS = ("title", "category", "imageUrl")


def _utcnow() -> datetime:
    # Mongo stores milliseconds; truncate so the in-memory value matches what is read back
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


@dataclass(frozen=True)
class Project:
    """
    A single gallery project.

    Lifecycle:
        1. Image uploaded to Cloudinary → url + public_id returned
        2. Project.new(...) validates and stamps created_at
        3. ProjectStore inserts it and assigns the ObjectId
        4. Deleted as a whole by DELETE /api/projects/{id}
    """

    title: str
    category: str
    image_url: str
    public_id: Optional[str] = None
    created_at: datetime = field(default_factory=_utcnow)
    id: Optional[ObjectId] = None

    @classmethod
    def new(
        cls,
        title: Optional[str],
        category: Optional[str],
        image_url: Optional[str],
        public_id: Optional[str] = None,
    ) -> "Project":
        """
        Construct a not-yet-persisted project, enforcing required fields.

        Raises:
            DatabaseError: One or more required fields missing or empty. The
                message follows the document store's validation wording, e.g.
                "Project validation failed: title: Path `title` is required."
        """
        values = {"title": title, "category": category, "imageUrl": image_url}
        missing: List[str] = [name for name in REQUIRED_FIELDS if not values[name]]
        problems = [f"{name}: Path `{name}` is required." for name in missing]
        if problems:
            raise DatabaseError(
                message="Project validation failed: " + ", ".join(problems),
                context={"missing": missing},
            )
        return cls(
            title=title,
            category=category,
            image_url=image_url,
            public_id=public_id or None,
        )

    def to_document(self) -> Dict[str, Any]:
        """BSON-ready dict. `_id` is omitted until the store assigns one."""
        document: Dict[str, Any] = {
            "title": self.title,
            "category": self.category,
            "imageUrl": self.image_url,
            "createdAt": self.created_at,
        }
        if self.public_id:
            document["publicId"] = self.public_id
        if self.id is not None:
            document["_id"] = self.id
        return document

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Project":
        created_at = document.get("createdAt")
        if created_at is not None and created_at.tzinfo is None:
            # Documents written without tz info are UTC
            created_at = created_at.replace(tzinfo=timezone.utc)
        return cls(
            id=document.get("_id"),
            title=document.get("title", ""),
            category=document.get("category", ""),
            image_url=document.get("imageUrl", ""),
            public_id=document.get("publicId"),
            created_at=created_at,
        )

    def with_id(self, object_id: ObjectId) -> "Project":
        return replace(self, id=object_id)

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, title='{self.title}', created_at='{self.created_at}')>"
