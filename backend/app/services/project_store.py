"""
Gallery API — Project Record Store (MongoDB)
==============================================

What:  Create/find/sort/delete-by-id operations for Project documents.
Why:   The only code that knows the `projects` collection exists. Services and
       routes deal in Project objects, never BSON.
How:   Wraps an injected AsyncIOMotorCollection. Every driver failure is
       translated into DatabaseError carrying the driver's own message.
Who:   Built once in the lifespan; used by ProjectService.

Query plan:
    list:   find({}).sort(createdAt DESC, _id DESC)
            _id is the tie-breaker: ObjectIds grow with insertion order, so
            records created in the same millisecond still come back in a
            stable, newest-first order.
    get:    find_one({_id: ObjectId(id)})
    delete: delete_one({_id: ObjectId(id)})

Failure policy:
    No retries, no circuit breaking. A malformed id is reported the same way
    as a driver failure (DatabaseError → 500).
"""

import logging
from typing import List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import DESCENDING
from pymongo.errors import PyMongoError

from app.exceptions import DatabaseError
from app.models.project import Project

logger = logging.getLogger(__name__)

NEWEST_FIRST = [("createdAt", DESCENDING), ("_id", DESCENDING)]


class ProjectStore:
    """
    Record store client for the Project entity.

    Responsibilities:
        - find_all_sorted_by_created_at_desc(): every record, newest first
        - create(): validate, stamp createdAt, insert
        - find_by_id(): single lookup, None when absent
        - delete_by_id(): remove one record, report whether it existed
    """

    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection

    @staticmethod
    def _object_id(project_id: str) -> ObjectId:
        """Cast a path id to ObjectId; a malformed id is a store failure."""
        try:
            return ObjectId(project_id)
        except (InvalidId, TypeError) as e:
            logger.warning("Rejected malformed project id %r: %s", project_id, e)
            raise DatabaseError(message=str(e), context={"project_id": project_id})

    async def find_all_sorted_by_created_at_desc(self) -> List[Project]:
        try:
            cursor = self.collection.find({}).sort(NEWEST_FIRST)
            documents = await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error("Database error listing projects: %s", str(e), exc_info=True)
            raise DatabaseError(message=str(e), context={"error_type": type(e).__name__})

        return [Project.from_document(document) for document in documents]

    async def create(
        self,
        title: Optional[str],
        category: Optional[str],
        image_url: Optional[str],
        public_id: Optional[str] = None,
    ) -> Project:
        """
        Persist a new project.

        Raises:
            DatabaseError: Schema violation (missing title/category/imageUrl)
                or insert failure.
        """
        project = Project.new(
            title=title,
            category=category,
            image_url=image_url,
            public_id=public_id,
        )

        try:
            result = await self.collection.insert_one(project.to_document())
        except PyMongoError as e:
            logger.error("Database error saving project: %s", str(e), exc_info=True)
            raise DatabaseError(message=str(e), context={"error_type": type(e).__name__})

        saved = project.with_id(result.inserted_id)
        logger.info("Project record created: %s", saved.id)
        return saved

    async def find_by_id(self, project_id: str) -> Optional[Project]:
        object_id = self._object_id(project_id)
        try:
            document = await self.collection.find_one({"_id": object_id})
        except PyMongoError as e:
            logger.error("Database error fetching project %s: %s", project_id, str(e))
            raise DatabaseError(message=str(e), context={"project_id": project_id})

        if document is None:
            return None
        return Project.from_document(document)

    async def delete_by_id(self, project_id: str) -> bool:
        """Returns True if a record was removed."""
        object_id = self._object_id(project_id)
        try:
            result = await self.collection.delete_one({"_id": object_id})
        except PyMongoError as e:
            logger.error("Database error deleting project %s: %s", project_id, str(e))
            raise DatabaseError(message=str(e), context={"project_id": project_id})

        return result.deleted_count == 1
