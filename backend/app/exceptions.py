"""
Gallery API — Custom Exception Hierarchy
==========================================

What:  Application-specific exceptions for the four error classes the API knows.
Why:   Services raise typed errors; global handlers in main.py translate them to
       HTTP status codes, so routes never build error responses by hand.
How:   Each exception class carries a message and optional context dict.
       The message is what the client sees in the `error` field; context is
       only logged.

Exception Hierarchy:
    GalleryError (base)
    ├── ValidationError      → 400 Bad Request (no file, unsupported format)
    ├── NotFoundError        → 404 Not Found
    ├── DatabaseError        → 500 Internal Server Error (MongoDB failures)
    └── AssetStorageError    → 500 Internal Server Error (Cloudinary failures)

Note on exposure:
    DatabaseError and AssetStorageError carry the underlying driver/SDK message
    and it is returned to the client verbatim. Clients of this API have always
    relied on seeing those messages in the `error` field.
"""

from typing import Any, Dict, Optional


class GalleryError(Exception):
    """
    Base exception for all Gallery API errors.

    Attributes:
        message:  Client-facing error description (returned as `error`)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(GalleryError):
    """
    Raised when client input fails a presence or format check.

    When:    Upload without an image file, or with an extension outside the
             allowed image formats.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(GalleryError):
    """
    Raised when a requested resource does not exist.

    When:    DELETE /api/projects/{id} for an id with no stored record.
    HTTP:    404 Not Found

    The message is always "<Resource> not found"; the id goes to the context
    so it is logged without being echoed back.
    """

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource} not found", context=ctx)


class DatabaseError(GalleryError):
    """
    Raised when a MongoDB operation fails.

    What:    Connection failure, server selection timeout, malformed ObjectId,
             or a document that violates the Project schema.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "A database error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AssetStorageError(GalleryError):
    """
    Raised when the remote asset store (Cloudinary) rejects or fails a call.

    What:    Upload rejected (bad credentials, format refused server-side,
             network error) or destroy failed.
    HTTP:    500 Internal Server Error

    A failed destroy aborts the delete request before the metadata is touched.
    """

    def __init__(
        self,
        message: str = "Remote asset storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
