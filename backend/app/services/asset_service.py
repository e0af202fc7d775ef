"""
Gallery API — Remote Asset Service (Cloudinary)
=================================================

What:  Uploads project images to Cloudinary and destroys them on delete.
Why:   Image bytes never touch our disk or database; we persist only the URL
       and the provider's public_id.
How:   Thin wrapper over cloudinary.uploader. The SDK is blocking, so every
       call runs in the threadpool. Credentials are injected at construction
       and passed on each call instead of through cloudinary.config().
Who:   Built once in the lifespan; used by ProjectService.

Upload pipeline (applied by the provider):
    folder:            lented-gallery
    allowed formats:   jpg, png, jpeg, webp  (rejected server-side otherwise)
    transformation:    limit longest side to 1000px, keep aspect ratio,
                       never upscale  (width=1000, height=1000, crop=limit)

Local check:
    A filename whose extension is clearly outside the allowed formats is
    rejected before any network call (ValidationError → 400). Files with no
    extension are left to the provider, which inspects the actual bytes.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO, Dict, Optional

import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError
from fastapi.concurrency import run_in_threadpool

from app.exceptions import AssetStorageError, ValidationError

logger = logging.getLogger(__name__)

# ── Upload Parameters ─────────────────────────────────────────────────────
UPLOAD_FOLDER = "lented-gallery"
ALLOWED_FORMATS = ("jpg", "png", "jpeg", "webp")
RESIZE_TRANSFORMATION = [{"width": 1000, "height": 1000, "crop": "limit"}]


@dataclass(frozen=True)
class UploadedAsset:
    """What the provider hands back after a successful upload."""

    url: str
    public_id: str


class AssetService:
    """
    Remote asset store client.

    Lifecycle of an image:
        1. upload_image() → Cloudinary stores, resizes, returns secure_url + public_id
        2. URL and public_id are written to the project record
        3. delete_image(public_id) when the record is deleted
        4. discard_image(public_id) if the record could not be saved
    """

    def __init__(self, credentials: Optional[Dict[str, str]] = None):
        """
        Args:
            credentials: cloud_name / api_key / api_secret, as produced by
                         Settings.cloudinary_credentials.
        """
        self.credentials = dict(credentials or {})
        logger.info(
            "AssetService initialized for cloud=%s folder=%s",
            self.credentials.get("cloud_name") or "<unset>",
            UPLOAD_FOLDER,
        )

    def validate_extension(self, filename: Optional[str]) -> Optional[str]:
        """
        Reject filenames whose extension is not an allowed image format.

        Returns: Normalized extension without the dot, or None if there is none.
        Raises:  ValidationError if the extension is present and not allowed.
        """
        ext = Path(filename or "").suffix.lower().lstrip(".")
        if not ext:
            return None
        if ext not in ALLOWED_FORMATS:
            raise ValidationError(
                message=(
                    f"File format '{ext}' is not supported. "
                    f"Allowed formats: {', '.join(ALLOWED_FORMATS)}"
                ),
                field="image",
                context={"extension": ext, "allowed": list(ALLOWED_FORMATS)},
            )
        return ext

    async def upload_image(self, file: BinaryIO, filename: Optional[str]) -> UploadedAsset:
        """
        Stream an image to Cloudinary under the gallery folder.

        Args:
            file:     Readable binary file object (UploadFile.file)
            filename: Client-supplied filename, used only for the format check

        Raises:
            ValidationError:   Unsupported extension (no network call made)
            AssetStorageError: Provider rejected the upload or was unreachable
        """
        self.validate_extension(filename)

        try:
            result: Dict[str, Any] = await run_in_threadpool(
                cloudinary.uploader.upload,
                file,
                folder=UPLOAD_FOLDER,
                allowed_formats=list(ALLOWED_FORMATS),
                transformation=RESIZE_TRANSFORMATION,
                resource_type="image",
                **self.credentials,
            )
        except (CloudinaryError, ValueError) as e:
            # ValueError: SDK raises it for missing credentials
            logger.error("Cloudinary upload failed for %s: %s", filename or "unnamed", str(e))
            raise AssetStorageError(
                message=str(e),
                context={"filename": filename, "error_type": type(e).__name__},
            )

        asset = UploadedAsset(url=result["secure_url"], public_id=result["public_id"])
        logger.info(
            "Image uploaded: %s (%sx%s %s)",
            asset.public_id,
            result.get("width"),
            result.get("height"),
            result.get("format"),
        )
        return asset

    async def delete_image(self, public_id: str) -> None:
        """
        Destroy a stored image by its public_id.

        A "not found" answer is logged and treated as success: the image is
        gone either way.

        Raises:
            AssetStorageError: Provider call failed
        """
        try:
            result: Dict[str, Any] = await run_in_threadpool(
                cloudinary.uploader.destroy,
                public_id,
                resource_type="image",
                **self.credentials,
            )
        except (CloudinaryError, ValueError) as e:
            logger.error("Cloudinary destroy failed for %s: %s", public_id, str(e))
            raise AssetStorageError(
                message=str(e),
                context={"public_id": public_id, "error_type": type(e).__name__},
            )

        outcome = result.get("result")
        if outcome == "ok":
            logger.info("Image destroyed: %s", public_id)
        else:
            logger.warning("Cloudinary destroy for %s returned %r", public_id, outcome)

    async def discard_image(self, public_id: str) -> None:
        """
        Best-effort removal of an image whose record was never saved.

        Errors are logged, never raised: the caller is already handling the
        failure that made this image an orphan.
        """
        try:
            await self.delete_image(public_id)
        except AssetStorageError as e:
            logger.warning("Failed to discard orphaned image %s: %s", public_id, e.message)
