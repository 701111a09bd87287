"""
Object Storage Service - forwards buffered uploads to Cloudinary.

Uploads come back as StoredFile (URL plus Cloudinary public id); nothing
is kept on local disk.
Routes receive the storage through the get_object_storage dependency so
tests can swap in a fake.
"""

import base64
import logging
from dataclasses import dataclass
from functools import lru_cache

import cloudinary
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError

from jobboard.core.config import get_settings
from jobboard.core.errors import JobBoardError
from jobboard.utils.file_upload import BufferedUpload

logger = logging.getLogger(__name__)
settings = get_settings()

PROFILE_PICTURES_FOLDER = "profile_pictures"


class StorageError(JobBoardError):
    """Upload to object storage failed."""
    status_code = 500


@dataclass
class StoredFile:
    """Where an upload ended up; public_id is needed to remove it again."""
    url: str
    public_id: str
    resource_type: str


class ObjectStorage:
    """Thin wrapper over the Cloudinary uploader."""

    def __init__(self):
        cloudinary.config(
            cloud_name=settings.cloudinary_cloud_name,
            api_key=settings.cloudinary_api_key,
            api_secret=settings.cloudinary_api_secret,
            secure=True,
        )

    @staticmethod
    def _data_uri(upload: BufferedUpload) -> str:
        encoded = base64.b64encode(upload.content).decode("ascii")
        return f"data:{upload.content_type};base64,{encoded}"

    def upload(self, upload: BufferedUpload, folder: str = PROFILE_PICTURES_FOLDER) -> StoredFile:
        """
        Upload a file and return where it is stored.

        Images go up as images; documents as raw resources so that
        pdf/doc files are served back untouched.
        """
        resource_type = "image" if upload.is_image else "raw"
        try:
            result = cloudinary.uploader.upload(
                self._data_uri(upload),
                folder=folder,
                resource_type=resource_type,
                use_filename=True,
                filename_override=upload.filename,
            )
        except CloudinaryError as e:
            logger.error("Cloudinary upload failed for %s: %s", upload.filename, e)
            raise StorageError("File upload failed. Please try again later.") from e

        logger.info("Uploaded %s to %s", upload.filename, result.get("public_id"))
        return StoredFile(
            url=result["secure_url"],
            public_id=result["public_id"],
            resource_type=resource_type,
        )

    def discard(self, stored: StoredFile) -> None:
        """
        Remove an upload whose owning document was never saved.

        Runs while another error is propagating, so a failed delete is
        logged rather than raised over it.
        """
        try:
            cloudinary.uploader.destroy(
                stored.public_id,
                resource_type=stored.resource_type,
                invalidate=True,
            )
        except CloudinaryError as e:
            logger.warning("Could not remove orphaned upload %s: %s", stored.public_id, e)
            return
        logger.info("Removed orphaned upload %s", stored.public_id)


@lru_cache()
def get_object_storage() -> ObjectStorage:
    """FastAPI dependency - shared storage client."""
    return ObjectStorage()
