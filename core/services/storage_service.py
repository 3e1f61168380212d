# =============================================================================
# core/services/storage_service.py - Listing Image Storage
# =============================================================================
# Handles image upload/delete on the local upload directory.
# Files are served back under /uploads by the application.
# =============================================================================

import logging
import time
import uuid
from pathlib import Path, PurePath

from app.config import settings
from app.exceptions import (
    FileTooLargeError,
    InvalidFileNameError,
    InvalidFileTypeError,
    StorageError,
    UploadNotFoundError,
)

logger = logging.getLogger(__name__)

# Public URL prefix the upload directory is mounted at
PUBLIC_PREFIX = "/uploads"

EXTENSION_BY_MIME = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "image/gif": ".gif",
}

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp", ".gif"}


class StorageService:
    """
    Service for listing image files.

    Validates type and size, then writes under a randomized name.
    """

    @staticmethod
    def upload_dir() -> Path:
        return settings.upload_path

    @staticmethod
    def _extension(original_name: str | None, content_type: str) -> str:
        # Trust the client's extension only when it is an image one
        suffix = PurePath(original_name or "").suffix.lower()
        if suffix in IMAGE_EXTENSIONS:
            return suffix
        return EXTENSION_BY_MIME.get(content_type, ".jpg")

    @staticmethod
    def generate_file_name(original_name: str | None, content_type: str) -> str:
        """`<epoch ms>_<random><ext>`, unique per upload."""
        timestamp = int(time.time() * 1000)
        random_part = uuid.uuid4().hex[:13]
        return f"{timestamp}_{random_part}{StorageService._extension(original_name, content_type)}"

    @staticmethod
    def validate_image(content_type: str | None, size_bytes: int) -> None:
        """
        Raises:
            InvalidFileTypeError: If the MIME type isn't an allowed image type
            FileTooLargeError: If the file exceeds MAX_UPLOAD_SIZE_MB
        """
        allowed = settings.allowed_image_types_list
        if (content_type or "").lower() not in allowed:
            raise InvalidFileTypeError(content_type, allowed)

        if size_bytes > settings.max_upload_size_bytes:
            raise FileTooLargeError(size_bytes / (1024 * 1024), settings.MAX_UPLOAD_SIZE_MB)

    @staticmethod
    def save_image(
        content: bytes,
        original_name: str | None,
        content_type: str | None,
    ) -> dict:
        """
        Validate and store an uploaded image.

        Returns:
            Dict with url, file_name, size and type

        Raises:
            InvalidFileTypeError, FileTooLargeError: On invalid uploads
            StorageError: If the file can't be written
        """
        StorageService.validate_image(content_type, len(content))
        content_type = (content_type or "").lower()

        file_name = StorageService.generate_file_name(original_name, content_type)
        upload_dir = StorageService.upload_dir()

        try:
            upload_dir.mkdir(parents=True, exist_ok=True)
            (upload_dir / file_name).write_bytes(content)
        except OSError as e:
            logger.error(f"Writing upload {file_name} failed: {e}")
            raise StorageError(str(e))

        logger.info(f"Stored upload {file_name} ({len(content)} bytes, {content_type})")
        return {
            "url": f"{PUBLIC_PREFIX}/{file_name}",
            "file_name": file_name,
            "size": len(content),
            "type": content_type,
        }

    @staticmethod
    def validate_file_name(file_name: str) -> str:
        """
        Reject names that could reach outside the upload directory.

        Raises:
            InvalidFileNameError: If file_name has a separator or ".."
        """
        if file_name in ("", ".") or ".." in file_name or "/" in file_name or "\\" in file_name:
            raise InvalidFileNameError(file_name)
        return file_name

    @staticmethod
    def delete_image(file_name: str) -> None:
        """
        Delete a stored upload.

        Raises:
            InvalidFileNameError: If file_name is unsafe
            UploadNotFoundError: If no such file exists
            StorageError: If removal fails
        """
        StorageService.validate_file_name(file_name)
        path = StorageService.upload_dir() / file_name

        try:
            path.unlink()
        except FileNotFoundError:
            raise UploadNotFoundError(file_name)
        except OSError as e:
            logger.error(f"Deleting upload {file_name} failed: {e}")
            raise StorageError(str(e))

        logger.info(f"Deleted upload {file_name}")
