"""
Snapgram Backend — Image Storage Service
==========================================

What:  Validates uploaded post images and stores them on the local filesystem.
Why:   Posts reference images by path; the bytes live on disk, not in the database.
How:   Validates extension, size and real image content, stores in
       date-organized directories with UUID filenames.
Who:   Called by PostService during upload; the /uploads route serves the result.

Security Model:
    1. Extension check:  fast rejection of obviously wrong files
    2. Size check:       bounded by MAX_FILE_SIZE before any decoding
    3. Content check:    Pillow parses the header and verifies the image, and the
                         detected format must agree with the allowed list
    4. UUID filename:    no user input in the stored path (no traversal)
"""

import io
import logging
import os
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Tuple

import aiofiles
from PIL import Image, UnidentifiedImageError

from app.config import settings
from app.exceptions import ValidationError, FileStorageError

logger = logging.getLogger(__name__)

# ── Allowed File Types ────────────────────────────────────────────────────
# Pillow format name → canonical extension for storage
ALLOWED_FORMATS = {
    "JPEG": ".jpg",
    "PNG": ".png",
    "GIF": ".gif",
    "WEBP": ".webp",
}

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}


class FileService:
    """
    Manages image validation, storage, and cleanup.

    Directory Structure:
        uploads/
        └── 2024/
            └── 01/
                └── 15/
                    ├── a1b2c3d4-5678.jpg
                    └── e5f6g7h8-9012.png
    """

    def __init__(self, storage_root: Optional[str] = None):
        """
        Args:
            storage_root: Override the default storage path (used in tests).
                          If None, uses settings.storage_root.
        """
        self.storage_root = Path(storage_root or settings.storage_root).resolve()
        self.storage_root.mkdir(parents=True, exist_ok=True)
        logger.info("FileService initialized with storage_root=%s", self.storage_root)

    def validate_extension(self, filename: str) -> str:
        """
        Returns: Normalized extension (lowercase with dot).
        Raises:  ValidationError if extension is not allowed.
        """
        ext = Path(filename).suffix.lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise ValidationError(
                message=(
                    f"File type '{ext}' is not supported. "
                    f"Allowed types: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
                ),
                field="image",
                context={"extension": ext, "allowed": sorted(ALLOWED_EXTENSIONS)},
            )
        return ext

    def validate_size(self, content_length: Optional[int], actual_size: int) -> None:
        """
        Validate image size against configured maximum.

        Args:
            content_length: Size reported by the multipart part (may be None)
            actual_size: Actual byte count of the uploaded file
        """
        max_mb = settings.max_file_size / (1024 * 1024)

        if actual_size == 0:
            raise ValidationError(
                message="The uploaded image is empty.",
                field="image",
            )

        if content_length and content_length > settings.max_file_size:
            raise ValidationError(
                message=f"File size exceeds maximum of {max_mb:.0f}MB. Please upload a smaller image.",
                field="image",
                context={"max_size_mb": max_mb, "reported_size": content_length},
            )

        if actual_size > settings.max_file_size:
            raise ValidationError(
                message=f"File size ({actual_size / (1024 * 1024):.1f}MB) exceeds maximum of {max_mb:.0f}MB.",
                field="image",
                context={"max_size_mb": max_mb, "actual_size": actual_size},
            )

    def validate_image_content(self, file_content: bytes) -> str:
        """
        Confirm the bytes really are an image of an allowed format.

        How:     Pillow identifies the format from the header, then verify()
                 walks the file structure without decoding pixel data.
        Returns: Storage extension for the detected format (e.g. ".png").
        Raises:  ValidationError if the content is not a supported image.
        """
        try:
            with Image.open(io.BytesIO(file_content)) as img:
                image_format = img.format
                img.verify()
        except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
            raise ValidationError(
                message="The uploaded file is not a valid image.",
                field="image",
                context={"error": type(e).__name__},
            )

        if image_format not in ALLOWED_FORMATS:
            raise ValidationError(
                message=(
                    f"Image format '{image_format}' is not supported. "
                    f"The file must be a JPEG, PNG, GIF or WEBP image."
                ),
                field="image",
                context={"detected_format": image_format, "allowed": sorted(ALLOWED_FORMATS)},
            )

        return ALLOWED_FORMATS[image_format]

    def _generate_storage_path(self, extension: str) -> Tuple[Path, str]:
        """
        Creates a YYYY/MM/DD/<uuid>.<ext> path.
        Returns: Tuple of (absolute_path, relative_path_from_storage_root).
        """
        now = datetime.now(timezone.utc)
        date_dir = now.strftime("%Y/%m/%d")
        unique_name = f"{uuid.uuid4()}{extension}"

        relative_path = f"{date_dir}/{unique_name}"
        absolute_path = self.storage_root / relative_path

        return absolute_path, relative_path

    async def store_file(self, content: bytes, extension: str) -> Tuple[str, str]:
        """
        Write validated file content to disk.

        Returns: Tuple of (absolute_path, relative_path).
        Raises:  FileStorageError if directory creation or file write fails.
        """
        absolute_path, relative_path = self._generate_storage_path(extension)

        try:
            absolute_path.parent.mkdir(parents=True, exist_ok=True)

            async with aiofiles.open(absolute_path, "wb") as f:
                await f.write(content)

            logger.info("File stored: %s (%d bytes)", relative_path, len(content))
            return str(absolute_path), relative_path

        except OSError as e:
            logger.error("Failed to store file at %s: %s", absolute_path, str(e))
            raise FileStorageError(
                message="Failed to save uploaded image. Please try again.",
                context={"path": str(absolute_path), "os_error": str(e)},
            )

    async def cleanup_file(self, file_path: str) -> None:
        """
        Remove a stored file after the post that referenced it failed to save.

        Best-effort: a missing file is ignored and other errors are only logged.
        """
        try:
            path = Path(file_path)
            if path.exists():
                os.remove(path)
                logger.info("Cleaned up file: %s", path.name)
            else:
                logger.debug("Cleanup: file already gone: %s", path.name)
        except OSError as e:
            logger.warning("Failed to clean up file %s: %s", file_path, str(e))

    def resolve(self, relative_path: str) -> Path:
        """
        Map a /uploads/<relative_path> request onto the storage root.

        Raises:
            ValidationError: the path escapes the storage root (../ tricks)
        """
        full_path = (self.storage_root / relative_path).resolve()
        if not full_path.is_relative_to(self.storage_root):
            raise ValidationError(message="Invalid file path")
        return full_path

    async def validate_and_store(
        self,
        filename: str,
        content: bytes,
        content_length: Optional[int] = None,
    ) -> Tuple[str, str]:
        """
        Complete validation and storage pipeline.

        Validation order (cheapest first):
            1. Extension check
            2. Size check
            3. Image content check (Pillow)
            4. Store file
        The stored extension comes from the detected format, not the filename.

        Returns: Tuple of (absolute_path, relative_path_for_db).
        """
        self.validate_extension(filename)
        self.validate_size(content_length, len(content))
        ext = self.validate_image_content(content)

        return await self.store_file(content, ext)


# ── Singleton Instance ────────────────────────────────────────────────────
file_service = FileService()
