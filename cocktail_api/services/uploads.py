"""
Image Upload Service

Stores cocktail pictures on local disk and serves them from /uploads.

Rules:
======
1. Only PNG, JPEG and WEBP are accepted
2. The type comes from decoding the file with Pillow; the declared
   content type is checked too but never trusted on its own
3. Files larger than max_image_bytes (2 MiB by default) are rejected
4. Files get a random name, so user-supplied filenames never reach disk

The image is written before the cocktail row that references it. If the
row cannot be committed, the catalog service calls delete() to remove
the orphaned file.
"""

import logging
import struct
from dataclasses import dataclass
from functools import lru_cache
from io import BytesIO
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from cocktail_api.config import get_settings
from cocktail_api.exceptions import ValidationError
from cocktail_api.utils.ids import new_id

logger = logging.getLogger(__name__)

UPLOADS_URL_PATH = "/uploads"

ALLOWED_CONTENT_TYPES = {
    "image/png": "png",
    "image/jpg": "jpg",
    "image/jpeg": "jpg",
    "image/webp": "webp",
}

# Pillow format name -> stored file extension
PILLOW_FORMATS = {"PNG": "png", "JPEG": "jpg", "WEBP": "webp"}

UNREADABLE_IMAGE_ERRORS = (
    UnidentifiedImageError,
    Image.DecompressionBombError,
    OSError,
    SyntaxError,
    EOFError,
    struct.error,
    ValueError,
)


def sniff_image_type(data: bytes) -> str | None:
    """
    Detect the image format by decoding the upload with Pillow.

    The file must open as PNG, JPEG or WEBP, pass verify() and decode
    completely, so a valid signature followed by garbage or a truncated
    body is rejected.

    Returns:
        "png", "jpg" or "webp", or None for anything else
    """
    if not data:
        return None

    try:
        with Image.open(BytesIO(data), formats=tuple(PILLOW_FORMATS)) as img:
            image_format = img.format
            img.verify()
        # verify() leaves the image unusable, so decode from a fresh handle
        with Image.open(BytesIO(data), formats=(image_format,)) as img:
            img.load()
    except UNREADABLE_IMAGE_ERRORS as e:
        logger.debug(f"Rejected upload that is not a readable image: {e}")
        return None

    return PILLOW_FORMATS.get(image_format)


@dataclass(frozen=True)
class StoredImage:
    filename: str
    path: Path
    url: str


class ImageStorage:
    """Filesystem storage for cocktail images."""

    def __init__(self, directory: Path | str, base_url: str, max_bytes: int) -> None:
        self.directory = Path(directory)
        self.base_url = base_url.rstrip("/")
        self.max_bytes = max_bytes

    def ensure_directory(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    def validate(self, data: bytes, content_type: str | None = None) -> str:
        """
        Check size and type of an upload.

        Returns:
            The file extension to store it under

        Raises:
            ValidationError: Too large, declared type not allowed, or the
                content is not a PNG/JPEG/WEBP image
        """
        if len(data) > self.max_bytes:
            limit_mb = self.max_bytes / (1024 * 1024)
            raise ValidationError.for_field("image", f"Image too large (max {limit_mb:g}MB)")

        if content_type and content_type.lower() not in ALLOWED_CONTENT_TYPES:
            raise ValidationError.for_field("image", "Only PNG/JPG/JPEG/WEBP allowed")

        extension = sniff_image_type(data)
        if extension is None:
            raise ValidationError.for_field("image", "Only PNG/JPG/JPEG/WEBP allowed")
        return extension

    def save(self, data: bytes, content_type: str | None = None) -> StoredImage:
        """Validate and write an image, returning its path and public URL."""
        extension = self.validate(data, content_type)

        self.ensure_directory()
        filename = f"{new_id()}.{extension}"
        path = self.directory / filename
        path.write_bytes(data)

        logger.info(f"Stored image {filename} ({len(data)} bytes)")
        return StoredImage(
            filename=filename,
            path=path,
            url=f"{self.base_url}{UPLOADS_URL_PATH}/{filename}",
        )

    def delete(self, image: StoredImage) -> None:
        """Remove a stored image. A file that is already gone is ignored."""
        try:
            image.path.unlink(missing_ok=True)
        except OSError as e:
            logger.error(f"Could not delete image {image.filename}: {e}")
            return
        logger.info(f"Deleted image {image.filename}")


@lru_cache
def get_image_storage() -> ImageStorage:
    """Image storage configured from settings (overridable in tests)."""
    settings = get_settings()
    return ImageStorage(
        directory=settings.upload_dir,
        base_url=settings.public_base_url,
        max_bytes=settings.max_image_bytes,
    )
