"""
Foodbabes Backend: Image Storage Interface
============================================

What:  Abstract base class for the object storage that receives food post
       images, plus the shared validation and resize pipeline.
How:   upload() validates the filename extension and size, decodes the image
       with Pillow, applies the resize transform, and hands the re-encoded
       bytes to the backend's _put(). Concrete backends only implement
       storage I/O (_put, delete, health_check).
Who:   Built once in the app lifespan by create_image_storage(); used by
       FoodService.
When:  On every POST /foods, before the food post is persisted.

Implementations:
    - LocalImageStorage: files on disk, served by GET /files/{path}
    - MinioImageStorage: objects in an S3-compatible bucket

Transform (defaults from settings):
    limit  500x500: shrink to fit the box, never enlarge, keep aspect ratio
    fit    500x500: scale up or down until the image touches the box
"""

import asyncio
import io
import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Tuple

from PIL import Image, ImageOps, UnidentifiedImageError

from foodbabes.config import Settings
from foodbabes.exceptions import ValidationError

logger = logging.getLogger(__name__)

# Extension → Pillow format name
PIL_FORMATS = {
    "jpg": "JPEG",
    "jpeg": "JPEG",
    "png": "PNG",
}

# Pillow format name → (stored extension, content type)
STORED_FORMATS = {
    "JPEG": ("jpg", "image/jpeg"),
    "PNG": ("png", "image/png"),
}

# Decoded pixel budget, as a multiple of the output box area
MAX_PIXELS_FACTOR = 100


@dataclass(frozen=True)
class UploadedImage:
    """Result of a successful upload: what the food post stores."""
    url: str
    public_id: str
    format: str
    width: int
    height: int
    size: int


class ImageStorage(ABC):
    """
    Abstract interface for storing uploaded food images.

    Contract:
        - upload() returns an UploadedImage or raises
          ValidationError (bad input, field "image") or
          ImageStorageError (backend failure)
        - delete() removes every stored rendition of a public_id and never
          raises for a missing image
        - health_check() returns a bool and never raises
    """

    def __init__(
        self,
        folder: str = "food",
        allowed_formats: Iterable[str] = ("jpg", "jpeg", "png"),
        max_width: int = 500,
        max_height: int = 500,
        crop: str = "limit",
        max_file_size: int = 10_485_760,
    ):
        self.folder = folder.strip("/")
        self.allowed_formats = {fmt.lower().lstrip(".") for fmt in allowed_formats}
        unknown = self.allowed_formats - set(PIL_FORMATS)
        if unknown:
            raise ValueError(f"Unsupported image formats: {sorted(unknown)}")
        self.max_width = max_width
        self.max_height = max_height
        self.crop = crop
        self.max_file_size = max_file_size
        self.max_pixels = max_width * max_height * MAX_PIXELS_FACTOR

    @property
    def allowed_pil_formats(self) -> set:
        return {PIL_FORMATS[fmt] for fmt in self.allowed_formats}

    # ── Validation ────────────────────────────────────────────────────────

    def validate_extension(self, filename: str) -> str:
        """
        Check the filename extension against the allowed formats.

        Returns: Normalized extension without the dot.
        Raises:  ValidationError (field "image").
        """
        ext = Path(filename or "").suffix.lower().lstrip(".")
        if ext not in self.allowed_formats:
            raise ValidationError(
                message=(
                    f"File type '{ext or 'none'}' is not supported. "
                    f"Allowed types: {', '.join(sorted(self.allowed_formats))}"
                ),
                field="image",
                kind="format",
                value=filename,
            )
        return ext

    def validate_size(self, content_length: Optional[int], actual_size: int) -> None:
        """Reject empty files and files above max_file_size."""
        max_mb = self.max_file_size / (1024 * 1024)

        if actual_size == 0:
            raise ValidationError(
                message="Uploaded image is empty.",
                field="image",
                kind="empty",
            )

        if (content_length and content_length > self.max_file_size) or actual_size > self.max_file_size:
            raise ValidationError(
                message=f"Image is too large. Maximum size is {max_mb:.0f}MB.",
                field="image",
                kind="size",
                value=actual_size,
            )

    def _check_dimensions(self, width: int, height: int) -> None:
        # Header dimensions only; runs before any pixel data is decoded.
        if width * height > self.max_pixels:
            raise ValidationError(
                message="Image dimensions are too large.",
                field="image",
                kind="size",
                value=f"{width}x{height}",
            )

    # ── Transform ─────────────────────────────────────────────────────────

    def transform(self, content: bytes) -> Tuple[bytes, str, int, int]:
        """
        Decode, resize and re-encode an image.

        CPU-bound; upload() runs it in a worker thread.

        Returns: (encoded bytes, Pillow format name, width, height)
        Raises:  ValidationError when the bytes are not an allowed image.
        """
        try:
            with Image.open(io.BytesIO(content)) as image:
                self._check_dimensions(image.width, image.height)
                image.load()
                pil_format = image.format
                if pil_format not in self.allowed_pil_formats:
                    raise ValidationError(
                        message=(
                            f"Image content '{pil_format}' is not supported. "
                            f"Allowed types: {', '.join(sorted(self.allowed_formats))}"
                        ),
                        field="image",
                        kind="format",
                    )

                box = (self.max_width, self.max_height)
                if self.crop == "fit":
                    resized = ImageOps.contain(image, box)
                else:
                    resized = image.copy()
                    resized.thumbnail(box)

                buffer = io.BytesIO()
                resized.save(buffer, format=pil_format)
        except Image.DecompressionBombError as e:
            raise ValidationError(
                message="Image dimensions are too large.",
                field="image",
                kind="size",
                context={"error": str(e)},
            )
        except (UnidentifiedImageError, OSError) as e:
            raise ValidationError(
                message="Uploaded file is not a readable image.",
                field="image",
                kind="format",
                context={"error": str(e)},
            )

        return buffer.getvalue(), pil_format, resized.width, resized.height

    # ── Upload Pipeline ───────────────────────────────────────────────────

    def new_public_id(self) -> str:
        return f"{self.folder}/{uuid.uuid4().hex}"

    async def upload(
        self,
        filename: str,
        content: bytes,
        content_length: Optional[int] = None,
    ) -> UploadedImage:
        """
        Validate, transform and store an uploaded image.

        Order: extension → size → decode/resize (thread) → backend write.
        """
        self.validate_extension(filename)
        self.validate_size(content_length, len(content))

        data, pil_format, width, height = await asyncio.to_thread(self.transform, content)
        extension, content_type = STORED_FORMATS[pil_format]

        public_id = self.new_public_id()
        url = await self._put(public_id, extension, data, content_type)

        logger.info(
            "Image stored: %s.%s (%dx%d, %d bytes)",
            public_id,
            extension,
            width,
            height,
            len(data),
        )
        return UploadedImage(
            url=url,
            public_id=public_id,
            format=extension,
            width=width,
            height=height,
            size=len(data),
        )

    # ── Backend I/O ───────────────────────────────────────────────────────

    @abstractmethod
    async def _put(self, public_id: str, extension: str, data: bytes, content_type: str) -> str:
        """Store bytes under `public_id.extension` and return the public URL."""
        ...

    @abstractmethod
    async def delete(self, public_id: str) -> None:
        """Remove a stored image. Missing images are not an error."""
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """True when the backend can accept uploads."""
        ...


def create_image_storage(settings: Settings) -> ImageStorage:
    """Build the backend selected by IMAGE_STORAGE_BACKEND."""
    common = dict(
        folder=settings.image_folder,
        allowed_formats=settings.image_allowed_formats_list,
        max_width=settings.image_max_width,
        max_height=settings.image_max_height,
        crop=settings.image_crop,
        max_file_size=settings.max_file_size,
    )

    if settings.image_storage_backend == "minio":
        from foodbabes.services.minio_storage import MinioImageStorage
        return MinioImageStorage.from_settings(settings, **common)

    from foodbabes.services.local_storage import LocalImageStorage
    return LocalImageStorage(
        storage_root=settings.storage_root,
        public_base_url=settings.public_base_url,
        **common,
    )
