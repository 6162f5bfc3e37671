"""
Foodbabes Backend: Local Disk Image Storage
=============================================

What:  Stores processed food images on the local filesystem.
How:   Writes `<storage_root>/<folder>/<uuid>.<ext>` with aiofiles and
       returns a URL served by the GET /files/{path} route.
Who:   Default backend (IMAGE_STORAGE_BACKEND=local); used in development
       and in tests.

Directory Structure:
    storage/
    └── food/
        ├── 3f2a9c...e1.jpg
        └── 8b41d0...7c.png

Public ids carry no user input (UUID hex only), and every path handed in
from outside is resolved and checked against the storage root.
"""

import logging
import os
from pathlib import Path
from typing import Optional

import aiofiles

from foodbabes.exceptions import ImageStorageError, NotFoundError
from foodbabes.services.image_storage import STORED_FORMATS, ImageStorage

logger = logging.getLogger(__name__)


class LocalImageStorage(ImageStorage):

    def __init__(
        self,
        storage_root: str = "./storage",
        public_base_url: str = "http://localhost:8080",
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.storage_root = Path(storage_root).resolve()
        self.public_base_url = public_base_url.rstrip("/")
        self.storage_root.mkdir(parents=True, exist_ok=True)
        logger.info("LocalImageStorage initialized with storage_root=%s", self.storage_root)

    def _path_for(self, relative: str) -> Optional[Path]:
        """Resolve a path under the storage root; None if it escapes the root."""
        path = (self.storage_root / relative).resolve()
        if not path.is_relative_to(self.storage_root):
            return None
        return path

    def resolve_path(self, relative: str) -> Path:
        """
        Find a stored image for GET /files/{path}.

        Raises: NotFoundError for traversal attempts and missing files.
        """
        path = self._path_for(relative)
        if path is None or not path.is_file():
            raise NotFoundError(resource="Image", resource_id=relative)
        return path

    async def _put(self, public_id: str, extension: str, data: bytes, content_type: str) -> str:
        relative = f"{public_id}.{extension}"
        path = self._path_for(relative)
        if path is None:
            raise ImageStorageError(context={"public_id": public_id})

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(path, "wb") as f:
                await f.write(data)
        except OSError as e:
            logger.error("Failed to store image at %s: %s", path, str(e))
            raise ImageStorageError(
                context={"path": str(path), "os_error": str(e)},
            )

        return f"{self.public_base_url}/files/{relative}"

    async def delete(self, public_id: str) -> None:
        for extension, _ in STORED_FORMATS.values():
            path = self._path_for(f"{public_id}.{extension}")
            if path is None:
                logger.warning("Refusing to delete image outside storage root: %s", public_id)
                return
            try:
                if path.exists():
                    os.remove(path)
                    logger.info("Deleted image: %s", path.name)
            except OSError as e:
                # Best-effort: an orphaned file is not a client error
                logger.warning("Failed to delete image %s: %s", path, str(e))

    async def health_check(self) -> bool:
        return self.storage_root.is_dir() and os.access(self.storage_root, os.W_OK)
