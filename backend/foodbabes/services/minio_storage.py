"""
Foodbabes Backend: MinIO Image Storage
========================================

What:  Stores processed food images in an S3-compatible MinIO bucket.
How:   The minio SDK is synchronous, so each call runs in a worker thread
       via asyncio.to_thread. The bucket is created on first upload.
Who:   Selected with IMAGE_STORAGE_BACKEND=minio.

Object layout:
    <bucket>/food/<uuid>.<ext>
    public URL: <MINIO_PUBLIC_BASE_URL>/<bucket>/food/<uuid>.<ext>
"""

import asyncio
import io
import logging
import threading

import urllib3
from minio import Minio
from minio.error import MinioException

from foodbabes.config import Settings
from foodbabes.exceptions import ImageStorageError
from foodbabes.services.image_storage import STORED_FORMATS, ImageStorage

logger = logging.getLogger(__name__)

# Errors the SDK surfaces for an unreachable or misconfigured backend
BACKEND_ERRORS = (MinioException, urllib3.exceptions.HTTPError, OSError, ValueError)


class MinioImageStorage(ImageStorage):

    def __init__(
        self,
        client: Minio,
        bucket: str,
        public_base_url: str,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.client = client
        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip("/")
        self._bucket_ready = False
        self._bucket_lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "MinioImageStorage":
        timeout = urllib3.Timeout(
            connect=settings.minio_connect_timeout,
            read=settings.minio_read_timeout,
        )
        http_client = urllib3.PoolManager(timeout=timeout, retries=False)
        client = Minio(
            settings.minio_endpoint,
            access_key=settings.minio_access_key,
            secret_key=settings.minio_secret_key,
            secure=settings.minio_secure,
            http_client=http_client,
        )
        logger.info(
            "MinioImageStorage initialized: endpoint=%s, bucket=%s",
            settings.minio_endpoint,
            settings.minio_bucket,
        )
        return cls(
            client=client,
            bucket=settings.minio_bucket,
            public_base_url=settings.minio_public_base_url,
            **kwargs,
        )

    def _ensure_bucket(self) -> None:
        with self._bucket_lock:
            if self._bucket_ready:
                return
            if not self.client.bucket_exists(bucket_name=self.bucket):
                self.client.make_bucket(bucket_name=self.bucket)
                logger.info("Created bucket %s", self.bucket)
            self._bucket_ready = True

    def _put_sync(self, object_name: str, data: bytes, content_type: str) -> None:
        self._ensure_bucket()
        self.client.put_object(
            bucket_name=self.bucket,
            object_name=object_name,
            data=io.BytesIO(data),
            length=len(data),
            content_type=content_type,
        )

    async def _put(self, public_id: str, extension: str, data: bytes, content_type: str) -> str:
        object_name = f"{public_id}.{extension}"
        try:
            await asyncio.to_thread(self._put_sync, object_name, data, content_type)
        except BACKEND_ERRORS as e:
            logger.error("MinIO upload failed for %s: %s", object_name, str(e))
            raise ImageStorageError(
                context={"bucket": self.bucket, "object": object_name, "error": str(e)},
            )
        return f"{self.public_base_url}/{self.bucket}/{object_name}"

    async def delete(self, public_id: str) -> None:
        for extension, _ in STORED_FORMATS.values():
            object_name = f"{public_id}.{extension}"
            try:
                # remove_object succeeds for missing keys
                await asyncio.to_thread(
                    self.client.remove_object,
                    bucket_name=self.bucket,
                    object_name=object_name,
                )
            except BACKEND_ERRORS as e:
                logger.warning("Failed to delete object %s: %s", object_name, str(e))

    async def health_check(self) -> bool:
        try:
            return await asyncio.to_thread(self.client.bucket_exists, bucket_name=self.bucket)
        except BACKEND_ERRORS as e:
            logger.warning("MinIO health check failed: %s", str(e))
            return False
