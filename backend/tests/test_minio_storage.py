"""
Foodbabes Backend: MinIO Image Storage Unit Tests
===================================================

What:  MinioImageStorage against a mocked Minio client.
How:   MagicMock client; no network. The SDK calls run through
       asyncio.to_thread exactly as in production.
"""

from unittest.mock import MagicMock

import pytest

from foodbabes.config import Settings
from foodbabes.exceptions import ImageStorageError, ValidationError
from foodbabes.services.image_storage import create_image_storage
from foodbabes.services.minio_storage import MinioImageStorage


def _storage(client):
    return MinioImageStorage(
        client=client,
        bucket="foodbabes",
        public_base_url="http://minio.local:9000/",
    )


class TestMinioUpload:

    def setup_method(self):
        self.client = MagicMock()
        self.client.bucket_exists.return_value = True
        self.storage = _storage(self.client)

    @pytest.mark.asyncio
    async def test_upload_puts_object_and_returns_bucket_url(self, png_bytes):
        uploaded = await self.storage.upload("dish.png", png_bytes)

        self.client.put_object.assert_called_once()
        kwargs = self.client.put_object.call_args.kwargs
        assert kwargs["bucket_name"] == "foodbabes"
        assert kwargs["object_name"] == f"{uploaded.public_id}.png"
        assert kwargs["content_type"] == "image/png"
        assert kwargs["length"] == uploaded.size
        assert uploaded.url == f"http://minio.local:9000/foodbabes/{uploaded.public_id}.png"

    @pytest.mark.asyncio
    async def test_missing_bucket_is_created_once(self, png_bytes):
        self.client.bucket_exists.return_value = False

        await self.storage.upload("a.png", png_bytes)
        await self.storage.upload("b.png", png_bytes)

        self.client.make_bucket.assert_called_once_with(bucket_name="foodbabes")

    @pytest.mark.asyncio
    async def test_backend_failure_raises_storage_error(self, png_bytes):
        self.client.put_object.side_effect = ConnectionError("minio unreachable")

        with pytest.raises(ImageStorageError):
            await self.storage.upload("dish.png", png_bytes)

    @pytest.mark.asyncio
    async def test_invalid_image_never_reaches_backend(self):
        with pytest.raises(ValidationError):
            await self.storage.upload("dish.png", b"not an image")
        self.client.put_object.assert_not_called()


class TestMinioDeleteAndHealth:

    def setup_method(self):
        self.client = MagicMock()
        self.storage = _storage(self.client)

    @pytest.mark.asyncio
    async def test_delete_removes_every_rendition(self):
        await self.storage.delete("food/abc")

        removed = {call.kwargs["object_name"] for call in self.client.remove_object.call_args_list}
        assert removed == {"food/abc.jpg", "food/abc.png"}

    @pytest.mark.asyncio
    async def test_delete_failure_is_logged_not_raised(self):
        self.client.remove_object.side_effect = ConnectionError("down")
        await self.storage.delete("food/abc")

    @pytest.mark.asyncio
    async def test_health_check_reports_bucket(self):
        self.client.bucket_exists.return_value = True
        assert await self.storage.health_check() is True

    @pytest.mark.asyncio
    async def test_health_check_false_when_unreachable(self):
        self.client.bucket_exists.side_effect = ConnectionError("down")
        assert await self.storage.health_check() is False


class TestMinioFactory:

    def test_minio_backend_selected_from_settings(self):
        settings = Settings(
            _env_file=None,
            image_storage_backend="minio",
            minio_endpoint="minio.local:9000",
            minio_access_key="access",
            minio_secret_key="secret",
            minio_bucket="dishes",
            minio_public_base_url="https://cdn.example.com",
        )
        storage = create_image_storage(settings)

        assert isinstance(storage, MinioImageStorage)
        assert storage.bucket == "dishes"
        assert storage.public_base_url == "https://cdn.example.com"
        assert storage.folder == "food"
