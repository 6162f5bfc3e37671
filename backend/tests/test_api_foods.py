"""
Foodbabes Backend: Food Endpoint Tests
========================================

What:  POST /foods (multipart), GET /foods, GET /foods/{id}, and serving
       the stored image from GET /files/{path}.
"""

import io
import uuid
from unittest.mock import AsyncMock

import pytest
from PIL import Image

from foodbabes.exceptions import ImageStorageError

FORM = {
    "title": "Tacos",
    "link": "https://example.com/tacos",
    "description": "Al pastor with pineapple",
    "type": "Mexican",
    "restaurantId": "12",
}


async def _create(client, png, data=None):
    return await client.post(
        "/foods",
        data=data or FORM,
        files={"image": ("tacos.png", png, "image/png")},
    )


class TestCreateFoodEndpoint:

    @pytest.mark.asyncio
    async def test_create_returns_record(self, test_client, png_bytes):
        response = await _create(test_client, png_bytes)

        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Tacos"
        assert body["restaurantId"] == 12
        assert body["link"] == body["url"] == "https://example.com/tacos"
        assert body["imageId"].startswith("food/")
        assert body["imageUrl"] == f"http://test/files/{body['imageId']}.png"
        assert "_id" in body

    @pytest.mark.asyncio
    async def test_url_field_accepted(self, test_client, png_bytes):
        data = {k: v for k, v in FORM.items() if k != "link"}
        data["url"] = "https://example.com/burrito"

        response = await _create(test_client, png_bytes, data)

        assert response.json()["link"] == "https://example.com/burrito"

    @pytest.mark.asyncio
    async def test_missing_image(self, test_client, image_storage):
        response = await test_client.post("/foods", data=FORM)

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Could not create post"
        assert body["errors"]["image"]["kind"] == "required"
        assert (await test_client.get("/foods")).json() == []
        assert not (image_storage.storage_root / "food").exists()

    @pytest.mark.asyncio
    async def test_unsupported_file(self, test_client):
        response = await test_client.post(
            "/foods",
            data=FORM,
            files={"image": ("menu.pdf", b"%PDF-1.4", "application/pdf")},
        )
        assert response.status_code == 400
        assert response.json()["errors"]["image"]["kind"] == "format"

    @pytest.mark.asyncio
    async def test_huge_dimensions_rejected(self, test_client, make_png_header):
        response = await test_client.post(
            "/foods",
            data=FORM,
            files={"image": ("bomb.png", make_png_header(20000, 20000), "image/png")},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Could not create post"
        assert body["errors"]["image"]["kind"] == "size"
        assert (await test_client.get("/foods")).json() == []

    @pytest.mark.asyncio
    async def test_invalid_restaurant_id(self, test_client, png_bytes):
        response = await _create(test_client, png_bytes, {**FORM, "restaurantId": "twelve"})

        assert response.status_code == 400
        assert "restaurantId" in response.json()["errors"]

    @pytest.mark.asyncio
    async def test_large_image_is_resized(self, test_client, make_image):
        response = await test_client.post(
            "/foods",
            data=FORM,
            files={"image": ("big.jpg", make_image(1200, 600, "JPEG"), "image/jpeg")},
        )
        image_path = response.json()["imageUrl"].replace("http://test", "")

        served = await test_client.get(image_path)

        assert served.status_code == 200
        with Image.open(io.BytesIO(served.content)) as image:
            assert image.size == (500, 250)

    @pytest.mark.asyncio
    async def test_provider_failure_is_500(self, app, test_client, png_bytes):
        failing = AsyncMock()
        failing.upload.side_effect = ImageStorageError()
        app.state.image_storage = failing

        response = await _create(test_client, png_bytes)

        assert response.status_code == 500
        assert response.json() == {"message": "Image upload failed. Please try again."}


class TestReadFoods:

    @pytest.mark.asyncio
    async def test_list_and_round_trip(self, test_client, png_bytes):
        created = (await _create(test_client, png_bytes)).json()

        listed = await test_client.get("/foods")
        fetched = await test_client.get(f"/foods/{created['_id']}")

        assert listed.json() == [created]
        assert fetched.json() == created

    @pytest.mark.asyncio
    async def test_unknown_food_is_null(self, test_client):
        response = await test_client.get(f"/foods/{uuid.uuid4()}")
        assert response.status_code == 200
        assert response.json() is None

    @pytest.mark.asyncio
    async def test_store_failure(self, test_client, database):
        await database.drop_all()

        response = await test_client.get("/foods")

        assert response.status_code == 400
        assert response.json()["message"] == "Could not find food"

    @pytest.mark.asyncio
    async def test_missing_file_is_404(self, test_client):
        response = await test_client.get("/files/food/missing.png")
        assert response.status_code == 404
