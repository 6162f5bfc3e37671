"""
Foodbabes Backend: Food Post Route Handlers
=============================================

What:  POST /foods (multipart upload), GET /foods, GET /foods/{id}.
How:   Reads the form and the image, delegates to FoodService, returns JSON.

Request Flow (POST /foods):
    1. Client sends multipart/form-data: text fields + one `image` file
    2. The image is read into memory (bounded by MAX_FILE_SIZE validation)
    3. FoodService validates, uploads, then persists
    4. 200 with the created post; errors via global exception handlers
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from foodbabes.database import get_db_session
from foodbabes.dependencies import get_image_storage
from foodbabes.schemas.common import ErrorResponse
from foodbabes.schemas.food import FoodResponse
from foodbabes.services.food_service import food_service
from foodbabes.services.image_storage import ImageStorage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/foods", tags=["Foods"])


@router.post(
    "",
    response_model=FoodResponse,
    responses={
        400: {"description": "Invalid form fields or image", "model": ErrorResponse},
        500: {"description": "Image storage failed", "model": ErrorResponse},
    },
    summary="Share a food post with an image",
)
async def create_food(
    title: Optional[str] = Form(None),
    link: Optional[str] = Form(None),
    url: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    type: Optional[str] = Form(None),
    restaurant_id: Optional[str] = Form(None, alias="restaurantId"),
    image: Optional[UploadFile] = File(None, description="JPG or PNG, resized to fit 500x500"),
    db: AsyncSession = Depends(get_db_session),
    storage: ImageStorage = Depends(get_image_storage),
) -> FoodResponse:
    fields = {
        "title": title,
        "link": link,
        "url": url,
        "description": description,
        "type": type,
        "restaurantId": restaurant_id,
    }

    filename: Optional[str] = None
    content: Optional[bytes] = None
    content_length: Optional[int] = None
    if image is not None:
        try:
            content = await image.read()
            filename = image.filename
            content_length = image.size
        finally:
            await image.close()
        # An empty file part with no name is what browsers send for "no file"
        if not filename and not content:
            content = None

    logger.info(
        "Received food post: filename=%s, size=%s bytes",
        filename or "none",
        len(content) if content is not None else "-",
    )

    return await food_service.create_food(
        db=db,
        storage=storage,
        fields=fields,
        filename=filename,
        content=content,
        content_length=content_length,
    )


@router.get(
    "",
    response_model=List[FoodResponse],
    responses={400: {"description": "Store error", "model": ErrorResponse}},
    summary="List all food posts",
)
async def list_foods(db: AsyncSession = Depends(get_db_session)) -> List[FoodResponse]:
    return await food_service.list_foods(db)


@router.get(
    "/{food_id}",
    response_model=Optional[FoodResponse],
    summary="Get a food post by id (null when unknown)",
)
async def get_food(food_id: str, db: AsyncSession = Depends(get_db_session)) -> Optional[FoodResponse]:
    return await food_service.get_food(db, food_id)
