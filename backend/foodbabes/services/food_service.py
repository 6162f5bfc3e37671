"""
Foodbabes Backend: Food Post Service
======================================

What:  Orchestrates the food post workflow: validate form → upload image →
       persist the post.
How:   Stateless; receives the request's AsyncSession and the ImageStorage
       placed on app.state by the lifespan.
Who:   Called by routes/foods.py.

Orchestration Flow (POST /foods):
    ┌──────────┐    ┌──────────────┐    ┌───────────────┐    ┌──────────┐
    │  Form    │───▶│  Validate    │───▶│ ImageStorage  │───▶│  Store   │
    │  (Route) │    │  fields +    │    │ upload()      │    │  (DB)    │
    └──────────┘    │  image given │    └───────────────┘    └──────────┘
                    └──────────────┘

    Validation fails  → ValidationError (400), nothing uploaded
    Upload rejected   → ValidationError (400), errors under "image"
    Provider failure  → ImageStorageError (500)
    Insert fails      → uploaded image deleted, StoreError (400)
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from foodbabes.exceptions import StoreError, ValidationError
from foodbabes.models.food import Food
from foodbabes.schemas.common import field_errors
from foodbabes.schemas.food import FoodCreate, FoodResponse
from foodbabes.services.image_storage import ImageStorage

logger = logging.getLogger(__name__)

CREATE_FAILED = "Could not create post"


class FoodService:
    """
    Business logic for food posts.

    Responsibilities:
        - validate_form(): field and image-presence checks in one pass
        - create_food(): validate, upload, persist, compensate on failure
        - list_foods() / get_food(): reads
    """

    def validate_form(self, fields: Dict[str, Any], has_image: bool) -> FoodCreate:
        """
        Validate the text fields and the presence of an image together, so a
        client sees every problem in one response.
        """
        errors: Dict[str, Dict[str, Any]] = {}
        data: Optional[FoodCreate] = None

        try:
            data = FoodCreate.model_validate(fields)
        except PydanticValidationError as e:
            errors.update(field_errors(e))

        if not has_image:
            errors["image"] = {
                "message": "An image file is required",
                "kind": "required",
                "path": "image",
                "value": None,
            }

        if errors:
            raise ValidationError(message=CREATE_FAILED, errors=errors)
        return data

    async def create_food(
        self,
        db: AsyncSession,
        storage: ImageStorage,
        fields: Dict[str, Any],
        filename: Optional[str] = None,
        content: Optional[bytes] = None,
        content_length: Optional[int] = None,
    ) -> FoodResponse:
        """
        Create a food post with its image.

        The upload always completes before the row is written; the row
        references the URL and public id the storage returned.

        Raises:
            ValidationError: form field, missing image or unsupported image
            ImageStorageError: the storage backend failed
            StoreError: the insert failed (the uploaded image is removed)
        """
        data = self.validate_form(fields, has_image=content is not None)

        try:
            uploaded = await storage.upload(
                filename=filename or "",
                content=content,
                content_length=content_length,
            )
        except ValidationError as e:
            raise ValidationError(message=CREATE_FAILED, errors=e.errors, context=e.context)

        food = Food(
            title=data.title,
            link=data.link,
            description=data.description,
            type=data.type,
            restaurant_id=data.restaurant_id,
            image_url=uploaded.url,
            image_id=uploaded.public_id,
        )
        try:
            db.add(food)
            await db.commit()
            await db.refresh(food)
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Failed to store food post, removing image %s: %s", uploaded.public_id, str(e))
            await storage.delete(uploaded.public_id)
            raise StoreError.from_exception(CREATE_FAILED, e)

        logger.info("Food post created: %s (image %s)", food.id, uploaded.public_id)
        return FoodResponse.model_validate(food)

    async def list_foods(self, db: AsyncSession) -> List[FoodResponse]:
        """All food posts, in store order."""
        try:
            result = await db.execute(select(Food))
            foods = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing foods: %s", str(e))
            raise StoreError.from_exception("Could not find food", e)
        return [FoodResponse.model_validate(f) for f in foods]

    async def get_food(self, db: AsyncSession, food_id: str) -> Optional[FoodResponse]:
        """Point lookup. A malformed or unknown id returns None."""
        try:
            parsed = uuid.UUID(str(food_id))
        except ValueError:
            return None

        food = await db.get(Food, parsed)
        if food is None:
            return None
        return FoodResponse.model_validate(food)


food_service = FoodService()
