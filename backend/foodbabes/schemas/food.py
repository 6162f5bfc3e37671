"""
Foodbabes Backend: Food Post Schemas
======================================

What:  Form validation and response models for the food endpoints.

FoodCreate validates the multipart form fields of POST /foods. The image
itself is validated by the image storage (format, size, decodability).

`link` and `url` are the same field: older clients send `url`. The response
echoes the value under both names.
"""

import uuid
from typing import Optional

from pydantic import BaseModel, Field, computed_field, field_validator, model_validator


class FoodCreate(BaseModel):
    title: Optional[str] = Field(default=None, max_length=255)
    link: Optional[str] = Field(default=None, max_length=2048)
    description: Optional[str] = None
    type: Optional[str] = Field(default=None, max_length=100)
    restaurant_id: Optional[int] = Field(default=None, alias="restaurantId")

    model_config = {"populate_by_name": True}

    @model_validator(mode="before")
    @classmethod
    def accept_url_alias(cls, data):
        if isinstance(data, dict) and not data.get("link") and data.get("url"):
            data = {**data, "link": data["url"]}
        return data

    @field_validator("restaurant_id", mode="before")
    @classmethod
    def blank_restaurant_id(cls, v):
        # Empty form fields arrive as ""
        if isinstance(v, str) and not v.strip():
            return None
        return v


class FoodResponse(BaseModel):
    """
    What:  A stored food post.
    Who:   Returned by POST /foods, GET /foods and GET /foods/{id}.
    """
    id: uuid.UUID = Field(serialization_alias="_id")
    title: Optional[str] = None
    link: Optional[str] = None
    image_url: Optional[str] = Field(default=None, serialization_alias="imageUrl")
    image_id: Optional[str] = Field(default=None, serialization_alias="imageId")
    description: Optional[str] = None
    type: Optional[str] = None
    restaurant_id: Optional[int] = Field(default=None, serialization_alias="restaurantId")

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def url(self) -> Optional[str]:
        return self.link
