"""
Foodbabes Backend: Comment Schemas
====================================

What:  Request and response models for the comment endpoints.

Request:
    CommentCreate: only `message` is accepted. Unknown keys such as `likes`
    or `createdAt` are ignored, so clients cannot seed counters or dates.

Response:
    CommentResponse: {_id, message, likes, createdAt}
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from foodbabes.models.comment import MESSAGE_MAX_LENGTH, MESSAGE_MIN_LENGTH


class CommentCreate(BaseModel):
    message: str = Field(
        min_length=MESSAGE_MIN_LENGTH,
        max_length=MESSAGE_MAX_LENGTH,
        description="Comment text, 5 to 140 characters",
    )


class CommentResponse(BaseModel):
    """
    What:  A stored comment.
    Who:   Returned by GET /, GET /{id}, POST / and POST /{id}/like.
    """
    id: uuid.UUID = Field(serialization_alias="_id", description="Store-assigned identity")
    message: str
    likes: int = Field(ge=0)
    created_at: datetime = Field(serialization_alias="createdAt")

    model_config = {"from_attributes": True}
