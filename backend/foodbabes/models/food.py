"""
Foodbabes Backend: Food Post SQLAlchemy Model
===============================================

What:  ORM model for the `foods` table: one row per shared dish.
How:   Rows are created by POST /foods after the image upload succeeds.
       They are never updated or deleted through the API.

Table Design:
    - image_url / image_id: written together from the upload result
      (CHECK constraint keeps them both-or-neither)
    - link: external recipe or restaurant link (the API also accepts `url`)
    - restaurant_id: optional integer reference to a restaurant listing
"""

import uuid
from typing import Optional

from sqlalchemy import CheckConstraint, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from foodbabes.database import Base


class Food(Base):
    """A food post with its uploaded image."""

    __tablename__ = "foods"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    link: Mapped[Optional[str]] = mapped_column(String(2048), nullable=True)

    # Public URL returned by the image storage backend
    image_url: Mapped[Optional[str]] = mapped_column(String(2048), nullable=True)

    # Opaque storage reference, e.g. "food/3f2a...". Used for deletion.
    image_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    type: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    restaurant_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "(image_url IS NULL) = (image_id IS NULL)",
            name="ck_foods_image_fields_together",
        ),
    )

    def __repr__(self) -> str:
        return f"<Food(id={self.id}, title='{self.title}', image_id='{self.image_id}')>"
