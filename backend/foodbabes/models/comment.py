"""
Foodbabes Backend: Comment SQLAlchemy Model
=============================================

What:  ORM model for the `comments` table (the "happy thoughts" board).
How:   Created by POST /; the only mutation afterwards is the atomic
       `likes = likes + 1` issued by POST /{id}/like.

Table Design:
    - message: 5 to 140 characters, enforced by a CHECK constraint as well
      as by the request schema
    - likes: starts at 0, only ever incremented (CHECK likes >= 0)
    - created_at: set by the server at insert time, never client-supplied

Index on created_at DESC:
    Serves the only list query: latest 20 comments, newest first.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, DateTime, Index, Integer, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from foodbabes.database import Base

MESSAGE_MIN_LENGTH = 5
MESSAGE_MAX_LENGTH = 140


class Comment(Base):
    """
    A short message that other visitors can like.

    Query Patterns:
        - Latest comments: ORDER BY created_at DESC LIMIT 20
        - Single comment / like: WHERE id = :uuid (primary key)
    """

    __tablename__ = "comments"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    message: Mapped[str] = mapped_column(
        String(MESSAGE_MAX_LENGTH),
        nullable=False,
    )

    likes: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        CheckConstraint(
            f"length(message) >= {MESSAGE_MIN_LENGTH} AND length(message) <= {MESSAGE_MAX_LENGTH}",
            name="ck_comments_message_length",
        ),
        CheckConstraint("likes >= 0", name="ck_comments_likes_non_negative"),
        Index("idx_comments_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Comment(id={self.id}, likes={self.likes}, created_at='{self.created_at}')>"
