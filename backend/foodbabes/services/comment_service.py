"""
Foodbabes Backend: Comment Service
====================================

What:  Business logic for the comment board: create, list latest, fetch,
       and like.
How:   Stateless; each call receives the request's AsyncSession. Writes are
       committed before the response is built so a re-fetch sees the same
       record.
Who:   Called by routes/comments.py.

Like Semantics:
    UPDATE comments SET likes = likes + 1 WHERE id = :id
    The increment happens in the store, so N concurrent likes add exactly N
    without any application-level locking.

Not-Found Convention:
    get_comment() and like_comment() return None for an unknown id; the
    route serializes that as a JSON `null` with HTTP 200.
"""

import logging
import uuid
from typing import Any, List, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from foodbabes.exceptions import StoreError, ValidationError
from foodbabes.models.comment import Comment
from foodbabes.schemas.comment import CommentCreate, CommentResponse
from foodbabes.schemas.common import field_errors

logger = logging.getLogger(__name__)

LATEST_COMMENTS_LIMIT = 20


def parse_comment_id(comment_id: str) -> Optional[uuid.UUID]:
    """Parse a path id; None when it is not a UUID."""
    try:
        return uuid.UUID(str(comment_id))
    except ValueError:
        return None


class CommentService:
    """
    Business logic for the comment board.

    Responsibilities:
        - list_latest() / get_comment(): reads, newest first
        - create_comment(): validation and insert with server-set fields
        - like_comment(): single-statement increment, safe under concurrency
    """

    async def list_latest(self, db: AsyncSession) -> List[CommentResponse]:
        """
        Latest comments, newest first.

        Store errors are not translated here; they reach the catch-all
        handler as a 500.
        """
        result = await db.execute(
            select(Comment)
            .order_by(Comment.created_at.desc())
            .limit(LATEST_COMMENTS_LIMIT)
        )
        return [CommentResponse.model_validate(c) for c in result.scalars().all()]

    async def get_comment(self, db: AsyncSession, comment_id: str) -> Optional[CommentResponse]:
        """Point lookup. A malformed id is treated as not found."""
        parsed = parse_comment_id(comment_id)
        if parsed is None:
            return None

        comment = await db.get(Comment, parsed)
        if comment is None:
            return None
        return CommentResponse.model_validate(comment)

    async def create_comment(self, db: AsyncSession, payload: Any) -> CommentResponse:
        """
        Validate and persist a new comment.

        Only `message` is read from the payload: likes always start at 0
        and createdAt is set by the server.

        Raises:
            ValidationError: message missing or outside 5..140 characters
            StoreError: the insert failed
        """
        try:
            data = CommentCreate.model_validate(payload if payload is not None else {})
        except PydanticValidationError as e:
            raise ValidationError(message="Could not create comment", errors=field_errors(e))

        comment = Comment(message=data.message, likes=0)
        try:
            db.add(comment)
            await db.commit()
            await db.refresh(comment)
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Failed to store comment: %s", str(e))
            raise StoreError.from_exception("Could not create comment", e)

        logger.info("Comment created: %s", comment.id)
        return CommentResponse.model_validate(comment)

    async def like_comment(self, db: AsyncSession, comment_id: str) -> Optional[CommentResponse]:
        """
        Atomically increment likes and return the updated comment.

        Returns None when no comment has this id.

        Raises:
            ValidationError: the id is not a valid identifier
            StoreError: the update failed
        """
        parsed = parse_comment_id(comment_id)
        if parsed is None:
            raise ValidationError(
                message="Could not like comment",
                field="id",
                kind="uuid_parsing",
                value=comment_id,
            )

        try:
            result = await db.execute(
                update(Comment)
                .where(Comment.id == parsed)
                .values(likes=Comment.likes + 1)
                .execution_options(synchronize_session=False)
            )
            await db.commit()
            if result.rowcount == 0:
                return None

            refreshed = await db.execute(
                select(Comment)
                .where(Comment.id == parsed)
                .execution_options(populate_existing=True)
            )
            comment = refreshed.scalar_one()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Failed to like comment %s: %s", comment_id, str(e))
            raise StoreError.from_exception("Could not like comment", e)

        return CommentResponse.model_validate(comment)


comment_service = CommentService()
