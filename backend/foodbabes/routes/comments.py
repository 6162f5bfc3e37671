"""
Foodbabes Backend: Comment Route Handlers
===========================================

What:  The comment board, mounted at the root path:
       GET /, GET /{comment_id}, POST /, POST /{comment_id}/like.
How:   Thin handlers over CommentService.

This router is included last: `/{comment_id}` would otherwise shadow
/foods, /users, /health and the docs.
"""

import logging
from typing import Any, List, Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from foodbabes.database import get_db_session
from foodbabes.schemas.comment import CommentResponse
from foodbabes.schemas.common import ErrorResponse
from foodbabes.services.comment_service import comment_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Comments"])


@router.get(
    "/",
    response_model=List[CommentResponse],
    summary="Latest 20 comments, newest first",
)
async def list_comments(db: AsyncSession = Depends(get_db_session)) -> List[CommentResponse]:
    return await comment_service.list_latest(db)


@router.get(
    "/{comment_id}",
    response_model=Optional[CommentResponse],
    summary="Get a comment by id (null when unknown)",
)
async def get_comment(
    comment_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> Optional[CommentResponse]:
    return await comment_service.get_comment(db, comment_id)


@router.post(
    "/",
    status_code=201,
    response_model=CommentResponse,
    responses={400: {"description": "Invalid message", "model": ErrorResponse}},
    summary="Post a comment",
)
async def create_comment(
    payload: Any = Body(None),
    db: AsyncSession = Depends(get_db_session),
) -> CommentResponse:
    return await comment_service.create_comment(db, payload)


@router.post(
    "/{comment_id}/like",
    response_model=Optional[CommentResponse],
    responses={400: {"description": "Malformed id or store error", "model": ErrorResponse}},
    summary="Like a comment; returns the updated comment (null when unknown)",
)
async def like_comment(
    comment_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> Optional[CommentResponse]:
    return await comment_service.like_comment(db, comment_id)
