"""
Foodbabes Backend: User and Session Route Handlers
====================================================

What:  POST /users (register), POST /sessions (login), GET /users/current.
How:   Register and login delegate to UserService; the current-user route
       is guarded by the authenticate_user dependency.
"""

from typing import Any, Union

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from foodbabes.database import get_db_session
from foodbabes.dependencies import authenticate_user, get_user_service
from foodbabes.models.user import User
from foodbabes.schemas.common import ErrorResponse, LoggedOutResponse, TokenErrorResponse
from foodbabes.schemas.user import (
    SessionNotFoundResponse,
    SessionResponse,
    UserCreatedResponse,
    UserResponse,
)
from foodbabes.services.user_service import UserService

router = APIRouter(tags=["Users"])


@router.post(
    "/users",
    status_code=201,
    response_model=UserCreatedResponse,
    responses={400: {"description": "Invalid name or password", "model": ErrorResponse}},
    summary="Register a user",
)
async def create_user(
    payload: Any = Body(None),
    db: AsyncSession = Depends(get_db_session),
    users: UserService = Depends(get_user_service),
) -> UserCreatedResponse:
    return await users.register(db, payload)


@router.post(
    "/sessions",
    response_model=Union[SessionResponse, SessionNotFoundResponse],
    summary="Log in with name and password",
)
async def create_session(
    payload: Any = Body(None),
    db: AsyncSession = Depends(get_db_session),
    users: UserService = Depends(get_user_service),
) -> Union[SessionResponse, SessionNotFoundResponse]:
    return await users.login(db, payload)


@router.get(
    "/users/current",
    response_model=UserResponse,
    responses={
        401: {"description": "Missing or unknown access token", "model": LoggedOutResponse},
        403: {"description": "Token lookup failed", "model": TokenErrorResponse},
    },
    summary="The user owning the presented access token",
)
async def current_user(user: User = Depends(authenticate_user)) -> UserResponse:
    return UserResponse.model_validate(user)
