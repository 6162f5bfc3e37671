"""
Foodbabes Backend: FastAPI Dependencies
=========================================

What:  Injectable accessors for the objects the lifespan builds, and the
       access-token authentication gate.
How:   Everything is read from `request.app.state`, so tests can wire an
       app with their own Database, ImageStorage and Settings.

Auth Gate:
    GET /users/current depends on authenticate_user(), which resolves the
    Authorization header to a User and attaches it to request.state.user.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from foodbabes.config import Settings
from foodbabes.database import get_db_session
from foodbabes.models.user import User
from foodbabes.services.image_storage import ImageStorage
from foodbabes.services.user_service import UserService, parse_authorization


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_image_storage(request: Request) -> ImageStorage:
    return request.app.state.image_storage


def get_user_service(settings: Settings = Depends(get_settings)) -> UserService:
    return UserService(token_bytes=settings.access_token_bytes)


async def authenticate_user(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
    users: UserService = Depends(get_user_service),
) -> User:
    token = parse_authorization(request.headers.get("Authorization"))
    user = await users.authenticate(db, token)
    request.state.user = user
    return user
