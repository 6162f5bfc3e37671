"""
Foodbabes Backend: User, Session and Auth Schemas
===================================================

What:  Request and response models for registration, login and the
       current-user endpoint.

Response shapes are deliberately different per endpoint:
    POST /users        → {id, accessToken}
    POST /sessions     → {userId, accessToken}  or  {notFound: true}
    GET /users/current → {_id, name, accessToken}
The password hash is never part of any response.
"""

import uuid

from pydantic import BaseModel, Field

from foodbabes.models.user import NAME_MAX_LENGTH


class UserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    password: str = Field(min_length=1)


class SessionCreate(BaseModel):
    name: str
    password: str


class UserCreatedResponse(BaseModel):
    id: uuid.UUID
    access_token: str = Field(serialization_alias="accessToken")


class SessionResponse(BaseModel):
    user_id: uuid.UUID = Field(serialization_alias="userId")
    access_token: str = Field(serialization_alias="accessToken")


class SessionNotFoundResponse(BaseModel):
    """Login failure: unknown name or wrong password, returned with HTTP 200."""
    not_found: bool = Field(default=True, serialization_alias="notFound")


class UserResponse(BaseModel):
    id: uuid.UUID = Field(serialization_alias="_id")
    name: str
    access_token: str = Field(serialization_alias="accessToken")

    model_config = {"from_attributes": True}
