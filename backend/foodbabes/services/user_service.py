"""
Foodbabes Backend: User Service
=================================

What:  Registration, login and access-token authentication.
How:   Passwords are hashed with werkzeug's salted one-way hash and checked
       with check_password_hash (constant-time comparison). Access tokens
       are `secrets.token_hex(ACCESS_TOKEN_BYTES)`, generated once at
       registration and never rotated.
Who:   routes/users.py and the authenticate_user dependency.

Outcomes:
    register()      → UserCreatedResponse | ValidationError | StoreError
    login()         → SessionResponse | SessionNotFoundResponse
    authenticate()  → User | AuthenticationError | TokenLookupError
"""

import logging
import secrets
from typing import Any, Optional, Union

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from werkzeug.security import check_password_hash, generate_password_hash

from foodbabes.exceptions import (
    AuthenticationError,
    StoreError,
    TokenLookupError,
    ValidationError,
)
from foodbabes.models.user import User
from foodbabes.schemas.common import field_errors
from foodbabes.schemas.user import (
    SessionCreate,
    SessionNotFoundResponse,
    SessionResponse,
    UserCreate,
    UserCreatedResponse,
)

logger = logging.getLogger(__name__)


class UserService:
    """
    Business logic for users and sessions.

    Responsibilities:
        - register(): validate, hash the password, issue the access token
        - login(): name and password check, returns the stored token
        - authenticate(): token to user for the auth gate

    token_bytes is the amount of randomness per token; the hex form is
    twice as long.
    """

    def __init__(self, token_bytes: int = 128):
        self.token_bytes = token_bytes

    def new_access_token(self) -> str:
        """A fresh random hex token, issued once at registration."""
        return secrets.token_hex(self.token_bytes)

    async def register(self, db: AsyncSession, payload: Any) -> UserCreatedResponse:
        """
        Create a user and return its id and access token.

        The password is stored only as a werkzeug hash.

        Raises:
            ValidationError: name or password missing or out of bounds
            StoreError: the insert failed
        """
        try:
            data = UserCreate.model_validate(payload if payload is not None else {})
        except PydanticValidationError as e:
            raise ValidationError(message="Could not create user", errors=field_errors(e))

        user = User(
            name=data.name,
            password=generate_password_hash(data.password),
            access_token=self.new_access_token(),
        )
        try:
            db.add(user)
            await db.commit()
            await db.refresh(user)
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Failed to store user: %s", str(e))
            raise StoreError.from_exception("Could not create user", e)

        logger.info("User registered: %s", user.id)
        return UserCreatedResponse(id=user.id, access_token=user.access_token)

    async def login(
        self, db: AsyncSession, payload: Any
    ) -> Union[SessionResponse, SessionNotFoundResponse]:
        """
        Names are not unique: the first user with this name whose password
        matches wins. Unknown name, wrong password and malformed bodies all
        answer {notFound: true}.
        """
        try:
            data = SessionCreate.model_validate(payload if payload is not None else {})
        except PydanticValidationError:
            return SessionNotFoundResponse()

        result = await db.execute(select(User).where(User.name == data.name))
        for user in result.scalars().all():
            if check_password_hash(user.password, data.password):
                return SessionResponse(user_id=user.id, access_token=user.access_token)

        logger.info("Login failed for name=%r", data.name)
        return SessionNotFoundResponse()

    async def authenticate(self, db: AsyncSession, token: Optional[str]) -> User:
        """
        Resolve a bearer token to its user.

        Raises:
            AuthenticationError: no token, or no user owns it (401)
            TokenLookupError: the lookup itself failed (403)
        """
        if not token:
            raise AuthenticationError()

        try:
            result = await db.execute(select(User).where(User.access_token == token))
            user = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Access token lookup failed: %s", str(e))
            raise TokenLookupError(error=type(e).__name__, context={"error": str(e)})

        if user is None:
            raise AuthenticationError()
        return user


def parse_authorization(header: Optional[str]) -> Optional[str]:
    """The raw token, or the value after a `Bearer ` prefix."""
    if not header:
        return None
    value = header.strip()
    scheme, _, rest = value.partition(" ")
    if rest and scheme.lower() == "bearer":
        return rest.strip() or None
    return value
