"""
Foodbabes Backend: User Service Unit Tests
============================================

What:  Registration, login and token authentication.

What we test:
    ✅ Passwords are stored hashed, tokens are hex of the configured size
    ✅ Name length limit
    ✅ Login outcomes: token, {notFound: true} for every failure
    ✅ Authentication: 401 vs 403 conditions
"""

import pytest
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.security import check_password_hash

from foodbabes.exceptions import AuthenticationError, TokenLookupError, ValidationError
from foodbabes.models.user import User
from foodbabes.schemas.user import SessionNotFoundResponse, SessionResponse
from foodbabes.services.user_service import UserService, parse_authorization


class TestRegister:

    def setup_method(self):
        self.service = UserService(token_bytes=32)

    @pytest.mark.asyncio
    async def test_password_is_hashed(self, db_session):
        created = await self.service.register(db_session, {"name": "alice", "password": "s3cret"})

        user = (await db_session.execute(select(User).where(User.id == created.id))).scalar_one()
        assert user.password != "s3cret"
        assert check_password_hash(user.password, "s3cret")

    @pytest.mark.asyncio
    async def test_token_is_hex_of_configured_size(self, db_session):
        created = await self.service.register(db_session, {"name": "bob", "password": "pw"})

        assert len(created.access_token) == 64
        int(created.access_token, 16)

    def test_default_token_size(self):
        assert len(UserService().new_access_token()) == 256

    @pytest.mark.asyncio
    async def test_name_longer_than_ten_rejected(self, db_session):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.register(db_session, {"name": "x" * 11, "password": "pw"})

        assert exc_info.value.message == "Could not create user"
        assert exc_info.value.errors["name"]["kind"] == "string_too_long"

    @pytest.mark.asyncio
    async def test_missing_password_rejected(self, db_session):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.register(db_session, {"name": "carol"})
        assert "password" in exc_info.value.errors


class TestLogin:

    def setup_method(self):
        self.service = UserService(token_bytes=32)

    @pytest.mark.asyncio
    async def test_correct_credentials_return_registration_token(self, db_session):
        created = await self.service.register(db_session, {"name": "alice", "password": "pw1"})

        session = await self.service.login(db_session, {"name": "alice", "password": "pw1"})

        assert isinstance(session, SessionResponse)
        assert session.user_id == created.id
        assert session.access_token == created.access_token

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [
        {"name": "alice", "password": "wrong"},
        {"name": "nobody", "password": "pw1"},
        {"name": "alice"},
        None,
        ["not", "an", "object"],
    ])
    async def test_failures_are_not_found(self, db_session, payload):
        await self.service.register(db_session, {"name": "alice", "password": "pw1"})

        result = await self.service.login(db_session, payload)

        assert isinstance(result, SessionNotFoundResponse)
        assert result.model_dump(by_alias=True) == {"notFound": True}

    @pytest.mark.asyncio
    async def test_shared_names_each_log_in(self, db_session):
        first = await self.service.register(db_session, {"name": "sam", "password": "one"})
        second = await self.service.register(db_session, {"name": "sam", "password": "two"})

        assert (await self.service.login(db_session, {"name": "sam", "password": "one"})).user_id == first.id
        assert (await self.service.login(db_session, {"name": "sam", "password": "two"})).user_id == second.id


class TestAuthenticate:

    def setup_method(self):
        self.service = UserService(token_bytes=32)

    @pytest.mark.asyncio
    async def test_valid_token_returns_user(self, db_session):
        created = await self.service.register(db_session, {"name": "dana", "password": "pw"})

        user = await self.service.authenticate(db_session, created.access_token)

        assert user.id == created.id

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", [None, "", "deadbeef"])
    async def test_missing_or_unknown_token(self, db_session, token):
        with pytest.raises(AuthenticationError):
            await self.service.authenticate(db_session, token)

    @pytest.mark.asyncio
    async def test_lookup_failure(self, mock_db_session):
        mock_db_session.execute.side_effect = SQLAlchemyError("connection refused")

        with pytest.raises(TokenLookupError) as exc_info:
            await self.service.authenticate(mock_db_session, "abc")
        assert exc_info.value.error == "SQLAlchemyError"


class TestParseAuthorization:

    @pytest.mark.parametrize("header,expected", [
        ("abc123", "abc123"),
        ("Bearer abc123", "abc123"),
        ("bearer   abc123 ", "abc123"),
        ("", None),
        (None, None),
    ])
    def test_header_forms(self, header, expected):
        assert parse_authorization(header) == expected
