"""Tests for the bearer-token dependency."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi import Request
from fastapi.security import HTTPAuthorizationCredentials

from src.modules.auth.dependencies import get_auth_service, get_current_user
from src.modules.auth.exceptions import AuthenticationError, TokenExpiredError
from src.modules.auth.models import User


def make_user() -> User:
    now = datetime.now(UTC)
    return User(
        id=1,
        first_name="Ann",
        last_name="Lee",
        email="a@x.com",
        password_hash="hashed",
        phone=None,
        date_of_birth=None,
        created_at=now,
        updated_at=now,
    )


class TestGetAuthService:
    """Tests for get_auth_service."""

    def test_returns_service_from_app_state(self):
        """Should return the service stored at startup."""
        service = Mock()
        request = Mock(spec=Request)
        request.app.state.auth_service = service

        assert get_auth_service(request) is service


class TestGetCurrentUser:
    """Tests for get_current_user."""

    @pytest.mark.asyncio
    async def test_returns_resolved_user(self):
        """Should resolve the bearer token through the service."""
        user = make_user()
        service = Mock()
        service.resolve_token = AsyncMock(return_value=user)
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials="tok")

        result = await get_current_user(credentials, service)

        assert result is user
        service.resolve_token.assert_awaited_once_with("tok")

    @pytest.mark.asyncio
    async def test_missing_credentials(self):
        """Should demand a token when no header was sent."""
        service = Mock()
        service.resolve_token = AsyncMock()

        with pytest.raises(AuthenticationError, match="Access token required"):
            await get_current_user(None, service)

        service.resolve_token.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_credentials(self):
        """Should treat an empty bearer value as missing."""
        service = Mock()
        service.resolve_token = AsyncMock()
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials="")

        with pytest.raises(AuthenticationError, match="Access token required"):
            await get_current_user(credentials, service)

    @pytest.mark.asyncio
    async def test_propagates_token_errors(self):
        """Should let token failures reach the error handlers."""
        service = Mock()
        service.resolve_token = AsyncMock(side_effect=TokenExpiredError())
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials="old")

        with pytest.raises(TokenExpiredError):
            await get_current_user(credentials, service)
