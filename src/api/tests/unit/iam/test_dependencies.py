"""Unit tests for IAM FastAPI dependencies."""

from unittest.mock import AsyncMock, MagicMock, create_autospec, patch

import pytest

from iam.application.observability import AuthenticationProbe
from iam.application.services import UserService
from iam.dependencies.user import (
    get_current_user,
    get_optional_user,
    get_session_store,
    get_user_service,
)
from iam.ports.exceptions import NotAuthenticatedError
from shared_kernel.auth import CurrentUser, SessionTokenCodec


@pytest.fixture
def mock_user_service():
    return create_autospec(UserService, instance=True)


@pytest.fixture
def mock_auth_probe():
    return create_autospec(AuthenticationProbe, instance=True)


def request_with_cookies(cookies: dict[str, str]):
    request = MagicMock()
    request.cookies = cookies
    return request


class TestGetOptionalUser:
    """Tests for resolving the session cookie."""

    @pytest.mark.asyncio
    async def test_no_cookie_is_anonymous(self, mock_user_service, mock_auth_probe):
        result = await get_optional_user(
            request_with_cookies({}), mock_user_service, mock_auth_probe, "session"
        )

        assert result is None
        mock_user_service.resolve_session.assert_not_called()
        mock_auth_probe.authentication_failed.assert_not_called()

    @pytest.mark.asyncio
    async def test_valid_cookie_resolves_user(
        self, mock_user_service, mock_auth_probe, user
    ):
        mock_user_service.resolve_session = AsyncMock(return_value=user)

        result = await get_optional_user(
            request_with_cookies({"session": "tok"}),
            mock_user_service,
            mock_auth_probe,
            "session",
        )

        assert result is user
        mock_user_service.resolve_session.assert_awaited_once_with("tok")
        mock_auth_probe.user_authenticated.assert_called_once_with(
            user_id=user.id.value
        )

    @pytest.mark.asyncio
    async def test_invalid_cookie_is_anonymous(self, mock_user_service, mock_auth_probe):
        mock_user_service.resolve_session = AsyncMock(
            side_effect=NotAuthenticatedError("Token has expired")
        )

        result = await get_optional_user(
            request_with_cookies({"session": "stale"}),
            mock_user_service,
            mock_auth_probe,
            "session",
        )

        assert result is None
        mock_auth_probe.authentication_failed.assert_called_once_with(
            reason="Token has expired"
        )

    @pytest.mark.asyncio
    async def test_reads_configured_cookie_name(self, mock_user_service, mock_auth_probe):
        result = await get_optional_user(
            request_with_cookies({"session": "tok"}),
            mock_user_service,
            mock_auth_probe,
            "bb_session",
        )

        assert result is None
        mock_user_service.resolve_session.assert_not_called()


class TestGetCurrentUser:
    @pytest.mark.asyncio
    async def test_returns_identity(self, user):
        current = await get_current_user(user)

        assert current == CurrentUser(user_id=user.id.value, email="ada@example.com")

    @pytest.mark.asyncio
    async def test_anonymous_is_rejected(self):
        with pytest.raises(NotAuthenticatedError) as exc_info:
            await get_current_user(None)

        assert exc_info.value.status_code == 401


class TestGetSessionStore:
    def test_built_from_session_settings(self, monkeypatch):
        monkeypatch.setenv("BRANDBRAIN_SESSION_SECRET", "unit-test-secret-0123456789")
        monkeypatch.setenv("BRANDBRAIN_SESSION_TTL_DAYS", "3")
        from infrastructure.settings import get_session_settings

        get_session_settings.cache_clear()
        get_session_store.cache_clear()
        try:
            store = get_session_store()

            assert isinstance(store, SessionTokenCodec)
            assert store.session_ttl.days == 3
            assert get_session_store() is store
        finally:
            get_session_settings.cache_clear()
            get_session_store.cache_clear()


class TestGetUserService:
    def test_wires_collaborators(self, mock_session):
        repository = MagicMock()
        store = MagicMock()
        notifier = MagicMock()

        with patch("iam.dependencies.user.DefaultUserServiceProbe") as probe_cls:
            service = get_user_service(mock_session, repository, store, notifier)

        assert isinstance(service, UserService)
        assert service._user_repository is repository
        assert service._session_store is store
        assert service._reset_notifier is notifier
        assert service._probe is probe_cls.return_value
