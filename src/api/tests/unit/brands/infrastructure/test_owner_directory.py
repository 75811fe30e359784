"""Unit tests for the IAM-backed owner directory."""

from unittest.mock import AsyncMock, create_autospec

import pytest

from brands.infrastructure.owner_directory import IamOwnerDirectory
from brands.ports.services import IOwnerDirectory
from iam.application.services import UserService
from iam.ports.exceptions import UserNotFoundError


@pytest.fixture
def mock_user_service():
    return create_autospec(UserService, instance=True)


class TestIamOwnerDirectory:
    def test_implements_protocol(self, mock_user_service):
        assert isinstance(IamOwnerDirectory(mock_user_service), IOwnerDirectory)

    @pytest.mark.asyncio
    async def test_marks_onboarding_completed(self, mock_user_service):
        directory = IamOwnerDirectory(user_service=mock_user_service)

        await directory.mark_onboarding_completed("01JAAAAAAAAAAAAAAAAAAAAAAA")

        mock_user_service.complete_onboarding.assert_awaited_once_with(
            "01JAAAAAAAAAAAAAAAAAAAAAAA"
        )

    @pytest.mark.asyncio
    async def test_missing_owner_propagates(self, mock_user_service):
        mock_user_service.complete_onboarding = AsyncMock(
            side_effect=UserNotFoundError("01JAAAAAAAAAAAAAAAAAAAAAAA")
        )
        directory = IamOwnerDirectory(user_service=mock_user_service)

        with pytest.raises(UserNotFoundError):
            await directory.mark_onboarding_completed("01JAAAAAAAAAAAAAAAAAAAAAAA")
