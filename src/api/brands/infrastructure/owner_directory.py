"""Owner directory backed by the IAM user service."""

from __future__ import annotations

from brands.ports.services import IOwnerDirectory
from iam.application.services import UserService


class IamOwnerDirectory(IOwnerDirectory):
    """Marks onboarding completed on the owner's IAM account.

    The user service shares the request session, so the update joins the
    transaction the brain engine has open.
    """

    def __init__(self, user_service: UserService) -> None:
        self._user_service = user_service

    async def mark_onboarding_completed(self, owner_user_id: str) -> None:
        await self._user_service.complete_onboarding(owner_user_id)
