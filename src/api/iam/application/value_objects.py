"""Application-layer value objects for IAM bounded context."""

from __future__ import annotations

from dataclasses import dataclass

from iam.domain.aggregates import User

ONBOARDING_PATH = "/onboarding"
WORKSPACE_PATH = "/workspace"


@dataclass(frozen=True)
class SessionGrant:
    """A freshly issued session for a user.

    The presentation layer turns this into the session cookie.
    """

    user: User
    token: str
    max_age_seconds: int

    @property
    def redirect_to(self) -> str:
        """Where the client should go after signing in."""
        if self.user.onboarding_completed:
            return WORKSPACE_PATH
        return ONBOARDING_PATH
