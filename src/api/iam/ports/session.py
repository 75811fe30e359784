"""Ports for session tokens and password-reset delivery."""

from __future__ import annotations

from datetime import timedelta
from typing import Protocol, runtime_checkable

from shared_kernel.auth import TokenClaims


@runtime_checkable
class ISessionStore(Protocol):
    """Issues and verifies signed tokens bound to a user id."""

    @property
    def session_ttl(self) -> timedelta:
        """Lifetime of issued session tokens."""
        ...

    def create_session(self, user_id: str) -> str:
        """Issue a session token for a user."""
        ...

    def verify_session(self, token: str) -> TokenClaims:
        """Verify a session token.

        Raises:
            InvalidTokenError: If the token is invalid or expired
        """
        ...

    def issue_reset_token(self, user_id: str, fingerprint: str) -> str:
        """Issue a short-lived password-reset token."""
        ...

    def verify_reset_token(self, token: str) -> TokenClaims:
        """Verify a password-reset token.

        Raises:
            InvalidTokenError: If the token is invalid or expired
        """
        ...


@runtime_checkable
class IPasswordResetNotifier(Protocol):
    """Delivers a password-reset token to the account holder."""

    async def send_reset_link(self, email: str, token: str) -> None:
        """Deliver the reset token for ``email``."""
        ...
