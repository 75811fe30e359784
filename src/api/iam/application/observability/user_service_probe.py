"""Protocol for user application service observability.

Defines the interface for domain probes that capture application-level
domain events for account operations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class UserServiceProbe(Protocol):
    """Domain probe for user application service operations."""

    def user_registered(self, user_id: str, email: str) -> None:
        """Record that a new account was created."""
        ...

    def registration_rejected(self, email: str, reason: str) -> None:
        """Record that registration did not create an account."""
        ...

    def login_succeeded(self, user_id: str) -> None:
        """Record a successful login."""
        ...

    def login_failed(self, email: str) -> None:
        """Record a login with unknown email or wrong password."""
        ...

    def password_reset_requested(self, email: str, account_exists: bool) -> None:
        """Record a reset request (whether or not the account exists)."""
        ...

    def password_reset_completed(self, user_id: str) -> None:
        """Record that a password was changed through a reset token."""
        ...

    def onboarding_completed(self, user_id: str) -> None:
        """Record that a user finished onboarding."""
        ...

    def with_context(self, context: ObservationContext) -> UserServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultUserServiceProbe:
    """Default implementation of UserServiceProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultUserServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultUserServiceProbe(logger=self._logger, context=context)

    def user_registered(self, user_id: str, email: str) -> None:
        """Record that a new account was created."""
        self._logger.info(
            "user_registered",
            user_id=user_id,
            email=email,
            **self._get_context_kwargs(),
        )

    def registration_rejected(self, email: str, reason: str) -> None:
        """Record that registration did not create an account."""
        self._logger.info(
            "registration_rejected",
            email=email,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def login_succeeded(self, user_id: str) -> None:
        """Record a successful login."""
        self._logger.info(
            "login_succeeded",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def login_failed(self, email: str) -> None:
        """Record a login with unknown email or wrong password."""
        self._logger.warning(
            "login_failed",
            email=email,
            **self._get_context_kwargs(),
        )

    def password_reset_requested(self, email: str, account_exists: bool) -> None:
        """Record a reset request."""
        self._logger.info(
            "password_reset_requested",
            email=email,
            account_exists=account_exists,
            **self._get_context_kwargs(),
        )

    def password_reset_completed(self, user_id: str) -> None:
        """Record that a password was changed through a reset token."""
        self._logger.info(
            "password_reset_completed",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def onboarding_completed(self, user_id: str) -> None:
        """Record that a user finished onboarding."""
        self._logger.info(
            "user_onboarding_completed",
            user_id=user_id,
            **self._get_context_kwargs(),
        )
