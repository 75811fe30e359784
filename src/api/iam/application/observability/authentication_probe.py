"""Protocol for session authentication observability.

Captures the outcome of resolving a session cookie to a user.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class AuthenticationProbe(Protocol):
    """Domain probe for session authentication."""

    def user_authenticated(self, user_id: str) -> None:
        """Record that a session cookie resolved to an existing user."""
        ...

    def authentication_failed(self, reason: str) -> None:
        """Record that a request could not be authenticated."""
        ...

    def with_context(self, context: ObservationContext) -> AuthenticationProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultAuthenticationProbe:
    """Default implementation of AuthenticationProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultAuthenticationProbe:
        """Create a new probe with observation context bound."""
        return DefaultAuthenticationProbe(logger=self._logger, context=context)

    def user_authenticated(self, user_id: str) -> None:
        """Record that a session cookie resolved to an existing user."""
        self._logger.debug(
            "user_authenticated",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def authentication_failed(self, reason: str) -> None:
        """Record that a request could not be authenticated."""
        self._logger.info(
            "authentication_failed",
            reason=reason,
            **self._get_context_kwargs(),
        )
