"""Domain probe for signed token operations.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to session and reset tokens.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class SessionTokenProbe(Protocol):
    """Domain probe for token issuing and verification."""

    def token_issued(self, user_id: str, purpose: str) -> None:
        """Record that a token was issued."""
        ...

    def token_rejected(self, reason: str) -> None:
        """Record that a presented token failed verification."""
        ...

    def with_context(self, context: ObservationContext) -> SessionTokenProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultSessionTokenProbe:
    """Default implementation of SessionTokenProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultSessionTokenProbe:
        """Create a new probe with observation context bound."""
        return DefaultSessionTokenProbe(logger=self._logger, context=context)

    def token_issued(self, user_id: str, purpose: str) -> None:
        """Record that a token was issued."""
        self._logger.debug(
            "token_issued",
            user_id=user_id,
            purpose=purpose,
            **self._get_context_kwargs(),
        )

    def token_rejected(self, reason: str) -> None:
        """Record that a presented token failed verification."""
        self._logger.warning(
            "token_rejected",
            reason=reason,
            **self._get_context_kwargs(),
        )
