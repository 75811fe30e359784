"""Domain probe for errors surfaced through the HTTP layer."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class RequestErrorProbe(Protocol):
    """Domain probe for request failures."""

    def request_rejected(self, path: str, status_code: int, error: str) -> None:
        """Record that a request failed with an expected client error."""
        ...

    def unhandled_error(self, path: str, method: str, error: Exception) -> None:
        """Record an unexpected exception, with traceback."""
        ...

    def with_context(self, context: ObservationContext) -> RequestErrorProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultRequestErrorProbe:
    """Default implementation of RequestErrorProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultRequestErrorProbe:
        """Create a new probe with observation context bound."""
        return DefaultRequestErrorProbe(logger=self._logger, context=context)

    def request_rejected(self, path: str, status_code: int, error: str) -> None:
        """Record that a request failed with an expected client error."""
        self._logger.info(
            "request_rejected",
            path=path,
            status_code=status_code,
            error=error,
            **self._get_context_kwargs(),
        )

    def unhandled_error(self, path: str, method: str, error: Exception) -> None:
        """Record an unexpected exception, with traceback."""
        self._logger.error(
            "unhandled_error",
            path=path,
            method=method,
            error=str(error),
            error_type=type(error).__name__,
            exc_info=error,
            **self._get_context_kwargs(),
        )
