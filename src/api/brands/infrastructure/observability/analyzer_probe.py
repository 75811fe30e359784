"""Protocol and default probe for the language-model HTTP client."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class AnalyzerClientProbe(Protocol):
    """Domain probe for outbound model calls."""

    def request_completed(self, operation: str, model: str, duration_ms: int) -> None:
        ...

    def request_failed(self, operation: str, error: str) -> None:
        ...

    def request_timed_out(self, operation: str, timeout_seconds: float) -> None:
        ...

    def with_context(self, context: ObservationContext) -> AnalyzerClientProbe:
        ...


class DefaultAnalyzerClientProbe:
    """Default implementation of AnalyzerClientProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultAnalyzerClientProbe:
        return DefaultAnalyzerClientProbe(logger=self._logger, context=context)

    def request_completed(self, operation: str, model: str, duration_ms: int) -> None:
        self._logger.info(
            "analyzer_request_completed",
            operation=operation,
            model=model,
            duration_ms=duration_ms,
            **self._get_context_kwargs(),
        )

    def request_failed(self, operation: str, error: str) -> None:
        self._logger.warning(
            "analyzer_request_failed",
            operation=operation,
            error=error,
            **self._get_context_kwargs(),
        )

    def request_timed_out(self, operation: str, timeout_seconds: float) -> None:
        self._logger.warning(
            "analyzer_request_timed_out",
            operation=operation,
            timeout_seconds=timeout_seconds,
            **self._get_context_kwargs(),
        )
