"""Protocol for onboarding chat observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class OnboardingChatProbe(Protocol):
    """Domain probe for onboarding chat."""

    def chat_started(self, brand_slug: str, step: str, evidence_used: int) -> None:
        ...

    def chat_fallback_used(self, brand_slug: str, error: str) -> None:
        ...

    def chat_stream_interrupted(self, brand_slug: str, error: str) -> None:
        ...

    def with_context(self, context: ObservationContext) -> OnboardingChatProbe:
        ...


class DefaultOnboardingChatProbe:
    """Default implementation of OnboardingChatProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultOnboardingChatProbe:
        return DefaultOnboardingChatProbe(logger=self._logger, context=context)

    def chat_started(self, brand_slug: str, step: str, evidence_used: int) -> None:
        self._logger.info(
            "chat_started",
            brand_slug=brand_slug,
            step=step,
            evidence_used=evidence_used,
            **self._get_context_kwargs(),
        )

    def chat_fallback_used(self, brand_slug: str, error: str) -> None:
        self._logger.warning(
            "chat_fallback_used",
            brand_slug=brand_slug,
            error=error,
            **self._get_context_kwargs(),
        )

    def chat_stream_interrupted(self, brand_slug: str, error: str) -> None:
        self._logger.error(
            "chat_stream_interrupted",
            brand_slug=brand_slug,
            error=error,
            **self._get_context_kwargs(),
        )
