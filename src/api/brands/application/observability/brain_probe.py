"""Protocol for Brand Brain engine observability.

Captures the analysis lifecycle (claim, completion, degradation, failure)
and state transitions made through either step representation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class BrandBrainEngineProbe(Protocol):
    """Domain probe for Brand Brain operations."""

    def brain_updated(self, brand_slug: str, sections: list[str]) -> None:
        """Record a section patch or refinement."""
        ...

    def state_changed(self, brand_slug: str, step: int, status: str) -> None:
        """Record an onboarding state transition."""
        ...

    def analysis_started(self, brand_slug: str, method: str, evidence_count: int) -> None:
        """Record that an analysis run claimed the brain."""
        ...

    def analysis_rejected(self, brand_slug: str, reason: str) -> None:
        """Record that an analysis request did not start."""
        ...

    def analysis_completed(self, brand_slug: str, duration_ms: int | None) -> None:
        """Record that the analyzer's output was stored."""
        ...

    def analysis_degraded(self, brand_slug: str, reason: str) -> None:
        """Record that placeholder content was stored instead of analyzer output."""
        ...

    def analysis_failed(self, brand_slug: str, error: str) -> None:
        """Record that a run failed and the brain went back to step 2."""
        ...

    def brain_activated(self, brand_slug: str) -> None:
        """Record onboarding completion for a brand."""
        ...

    def with_context(self, context: ObservationContext) -> BrandBrainEngineProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultBrandBrainEngineProbe:
    """Default implementation of BrandBrainEngineProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultBrandBrainEngineProbe:
        """Create a new probe with observation context bound."""
        return DefaultBrandBrainEngineProbe(logger=self._logger, context=context)

    def brain_updated(self, brand_slug: str, sections: list[str]) -> None:
        self._logger.info(
            "brain_updated",
            brand_slug=brand_slug,
            sections=sections,
            **self._get_context_kwargs(),
        )

    def state_changed(self, brand_slug: str, step: int, status: str) -> None:
        self._logger.info(
            "onboarding_state_changed",
            brand_slug=brand_slug,
            step=step,
            status=status,
            **self._get_context_kwargs(),
        )

    def analysis_started(self, brand_slug: str, method: str, evidence_count: int) -> None:
        self._logger.info(
            "analysis_started",
            brand_slug=brand_slug,
            method=method,
            evidence_count=evidence_count,
            **self._get_context_kwargs(),
        )

    def analysis_rejected(self, brand_slug: str, reason: str) -> None:
        self._logger.info(
            "analysis_rejected",
            brand_slug=brand_slug,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def analysis_completed(self, brand_slug: str, duration_ms: int | None) -> None:
        self._logger.info(
            "analysis_completed",
            brand_slug=brand_slug,
            duration_ms=duration_ms,
            **self._get_context_kwargs(),
        )

    def analysis_degraded(self, brand_slug: str, reason: str) -> None:
        self._logger.warning(
            "analysis_degraded",
            brand_slug=brand_slug,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def analysis_failed(self, brand_slug: str, error: str) -> None:
        self._logger.error(
            "analysis_failed",
            brand_slug=brand_slug,
            error=error,
            **self._get_context_kwargs(),
        )

    def brain_activated(self, brand_slug: str) -> None:
        self._logger.info(
            "brain_activated",
            brand_slug=brand_slug,
            **self._get_context_kwargs(),
        )
