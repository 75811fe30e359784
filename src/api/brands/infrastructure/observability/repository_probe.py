"""Protocol and default probe for brands repository observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class BrandRepositoryProbe(Protocol):
    """Domain probe shared by the workspace, brain and evidence repositories."""

    def record_saved(self, kind: str, record_id: str) -> None:
        """Record that a row was inserted or updated."""
        ...

    def records_deleted(self, kind: str, count: int, **scope: str) -> None:
        """Record a delete and how many rows it removed."""
        ...

    def duplicate_slug(self, slug: str) -> None:
        """Record that a write hit the unique slug constraint."""
        ...

    def analysis_claim_rejected(self, brand_workspace_id: str) -> None:
        """Record that the conditional analysis claim matched no row."""
        ...

    def with_context(self, context: ObservationContext) -> BrandRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultBrandRepositoryProbe:
    """Default implementation of BrandRepositoryProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultBrandRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultBrandRepositoryProbe(logger=self._logger, context=context)

    def record_saved(self, kind: str, record_id: str) -> None:
        self._logger.debug(
            f"{kind}_saved",
            record_id=record_id,
            **self._get_context_kwargs(),
        )

    def records_deleted(self, kind: str, count: int, **scope: str) -> None:
        self._logger.info(
            f"{kind}_deleted",
            count=count,
            **scope,
            **self._get_context_kwargs(),
        )

    def duplicate_slug(self, slug: str) -> None:
        self._logger.warning(
            "duplicate_slug",
            slug=slug,
            **self._get_context_kwargs(),
        )

    def analysis_claim_rejected(self, brand_workspace_id: str) -> None:
        self._logger.info(
            "analysis_claim_rejected",
            brand_workspace_id=brand_workspace_id,
            **self._get_context_kwargs(),
        )
