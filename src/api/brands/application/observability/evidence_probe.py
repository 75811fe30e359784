"""Protocol for evidence ledger observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class EvidenceLedgerProbe(Protocol):
    """Domain probe for evidence operations."""

    def evidence_added(self, evidence_id: str, brand_slug: str, type: str) -> None:
        ...

    def evidence_removed(self, evidence_id: str, brand_slug: str) -> None:
        ...

    def evidence_processed(self, evidence_id: str, degraded: bool) -> None:
        """Evidence reached ``complete``; ``degraded`` when the raw value was kept."""
        ...

    def evidence_processing_failed(self, evidence_id: str, error: str) -> None:
        ...

    def with_context(self, context: ObservationContext) -> EvidenceLedgerProbe:
        ...


class DefaultEvidenceLedgerProbe:
    """Default implementation of EvidenceLedgerProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultEvidenceLedgerProbe:
        return DefaultEvidenceLedgerProbe(logger=self._logger, context=context)

    def evidence_added(self, evidence_id: str, brand_slug: str, type: str) -> None:
        self._logger.info(
            "evidence_added",
            evidence_id=evidence_id,
            brand_slug=brand_slug,
            type=type,
            **self._get_context_kwargs(),
        )

    def evidence_removed(self, evidence_id: str, brand_slug: str) -> None:
        self._logger.info(
            "evidence_removed",
            evidence_id=evidence_id,
            brand_slug=brand_slug,
            **self._get_context_kwargs(),
        )

    def evidence_processed(self, evidence_id: str, degraded: bool) -> None:
        log = self._logger.warning if degraded else self._logger.info
        log(
            "evidence_processed",
            evidence_id=evidence_id,
            degraded=degraded,
            **self._get_context_kwargs(),
        )

    def evidence_processing_failed(self, evidence_id: str, error: str) -> None:
        self._logger.error(
            "evidence_processing_failed",
            evidence_id=evidence_id,
            error=error,
            **self._get_context_kwargs(),
        )
