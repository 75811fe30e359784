"""Evidence ledger application service.

Owns the Evidence lifecycle: submission, listing, scoped updates and
deletion, bulk status transitions, and background processing of new items
(``pending -> processing -> complete``).
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from brands.application.observability import (
    DefaultEvidenceLedgerProbe,
    EvidenceLedgerProbe,
)
from brands.application.services.workspace_registry import WorkspaceRegistry
from brands.domain.aggregates import BrandWorkspace, Evidence
from brands.domain.value_objects import EvidenceId, EvidenceStatus, EvidenceType
from brands.ports.exceptions import AnalyzerError, EvidenceNotFoundError
from brands.ports.repositories import IEvidenceRepository
from brands.ports.services import IBrandAnalyzer
from shared_kernel.exceptions import ValidationError

DEFAULT_LIST_LIMIT = 50
MAX_LIST_LIMIT = 100


def clamp_limit(limit: int | None) -> int:
    """Bound a requested page size to 1..100."""
    if limit is None:
        return DEFAULT_LIST_LIMIT
    return max(1, min(MAX_LIST_LIMIT, limit))


def _parse_evidence_id(raw: str) -> EvidenceId:
    try:
        return EvidenceId.from_string(raw)
    except ValueError as e:
        raise EvidenceNotFoundError(raw) from e


class EvidenceLedger:
    """Application service for evidence items of a brand."""

    def __init__(
        self,
        evidence_repository: IEvidenceRepository,
        workspace_registry: WorkspaceRegistry,
        analyzer: IBrandAnalyzer,
        session: AsyncSession,
        probe: EvidenceLedgerProbe | None = None,
    ):
        """Initialize EvidenceLedger with dependencies.

        Args:
            evidence_repository: Repository for evidence persistence
            workspace_registry: Records activity on the owning workspace
            analyzer: Summarizes evidence during background processing
            session: Database session for transaction management
            probe: Optional domain probe for observability
        """
        self._evidence_repository = evidence_repository
        self._workspace_registry = workspace_registry
        self._analyzer = analyzer
        self._session = session
        self._probe = probe or DefaultEvidenceLedgerProbe()

    async def add_evidence(
        self,
        workspace: BrandWorkspace,
        type: EvidenceType,
        value: str,
        metadata: dict | None = None,
    ) -> Evidence:
        """Record a new ``pending`` evidence item.

        Raises:
            ValidationError: If the type is not user-submittable or the value
                is empty or too long
        """
        if not type.user_submittable:
            raise ValidationError(f"Evidence type '{type.value}' cannot be submitted")
        try:
            evidence = Evidence.submit(
                brand_workspace_id=workspace.id,
                brand_slug=workspace.slug,
                type=type,
                value=value,
                metadata=metadata,
            )
        except ValueError as e:
            raise ValidationError(str(e)) from e

        async with self._session.begin():
            await self._evidence_repository.save(evidence)
            await self._workspace_registry.record_activity(workspace)

        self._probe.evidence_added(
            evidence_id=evidence.id.value,
            brand_slug=workspace.slug,
            type=type.value,
        )
        return evidence

    async def list_evidence(
        self,
        workspace: BrandWorkspace,
        status: EvidenceStatus | None = None,
        type: EvidenceType | None = None,
        limit: int | None = DEFAULT_LIST_LIMIT,
    ) -> list[Evidence]:
        """Evidence of the workspace, newest first, at most 100 items."""
        async with self._session.begin():
            return await self._evidence_repository.list_for_brand(
                workspace.id,
                status=status,
                type=type,
                limit=clamp_limit(limit),
            )

    async def update_evidence(
        self,
        workspace: BrandWorkspace,
        evidence_id: str,
        status: EvidenceStatus | None = None,
        analyzed_content: str | None = None,
        analysis_summary: str | None = None,
    ) -> Evidence:
        """Update one item of this brand.

        Raises:
            EvidenceNotFoundError: If no item matches both id and brand
        """
        parsed_id = _parse_evidence_id(evidence_id)
        async with self._session.begin():
            evidence = await self._evidence_repository.get(parsed_id, workspace.slug)
            if evidence is None:
                raise EvidenceNotFoundError(evidence_id)
            if analyzed_content is not None:
                evidence.analyzed_content = analyzed_content
            if analysis_summary is not None:
                evidence.analysis_summary = analysis_summary
            if status is not None:
                evidence.mark(status)
            await self._evidence_repository.save(evidence)
            await self._workspace_registry.record_activity(workspace)
        return evidence

    async def remove_evidence(self, workspace: BrandWorkspace, evidence_id: str) -> None:
        """Delete one item of this brand.

        Raises:
            EvidenceNotFoundError: If no item matches both id and brand
        """
        parsed_id = _parse_evidence_id(evidence_id)
        async with self._session.begin():
            deleted = await self._evidence_repository.delete(parsed_id, workspace.slug)
            if not deleted:
                raise EvidenceNotFoundError(evidence_id)
            await self._workspace_registry.record_activity(workspace)

        self._probe.evidence_removed(evidence_id=evidence_id, brand_slug=workspace.slug)

    async def mark_status(
        self,
        workspace: BrandWorkspace,
        evidence_ids: list[EvidenceId],
        status: EvidenceStatus,
    ) -> int:
        """Move several items of this brand to ``status``. Returns the count."""
        if not evidence_ids:
            return 0
        async with self._session.begin():
            return await self._evidence_repository.mark_status(
                evidence_ids, workspace.slug, status
            )

    async def process_evidence(self, evidence_id: EvidenceId, brand_slug: str) -> None:
        """Summarize one submitted item and mark it complete.

        Runs after the submitting request has been answered, on a session of
        its own. When the analyzer is unavailable the raw value becomes the
        analyzed content. If storing the result fails the item is marked
        ``failed`` with the error. An item deleted while it was being
        summarized stays deleted.
        """
        async with self._session.begin():
            evidence = await self._evidence_repository.get(evidence_id, brand_slug)
            if evidence is None:
                self._evidence_gone(evidence_id)
                return
            evidence.mark(EvidenceStatus.PROCESSING)
            await self._evidence_repository.update_outcome(evidence)

        degraded = False
        try:
            content = await self._analyzer.summarize_evidence(
                evidence.type, evidence.value
            )
        except AnalyzerError:
            content = evidence.value
            degraded = True

        try:
            async with self._session.begin():
                evidence.complete(content or evidence.value)
                stored = await self._evidence_repository.update_outcome(evidence)
        except Exception as e:
            self._probe.evidence_processing_failed(
                evidence_id=evidence_id.value, error=str(e)
            )
            async with self._session.begin():
                evidence.fail(str(e))
                await self._evidence_repository.update_outcome(evidence)
            return

        if not stored:
            self._evidence_gone(evidence_id)
            return
        self._probe.evidence_processed(evidence_id=evidence_id.value, degraded=degraded)

    def _evidence_gone(self, evidence_id: EvidenceId) -> None:
        self._probe.evidence_processing_failed(
            evidence_id=evidence_id.value, error="evidence no longer exists"
        )
