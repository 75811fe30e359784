"""PostgreSQL implementation of IEvidenceRepository."""

from __future__ import annotations

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from brands.domain.aggregates import Evidence
from brands.domain.value_objects import (
    BrandWorkspaceId,
    EvidenceId,
    EvidenceStatus,
    EvidenceType,
)
from brands.infrastructure.models import EvidenceModel
from brands.infrastructure.observability import (
    BrandRepositoryProbe,
    DefaultBrandRepositoryProbe,
)
from brands.ports.repositories import IEvidenceRepository
from infrastructure.database.models import utc_now


class EvidenceRepository(IEvidenceRepository):
    """PostgreSQL-backed repository for Evidence items.

    Single-item reads, deletes and status changes are always scoped by both
    id and brand slug.
    """

    def __init__(
        self, session: AsyncSession, probe: BrandRepositoryProbe | None = None
    ) -> None:
        self._session = session
        self._probe = probe or DefaultBrandRepositoryProbe()

    async def save(self, evidence: Evidence) -> None:
        stmt = select(EvidenceModel).where(EvidenceModel.id == evidence.id.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            model = EvidenceModel(
                id=evidence.id.value,
                brand_workspace_id=evidence.brand_workspace_id.value,
                brand_slug=evidence.brand_slug,
                type=evidence.type.value,
                created_at=evidence.created_at,
            )
            self._session.add(model)

        model.value = evidence.value
        model.status = evidence.status.value
        model.analyzed_content = evidence.analyzed_content
        model.analysis_summary = evidence.analysis_summary
        model.metadata_ = dict(evidence.metadata)
        model.last_error = evidence.last_error
        model.updated_at = evidence.updated_at

        await self._session.flush()
        self._probe.record_saved("evidence", evidence.id.value)

    async def get(self, evidence_id: EvidenceId, brand_slug: str) -> Evidence | None:
        stmt = select(EvidenceModel).where(
            EvidenceModel.id == evidence_id.value,
            EvidenceModel.brand_slug == brand_slug,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    async def list_for_brand(
        self,
        brand_workspace_id: BrandWorkspaceId,
        status: EvidenceStatus | None = None,
        type: EvidenceType | None = None,
        limit: int | None = 50,
    ) -> list[Evidence]:
        stmt = select(EvidenceModel).where(
            EvidenceModel.brand_workspace_id == brand_workspace_id.value
        )
        if status is not None:
            stmt = stmt.where(EvidenceModel.status == status.value)
        if type is not None:
            stmt = stmt.where(EvidenceModel.type == type.value)
        stmt = stmt.order_by(EvidenceModel.created_at.desc(), EvidenceModel.id.desc())
        if limit is not None:
            stmt = stmt.limit(limit)

        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def update_outcome(self, evidence: Evidence) -> bool:
        stmt = (
            update(EvidenceModel)
            .where(
                EvidenceModel.id == evidence.id.value,
                EvidenceModel.brand_slug == evidence.brand_slug,
            )
            .values(
                status=evidence.status.value,
                analyzed_content=evidence.analyzed_content,
                analysis_summary=evidence.analysis_summary,
                last_error=evidence.last_error,
                updated_at=evidence.updated_at,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        if result.rowcount == 0:
            return False
        self._probe.record_saved("evidence", evidence.id.value)
        return True

    async def delete(self, evidence_id: EvidenceId, brand_slug: str) -> bool:
        stmt = delete(EvidenceModel).where(
            EvidenceModel.id == evidence_id.value,
            EvidenceModel.brand_slug == brand_slug,
        )
        result = await self._session.execute(stmt)
        self._probe.records_deleted(
            "evidence", result.rowcount, evidence_id=evidence_id.value
        )
        return result.rowcount > 0

    async def mark_status(
        self,
        evidence_ids: list[EvidenceId],
        brand_slug: str,
        status: EvidenceStatus,
    ) -> int:
        stmt = (
            update(EvidenceModel)
            .where(
                EvidenceModel.id.in_([evidence_id.value for evidence_id in evidence_ids]),
                EvidenceModel.brand_slug == brand_slug,
            )
            .values(status=status.value, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount

    async def delete_by_workspace(self, brand_workspace_id: BrandWorkspaceId) -> int:
        stmt = delete(EvidenceModel).where(
            EvidenceModel.brand_workspace_id == brand_workspace_id.value
        )
        result = await self._session.execute(stmt)
        self._probe.records_deleted(
            "evidence", result.rowcount, brand_workspace_id=brand_workspace_id.value
        )
        return result.rowcount

    def _to_domain(self, model: EvidenceModel) -> Evidence:
        """Convert ORM model to domain entity."""
        return Evidence(
            id=EvidenceId(value=model.id),
            brand_workspace_id=BrandWorkspaceId(value=model.brand_workspace_id),
            brand_slug=model.brand_slug,
            type=EvidenceType(model.type),
            value=model.value,
            status=EvidenceStatus(model.status),
            analyzed_content=model.analyzed_content,
            analysis_summary=model.analysis_summary,
            metadata=dict(model.metadata_ or {}),
            last_error=model.last_error,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
