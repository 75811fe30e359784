"""PostgreSQL implementation of IBrandBrainRepository.

Writes go through ``INSERT ... ON CONFLICT (brand_workspace_id) DO UPDATE``
so two requests creating the same brain converge on one row. The analysis
claim is a single conditional ``UPDATE ... RETURNING``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import delete, or_, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from brands.domain.aggregates import BrandBrain
from brands.domain.onboarding import ANALYSIS_STEP
from brands.domain.value_objects import (
    AnalysisMethod,
    BrandBrainId,
    BrandWorkspaceId,
    OnboardingStatus,
)
from brands.infrastructure.models import (
    BRAND_BRAINS_WORKSPACE_CONSTRAINT,
    BrandBrainModel,
)
from brands.infrastructure.observability import (
    BrandRepositoryProbe,
    DefaultBrandRepositoryProbe,
)
from brands.ports.repositories import IBrandBrainRepository

# Columns never overwritten when an upsert hits an existing row.
_IMMUTABLE_COLUMNS = frozenset({"id", "brand_workspace_id", "created_at"})


def _row(brain: BrandBrain) -> dict[str, Any]:
    return {
        "id": brain.id.value,
        "brand_workspace_id": brain.brand_workspace_id.value,
        "brand_slug": brain.brand_slug,
        "summary": brain.summary,
        "audience": brain.audience,
        "tone": brain.tone,
        "offers": brain.offers,
        "pillars": list(brain.pillars),
        "recommendations": list(brain.recommendations),
        "competitors": list(brain.competitors),
        "channels": list(brain.channels),
        "status": brain.status.value,
        "onboarding_step": brain.onboarding_step,
        "is_activated": brain.is_activated,
        "analysis_method": brain.analysis_method.value if brain.analysis_method else None,
        "analysis_started_at": brain.analysis_started_at,
        "analysis_completed_at": brain.analysis_completed_at,
        "last_analyzed_at": brain.last_analyzed_at,
        "analysis_duration_ms": brain.analysis_duration_ms,
        "evidence_count": brain.evidence_count,
        "last_error": brain.last_error,
        "activated_at": brain.activated_at,
        "created_at": brain.created_at,
        "updated_at": brain.updated_at,
    }


class BrandBrainRepository(IBrandBrainRepository):
    """PostgreSQL-backed repository for BrandBrain aggregates."""

    def __init__(
        self, session: AsyncSession, probe: BrandRepositoryProbe | None = None
    ) -> None:
        self._session = session
        self._probe = probe or DefaultBrandRepositoryProbe()

    async def get_by_workspace(
        self, brand_workspace_id: BrandWorkspaceId
    ) -> BrandBrain | None:
        stmt = select(BrandBrainModel).where(
            BrandBrainModel.brand_workspace_id == brand_workspace_id.value
        )
        result = await self._session.execute(
            stmt, execution_options={"populate_existing": True}
        )
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    async def upsert(self, brain: BrandBrain) -> BrandBrain:
        """Insert or update by workspace, returning the stored row."""
        values = _row(brain)
        stmt = pg_insert(BrandBrainModel).values(**values)
        stmt = stmt.on_conflict_do_update(
            constraint=BRAND_BRAINS_WORKSPACE_CONSTRAINT,
            set_={
                key: stmt.excluded[key]
                for key in values
                if key not in _IMMUTABLE_COLUMNS
            },
        ).returning(BrandBrainModel)

        result = await self._session.scalars(
            stmt, execution_options={"populate_existing": True}
        )
        model = result.one()
        self._probe.record_saved("brand_brain", model.id)
        return self._to_domain(model)

    async def claim_for_analysis(
        self,
        brand_workspace_id: BrandWorkspaceId,
        method: AnalysisMethod,
        started_at: datetime,
        stale_before: datetime,
    ) -> BrandBrain | None:
        """Conditionally move the brain to ``in_progress`` at step 4.

        The row matches unless a fresh analysis already holds it: status
        ``in_progress`` at step 4 with a start time newer than ``stale_before``.
        """
        stmt = (
            update(BrandBrainModel)
            .where(BrandBrainModel.brand_workspace_id == brand_workspace_id.value)
            .where(
                or_(
                    BrandBrainModel.status != OnboardingStatus.IN_PROGRESS.value,
                    BrandBrainModel.onboarding_step != ANALYSIS_STEP,
                    BrandBrainModel.analysis_started_at.is_(None),
                    BrandBrainModel.analysis_started_at <= stale_before,
                )
            )
            .values(
                status=OnboardingStatus.IN_PROGRESS.value,
                onboarding_step=ANALYSIS_STEP,
                analysis_method=method.value,
                analysis_started_at=started_at,
                analysis_completed_at=None,
                last_error=None,
                updated_at=started_at,
            )
            .returning(BrandBrainModel)
        )
        result = await self._session.scalars(
            stmt, execution_options={"populate_existing": True}
        )
        model = result.one_or_none()
        if model is None:
            self._probe.analysis_claim_rejected(brand_workspace_id.value)
            return None
        return self._to_domain(model)

    async def delete_by_workspace(self, brand_workspace_id: BrandWorkspaceId) -> int:
        stmt = delete(BrandBrainModel).where(
            BrandBrainModel.brand_workspace_id == brand_workspace_id.value
        )
        result = await self._session.execute(stmt)
        self._probe.records_deleted(
            "brand_brain", result.rowcount, brand_workspace_id=brand_workspace_id.value
        )
        return result.rowcount

    def _to_domain(self, model: BrandBrainModel) -> BrandBrain:
        """Convert ORM model to domain aggregate."""
        return BrandBrain(
            id=BrandBrainId(value=model.id),
            brand_workspace_id=BrandWorkspaceId(value=model.brand_workspace_id),
            brand_slug=model.brand_slug,
            summary=model.summary,
            audience=model.audience,
            tone=model.tone,
            offers=model.offers,
            pillars=list(model.pillars or []),
            recommendations=list(model.recommendations or []),
            competitors=list(model.competitors or []),
            channels=list(model.channels or []),
            status=OnboardingStatus(model.status),
            onboarding_step=model.onboarding_step,
            is_activated=model.is_activated,
            analysis_method=(
                AnalysisMethod(model.analysis_method) if model.analysis_method else None
            ),
            analysis_started_at=model.analysis_started_at,
            analysis_completed_at=model.analysis_completed_at,
            last_analyzed_at=model.last_analyzed_at,
            analysis_duration_ms=model.analysis_duration_ms,
            evidence_count=model.evidence_count,
            last_error=model.last_error,
            activated_at=model.activated_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
