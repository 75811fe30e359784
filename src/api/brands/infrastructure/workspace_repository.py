"""PostgreSQL implementation of IBrandWorkspaceRepository."""

from __future__ import annotations

from sqlalchemy import delete, exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from brands.domain.aggregates import BrandWorkspace
from brands.domain.value_objects import BrandBrainId, BrandWorkspaceId, OnboardingStatus
from brands.infrastructure.models import (
    BRAND_WORKSPACES_SLUG_CONSTRAINT,
    BrandWorkspaceModel,
)
from brands.infrastructure.observability import (
    BrandRepositoryProbe,
    DefaultBrandRepositoryProbe,
)
from brands.ports.exceptions import DuplicateSlugError
from brands.ports.repositories import IBrandWorkspaceRepository
from infrastructure.database import violated_constraint


class BrandWorkspaceRepository(IBrandWorkspaceRepository):
    """PostgreSQL-backed repository for BrandWorkspace aggregates.

    Does not open transactions; the calling service wraps work in
    ``session.begin()``.
    """

    def __init__(
        self, session: AsyncSession, probe: BrandRepositoryProbe | None = None
    ) -> None:
        self._session = session
        self._probe = probe or DefaultBrandRepositoryProbe()

    async def save(self, workspace: BrandWorkspace) -> None:
        """Insert or update a workspace.

        Raises:
            DuplicateSlugError: If another workspace holds the slug
        """
        stmt = select(BrandWorkspaceModel).where(
            BrandWorkspaceModel.id == workspace.id.value
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            model = BrandWorkspaceModel(
                id=workspace.id.value,
                owner_user_id=workspace.owner_user_id,
                created_at=workspace.created_at,
            )
            self._session.add(model)

        model.name = workspace.name
        model.slug = workspace.slug
        model.ai_thread_id = workspace.ai_thread_id
        model.status = workspace.status.value
        model.onboarding_step = workspace.onboarding_step
        model.brain_id = workspace.brain_id.value if workspace.brain_id else None
        model.last_active_at = workspace.last_active_at
        model.updated_at = workspace.updated_at

        try:
            await self._session.flush()
        except IntegrityError as e:
            if violated_constraint(e) == BRAND_WORKSPACES_SLUG_CONSTRAINT:
                self._probe.duplicate_slug(workspace.slug)
                raise DuplicateSlugError(workspace.slug) from e
            raise

        self._probe.record_saved("brand_workspace", workspace.id.value)

    async def get_by_slug(self, slug: str) -> BrandWorkspace | None:
        stmt = select(BrandWorkspaceModel).where(BrandWorkspaceModel.slug == slug)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    async def slug_exists(self, slug: str) -> bool:
        stmt = select(exists().where(BrandWorkspaceModel.slug == slug))
        result = await self._session.execute(stmt)
        return bool(result.scalar())

    async def list_by_owner(self, owner_user_id: str) -> list[BrandWorkspace]:
        stmt = (
            select(BrandWorkspaceModel)
            .where(BrandWorkspaceModel.owner_user_id == owner_user_id)
            .order_by(BrandWorkspaceModel.created_at, BrandWorkspaceModel.id)
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def delete(self, workspace_id: BrandWorkspaceId) -> bool:
        stmt = delete(BrandWorkspaceModel).where(
            BrandWorkspaceModel.id == workspace_id.value
        )
        result = await self._session.execute(stmt)
        self._probe.records_deleted(
            "brand_workspace", result.rowcount, brand_workspace_id=workspace_id.value
        )
        return result.rowcount > 0

    def _to_domain(self, model: BrandWorkspaceModel) -> BrandWorkspace:
        """Convert ORM model to domain aggregate."""
        return BrandWorkspace(
            id=BrandWorkspaceId(value=model.id),
            owner_user_id=model.owner_user_id,
            name=model.name,
            slug=model.slug,
            ai_thread_id=model.ai_thread_id,
            status=OnboardingStatus(model.status),
            onboarding_step=model.onboarding_step,
            brain_id=BrandBrainId(value=model.brain_id) if model.brain_id else None,
            last_active_at=model.last_active_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
