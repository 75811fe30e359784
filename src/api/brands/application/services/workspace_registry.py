"""Workspace registry application service.

Owns the BrandWorkspace lifecycle: slug generation, the ownership check every
nested resource goes through, listing, cascade deletion, and the single
write path that mirrors brain state onto the workspace.
"""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy.ext.asyncio import AsyncSession

from brands.application.observability import (
    DefaultWorkspaceRegistryProbe,
    WorkspaceRegistryProbe,
)
from brands.domain.aggregates import BrandBrain, BrandWorkspace
from brands.domain.aggregates.workspace import validate_workspace_name
from brands.domain.onboarding import OnboardingState
from brands.domain.slug import slug_candidates, slugify
from brands.ports.exceptions import DuplicateSlugError, WorkspaceNotFoundError
from brands.ports.repositories import (
    IBrandBrainRepository,
    IBrandWorkspaceRepository,
    IEvidenceRepository,
)
from brands.ports.services import IWorkspaceCache
from shared_kernel.exceptions import ValidationError


class WorkspaceRegistry:
    """Application service for brand workspaces."""

    def __init__(
        self,
        workspace_repository: IBrandWorkspaceRepository,
        brain_repository: IBrandBrainRepository,
        evidence_repository: IEvidenceRepository,
        session: AsyncSession,
        cache: IWorkspaceCache,
        probe: WorkspaceRegistryProbe | None = None,
    ):
        """Initialize WorkspaceRegistry with dependencies.

        Args:
            workspace_repository: Repository for workspace persistence
            brain_repository: Repository used to create and cascade brains
            evidence_repository: Repository used to cascade evidence
            session: Database session for transaction management
            cache: Slug to workspace lookup cache
            probe: Optional domain probe for observability
        """
        self._workspace_repository = workspace_repository
        self._brain_repository = brain_repository
        self._evidence_repository = evidence_repository
        self._session = session
        self._cache = cache
        self._probe = probe or DefaultWorkspaceRegistryProbe()

    async def create_workspace(self, owner_user_id: str, name: str) -> BrandWorkspace:
        """Create a workspace and its empty Brand Brain.

        The slug is derived from the name. Taken slugs get ``-1`` .. ``-10``
        and finally a timestamp suffix. The workspace and its brain are
        written in one transaction, so a failed brain insert leaves no
        workspace behind.

        Args:
            owner_user_id: The creating user, who becomes the sole owner
            name: Display name, 2 to 100 characters after trimming

        Returns:
            The created workspace with ``brain_id`` set

        Raises:
            ValidationError: If the name is invalid
            DuplicateSlugError: If no slug candidate could be claimed
        """
        try:
            name = validate_workspace_name(name)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        base = slugify(name)
        for attempt, candidate in enumerate(
            slug_candidates(base, datetime.now(UTC)), start=1
        ):
            workspace = await self._try_create(owner_user_id, name, candidate)
            if workspace is None:
                continue
            if attempt > 1:
                self._probe.slug_collision_resolved(
                    base_slug=base, slug=candidate, attempts=attempt
                )
            self._cache.invalidate(candidate)
            self._probe.workspace_created(
                workspace_id=workspace.id.value,
                slug=workspace.slug,
                owner_user_id=owner_user_id,
            )
            return workspace

        raise DuplicateSlugError(base)

    async def _try_create(
        self, owner_user_id: str, name: str, slug: str
    ) -> BrandWorkspace | None:
        """Create under ``slug``, or return None when the slug is taken."""
        try:
            async with self._session.begin():
                if await self._workspace_repository.slug_exists(slug):
                    return None
                workspace = BrandWorkspace.create(
                    owner_user_id=owner_user_id, name=name, slug=slug
                )
                await self._workspace_repository.save(workspace)
                brain = await self._brain_repository.upsert(
                    BrandBrain.create_empty(
                        brand_workspace_id=workspace.id, brand_slug=slug
                    )
                )
                workspace.link_brain(brain.id)
                await self._workspace_repository.save(workspace)
        except DuplicateSlugError:
            # Lost a race for this slug between the check and the insert.
            return None
        except Exception as e:
            self._probe.workspace_creation_failed(name=name, error=str(e))
            raise
        return workspace

    async def get_workspace(self, slug: str, owner_user_id: str) -> BrandWorkspace:
        """Return the workspace if ``owner_user_id`` owns it.

        This is the authorization check for every nested resource. A
        workspace owned by someone else is reported exactly like a missing
        one.

        Raises:
            WorkspaceNotFoundError: If the slug is unknown or not owned
        """
        cached = self._cache.get(slug)
        if cached is not None:
            if not cached.is_owned_by(owner_user_id):
                self._probe.workspace_access_denied(slug=slug, user_id=owner_user_id)
                raise WorkspaceNotFoundError(slug)
            self._probe.cache_hit(slug=slug)
            return cached

        async with self._session.begin():
            workspace = await self._workspace_repository.get_by_slug(slug)

        if workspace is None or not workspace.is_owned_by(owner_user_id):
            self._probe.workspace_access_denied(slug=slug, user_id=owner_user_id)
            raise WorkspaceNotFoundError(slug)

        self._cache.set(workspace)
        return workspace

    async def list_workspaces(self, owner_user_id: str) -> list[BrandWorkspace]:
        """All workspaces the user owns, in creation order."""
        async with self._session.begin():
            return await self._workspace_repository.list_by_owner(owner_user_id)

    async def delete_workspace(self, slug: str, owner_user_id: str) -> None:
        """Delete a workspace together with its evidence and Brand Brain.

        Raises:
            WorkspaceNotFoundError: If the slug is unknown or not owned
        """
        workspace = await self.get_workspace(slug, owner_user_id)

        async with self._session.begin():
            evidence_deleted = await self._evidence_repository.delete_by_workspace(
                workspace.id
            )
            brains_deleted = await self._brain_repository.delete_by_workspace(
                workspace.id
            )
            await self._workspace_repository.delete(workspace.id)

        self._cache.invalidate(slug)
        self._probe.workspace_deleted(
            slug=slug,
            evidence_deleted=evidence_deleted,
            brains_deleted=brains_deleted,
        )

    async def record_activity(
        self,
        workspace: BrandWorkspace,
        state: OnboardingState | None = None,
    ) -> None:
        """Touch the workspace and, when given, mirror the brain's state.

        Must be called inside the caller's open transaction. The cache entry
        is dropped so the next lookup reads the new row.
        """
        if state is None:
            workspace.touch()
        else:
            workspace.mirror(state)
        await self._workspace_repository.save(workspace)
        self._cache.invalidate(workspace.slug)
