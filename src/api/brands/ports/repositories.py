"""Repository ports for the brands bounded context.

Repositories never open transactions; the application services own them.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, runtime_checkable

from brands.domain.aggregates import BrandBrain, BrandWorkspace, Evidence
from brands.domain.value_objects import (
    AnalysisMethod,
    BrandWorkspaceId,
    EvidenceId,
    EvidenceStatus,
    EvidenceType,
)


@runtime_checkable
class IBrandWorkspaceRepository(Protocol):
    """Repository for BrandWorkspace aggregates."""

    async def save(self, workspace: BrandWorkspace) -> None:
        """Insert or update a workspace.

        Raises:
            DuplicateSlugError: If the slug is already taken
        """
        ...

    async def get_by_slug(self, slug: str) -> BrandWorkspace | None:
        """Retrieve a workspace by slug regardless of owner."""
        ...

    async def slug_exists(self, slug: str) -> bool:
        """Whether any workspace uses ``slug``."""
        ...

    async def list_by_owner(self, owner_user_id: str) -> list[BrandWorkspace]:
        """All workspaces of an owner, oldest first."""
        ...

    async def delete(self, workspace_id: BrandWorkspaceId) -> bool:
        """Delete a workspace row. Returns whether a row was deleted."""
        ...


@runtime_checkable
class IBrandBrainRepository(Protocol):
    """Repository for BrandBrain aggregates, keyed by workspace id."""

    async def get_by_workspace(
        self, brand_workspace_id: BrandWorkspaceId
    ) -> BrandBrain | None:
        """Retrieve the brain of a workspace, or None if none exists yet."""
        ...

    async def upsert(self, brain: BrandBrain) -> BrandBrain:
        """Insert or update by ``brand_workspace_id``.

        Returns:
            The stored brain; when a concurrent insert won, its id is kept
        """
        ...

    async def claim_for_analysis(
        self,
        brand_workspace_id: BrandWorkspaceId,
        method: AnalysisMethod,
        started_at: datetime,
        stale_before: datetime,
    ) -> BrandBrain | None:
        """Atomically move the brain to in_progress at step 4.

        Matches only when the brain is NOT currently analyzing with an
        ``analysis_started_at`` newer than ``stale_before``.

        Returns:
            The claimed brain, or None when another analysis holds it
        """
        ...

    async def delete_by_workspace(self, brand_workspace_id: BrandWorkspaceId) -> int:
        """Delete the brain of a workspace. Returns rows deleted."""
        ...


@runtime_checkable
class IEvidenceRepository(Protocol):
    """Repository for Evidence items."""

    async def save(self, evidence: Evidence) -> None:
        """Insert or update one evidence item."""
        ...

    async def get(self, evidence_id: EvidenceId, brand_slug: str) -> Evidence | None:
        """Retrieve one item; must match both id and brand slug."""
        ...

    async def list_for_brand(
        self,
        brand_workspace_id: BrandWorkspaceId,
        status: EvidenceStatus | None = None,
        type: EvidenceType | None = None,
        limit: int | None = 50,
    ) -> list[Evidence]:
        """Evidence of a brand, newest first. ``limit=None`` returns all."""
        ...

    async def update_outcome(self, evidence: Evidence) -> bool:
        """Write status, content and error of an existing item.

        Scoped by id and brand slug; never inserts. Returns False when the
        item no longer exists.
        """
        ...

    async def delete(self, evidence_id: EvidenceId, brand_slug: str) -> bool:
        """Delete one item scoped by id and brand slug."""
        ...

    async def mark_status(
        self,
        evidence_ids: list[EvidenceId],
        brand_slug: str,
        status: EvidenceStatus,
    ) -> int:
        """Bulk status transition scoped to a brand. Returns rows updated."""
        ...

    async def delete_by_workspace(self, brand_workspace_id: BrandWorkspaceId) -> int:
        """Delete all evidence of a workspace. Returns rows deleted."""
        ...
