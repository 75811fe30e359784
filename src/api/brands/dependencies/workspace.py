"""FastAPI dependencies for workspaces and the ownership check."""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from brands.application.observability import DefaultWorkspaceRegistryProbe
from brands.application.services import WorkspaceRegistry
from brands.domain.aggregates import BrandWorkspace
from brands.infrastructure.brain_repository import BrandBrainRepository
from brands.infrastructure.evidence_repository import EvidenceRepository
from brands.infrastructure.workspace_cache import InMemoryWorkspaceCache
from brands.infrastructure.workspace_repository import BrandWorkspaceRepository
from brands.ports.exceptions import WorkspaceNotFoundError
from brands.ports.services import IWorkspaceCache
from iam.dependencies.user import get_current_user
from infrastructure.database.dependencies import get_write_session
from infrastructure.settings import get_cache_settings
from shared_kernel.auth import CurrentUser
from shared_kernel.middleware import http_error


@lru_cache
def get_workspace_cache() -> IWorkspaceCache:
    """Process-wide workspace lookup cache."""
    return InMemoryWorkspaceCache(
        ttl_seconds=get_cache_settings().workspace_ttl_seconds
    )


def get_workspace_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> BrandWorkspaceRepository:
    """Get BrandWorkspaceRepository bound to the request session."""
    return BrandWorkspaceRepository(session=session)


def get_brain_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> BrandBrainRepository:
    """Get BrandBrainRepository bound to the request session."""
    return BrandBrainRepository(session=session)


def get_evidence_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> EvidenceRepository:
    """Get EvidenceRepository bound to the request session."""
    return EvidenceRepository(session=session)


def get_workspace_registry(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    workspace_repository: Annotated[
        BrandWorkspaceRepository, Depends(get_workspace_repository)
    ],
    brain_repository: Annotated[BrandBrainRepository, Depends(get_brain_repository)],
    evidence_repository: Annotated[EvidenceRepository, Depends(get_evidence_repository)],
    cache: Annotated[IWorkspaceCache, Depends(get_workspace_cache)],
) -> WorkspaceRegistry:
    """Get WorkspaceRegistry instance.

    Args:
        session: Async database session
        workspace_repository: Workspace repository bound to the same session
        brain_repository: Brain repository bound to the same session
        evidence_repository: Evidence repository bound to the same session
        cache: Process-wide workspace cache

    Returns:
        WorkspaceRegistry instance
    """
    return WorkspaceRegistry(
        workspace_repository=workspace_repository,
        brain_repository=brain_repository,
        evidence_repository=evidence_repository,
        session=session,
        cache=cache,
        probe=DefaultWorkspaceRegistryProbe(),
    )


async def get_owned_workspace(
    slug: Annotated[str, Path(description="Brand workspace slug")],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    registry: Annotated[WorkspaceRegistry, Depends(get_workspace_registry)],
) -> BrandWorkspace:
    """Resolve ``{slug}`` to a workspace the current user owns.

    Raises:
        HTTPException: 404 if the workspace is missing or owned by someone else
    """
    try:
        return await registry.get_workspace(slug, current_user.user_id)
    except WorkspaceNotFoundError as e:
        raise http_error(e) from e
